import logging
import random
import threading

from tic_tac_toe.event_bus.event_bus import (
    BoardProvided,
    BoardRequested,
    EventBus,
    InvalidMove,
    MoveRequested,
    NewGameRequested,
    StartTurn,
    StateUpdated,
)
from tic_tac_toe.game.game import (
    COMPUTER_SYMBOL,
    HUMAN_SYMBOL,
    GameMode,
    GameState,
    Move,
    RandomSource,
    Win,
    apply_move,
    choose_computer_move,
    is_computer_turn,
    new_game,
    status_message,
)
from tic_tac_toe.util.errors import InvalidMoveError

logger = logging.getLogger(__name__)


class GameEngine:
    """Sole owner of the current GameState.

    Every accepted move and every new game bumps ``generation``. Requests that carry an
    older generation (a computer move scheduled before a restart, for instance) are dropped.
    """

    def __init__(self, event_bus: EventBus, *, mode: GameMode = "pvp", rng: RandomSource | None = None) -> None:
        self._event_bus = event_bus
        self._rng: RandomSource = rng if rng is not None else random.Random()
        self._lock = threading.RLock()
        self._state = new_game(mode)
        self._generation = 0

        self._event_bus.subscribe(MoveRequested, self._on_move_requested)
        self._event_bus.subscribe(NewGameRequested, self._on_new_game_requested)
        self._event_bus.subscribe(BoardRequested, self._on_board_requested)

    @property
    def state(self) -> GameState:  # noqa: D102
        return self._state

    @property
    def generation(self) -> int:  # noqa: D102
        return self._generation

    @property
    def status(self) -> str:  # noqa: D102
        return status_message(self._state)

    def start(self) -> None:
        """Announce the current state and hand the first turn out."""
        with self._lock:
            self._publish_state_updated()
            self._publish_start_turn()

    def new_game(self, mode: GameMode | None = None) -> GameState:
        """Replace the current game with a fresh one. ``mode`` defaults to the previous mode."""
        with self._lock:
            self._state = new_game(mode if mode is not None else self._state.mode)
            self._generation += 1
            logger.info("New game (%s), generation %d", self._state.mode, self._generation)
            self._publish_state_updated()
            self._publish_start_turn()
            return self._state

    def apply_move(self, index: int) -> GameState:
        """Apply a human move at ``index``.

        Illegal moves leave the state unchanged; observers are told through an InvalidMove event.
        """
        with self._lock:
            player = HUMAN_SYMBOL if self._state.mode == "pvc" else self._state.current_player
            self._try_move(Move(player, index))
            return self._state

    def computer_move(self) -> int | None:
        """Play the computer's move right away. Returns the chosen index, or None if it isn't its turn."""
        with self._lock:
            if not is_computer_turn(self._state):
                logger.debug("Computer move ignored: not the computer's turn")
                return None
            index = choose_computer_move(self._state, self._rng)
            self._try_move(Move(COMPUTER_SYMBOL, index))
            return index

    def _try_move(self, move: Move) -> bool:
        try:
            self._state = apply_move(self._state, move)
        except InvalidMoveError as e:
            logger.debug("Rejected move %s: %s", move, e.reason)
            self._event_bus.publish(InvalidMove(move.player, move.index, e.reason))
            return False

        self._generation += 1
        logger.info("Player %s played %d (move %d)", move.player, move.index, self._state.move_count)
        if self._state.is_over:
            if isinstance(self._state.outcome, Win):
                logger.info("Game over: player %s wins", self._state.outcome.player)
            else:
                logger.info("Game over: draw")

        self._publish_state_updated()  # State updated after successful move
        self._publish_start_turn()  # Start next turn: active player will do its job
        return True

    def _on_move_requested(self, event: MoveRequested) -> None:
        with self._lock:
            if event.generation is not None and event.generation != self._generation:
                logger.debug(
                    "Discarding stale move %d by %s (generation %d, current %d)",
                    event.index,
                    event.player,
                    event.generation,
                    self._generation,
                )
                return
            self._try_move(Move(event.player, event.index))

    def _on_new_game_requested(self, event: NewGameRequested) -> None:
        self.new_game(event.mode)

    def _on_board_requested(self, event: BoardRequested) -> None:
        with self._lock:
            if event.generation != self._generation:
                logger.debug("Discarding stale board request from %s", event.player)
                return
            self._event_bus.publish(BoardProvided(event.player, self._state, self._generation))

    def _publish_state_updated(self) -> None:
        self._event_bus.publish(StateUpdated(self._state, status_message(self._state), self._generation))

    def _publish_start_turn(self) -> None:
        if not self._state.is_over:
            self._event_bus.publish(StartTurn(self._state.current_player, self._state.mode, self._generation))
