from tic_tac_toe.event_bus.event_bus import EnableInput, EventBus, InputError, InvalidMove, StartTurn, StateUpdated
from tic_tac_toe.game.board_utils import PlayerSymbol
from tic_tac_toe.game.game import COMPUTER_SYMBOL
from tic_tac_toe.player.player import Player


class LocalPlayer(Player):
    """Human at this machine. Only plays when the computer doesn't own the turn."""

    def __init__(self, event_bus: EventBus, symbol: PlayerSymbol) -> None:
        super().__init__(event_bus, symbol)
        self._active = False
        self._event_bus.subscribe(StateUpdated, self._on_state_updated)
        self._event_bus.subscribe(InvalidMove, self._on_invalid_move)

    @property
    def active(self) -> bool:  # noqa: D102
        return self._active

    def _on_start_turn(self, event: StartTurn) -> None:
        computer_turn = event.mode == "pvc" and event.player == COMPUTER_SYMBOL
        self._active = self._symbol == event.player and not computer_turn
        if not self._active:
            return

        self._event_bus.publish(EnableInput(self._symbol))

    def _on_state_updated(self, _event: StateUpdated) -> None:
        # Every state change is followed by a StartTurn unless the game is over
        self._active = False

    def _on_invalid_move(self, event: InvalidMove) -> None:
        if self._symbol != event.player:
            return

        self._event_bus.publish(InputError(event.player, event.error_msg))
        if self._active:
            # Invalid move: request move again without switching player
            self._event_bus.publish(EnableInput(self._symbol))
