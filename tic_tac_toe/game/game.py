from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from typing import Final, Literal, Protocol

from tic_tac_toe.game.board_utils import (
    CELL_COUNT,
    Board,
    PlayerSymbol,
    count_marks,
    empty_board,
    get_available_moves,
    other_player,
    winning_line,
)
from tic_tac_toe.util.errors import InvalidMoveError, LogicError

type GameMode = Literal["pvp", "pvc"]

GAME_MODES: Final[tuple[GameMode, ...]] = ("pvp", "pvc")
MODE_LABELS: Final[dict[GameMode, str]] = {"pvp": "Player vs Player", "pvc": "Player vs Computer"}

FIRST_PLAYER: Final[PlayerSymbol] = "X"
HUMAN_SYMBOL: Final[PlayerSymbol] = "X"  # In "pvc" mode
COMPUTER_SYMBOL: Final[PlayerSymbol] = "O"  # In "pvc" mode


@dataclass(frozen=True, slots=True)
class InProgress:
    pass


@dataclass(frozen=True, slots=True)
class Win:
    player: PlayerSymbol


@dataclass(frozen=True, slots=True)
class Draw:
    pass


type Outcome = InProgress | Win | Draw


@dataclass(frozen=True, slots=True)
class Move:
    player: PlayerSymbol
    index: int


@dataclass(frozen=True, slots=True)
class GameState:
    board: Board = field(default_factory=empty_board)
    current_player: PlayerSymbol = FIRST_PLAYER
    mode: GameMode = "pvp"
    move_count: int = 0
    outcome: Outcome = field(default_factory=InProgress)

    @property
    def is_over(self) -> bool:  # noqa: D102
        return not isinstance(self.outcome, InProgress)

    @property
    def winner(self) -> PlayerSymbol | None:  # noqa: D102
        return self.outcome.player if isinstance(self.outcome, Win) else None

    @property
    def available_moves(self) -> list[int]:  # noqa: D102
        if self.is_over:
            return []
        return get_available_moves(self.board)


class RandomSource(Protocol):
    """Anything with ``random.Random.choice`` semantics."""

    def choice[T](self, seq: Sequence[T]) -> T: ...  # noqa: D102


def new_game(mode: GameMode = "pvp") -> GameState:  # noqa: D103
    if mode not in GAME_MODES:
        msg = f"Unknown game mode: {mode}"
        raise ValueError(msg)
    return GameState(mode=mode)


def check_move(state: GameState, move: Move) -> None:
    """Raise InvalidMoveError if ``move`` cannot be applied to ``state``."""
    if not (0 <= move.index < CELL_COUNT):
        raise InvalidMoveError("Move out of bounds")

    if state.is_over:
        raise InvalidMoveError("Game over")

    if move.player != state.current_player:
        raise InvalidMoveError("Not your turn")

    if state.board[move.index] is not None:
        raise InvalidMoveError("Cell occupied")


def apply_move(state: GameState, move: Move) -> GameState:
    """Return the state that follows ``move``. ``state`` itself is left untouched."""
    check_move(state, move)

    board = list(state.board)
    board[move.index] = move.player
    new_board: Board = tuple(board)
    move_count = state.move_count + 1

    outcome: Outcome
    if winning_line(new_board, move.player) is not None:
        outcome = Win(move.player)
    elif move_count == CELL_COUNT:
        outcome = Draw()
    else:
        outcome = InProgress()

    new_state = replace(
        state,
        board=new_board,
        current_player=other_player(state.current_player),
        move_count=move_count,
        outcome=outcome,
    )
    if new_state.move_count != count_marks(new_state.board):
        raise LogicError("Move count out of sync with board")
    return new_state


def is_computer_turn(state: GameState) -> bool:  # noqa: D103
    return state.mode == "pvc" and state.current_player == COMPUTER_SYMBOL and not state.is_over


def choose_computer_move(state: GameState, rng: RandomSource) -> int:
    """Pick one of the empty cells uniformly at random."""
    if not is_computer_turn(state):
        raise LogicError("Computer move requested outside the computer's turn")

    choices = state.available_moves
    if not choices:
        raise LogicError("No moves available for the computer, but game not over")
    return rng.choice(choices)


def status_message(state: GameState) -> str:  # noqa: D103
    match state.outcome:
        case Win(player=player):
            return f"Player {player} wins"
        case Draw():
            return "Draw"
        case _:
            if is_computer_turn(state):
                return "Computer is thinking"
            return f"Player {state.current_player}'s turn"
