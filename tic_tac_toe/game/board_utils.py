from typing import Final, Literal

BOARD_SIZE: Final = 3
CELL_COUNT: Final = BOARD_SIZE * BOARD_SIZE

type PlayerSymbol = Literal["X", "O"]
type Cell = PlayerSymbol | None
type Board = tuple[Cell, ...]

# Checked in this order: rows, columns, diagonals.
LINES: Final[tuple[tuple[int, int, int], ...]] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


def empty_board() -> Board:  # noqa: D103
    return (None,) * CELL_COUNT


def other_player(player: PlayerSymbol) -> PlayerSymbol:  # noqa: D103
    return "O" if player == "X" else "X"


def to_row_col(index: int) -> tuple[int, int]:  # noqa: D103
    return divmod(index, BOARD_SIZE)


def to_index(row: int, col: int) -> int:  # noqa: D103
    return row * BOARD_SIZE + col


def is_board_full(board: Board) -> bool:  # noqa: D103
    return all(cell is not None for cell in board)


def get_available_moves(board: Board) -> list[int]:  # noqa: D103
    return [index for index, cell in enumerate(board) if cell is None]


def count_marks(board: Board) -> int:  # noqa: D103
    return sum(1 for cell in board if cell is not None)


def winning_line(board: Board, mark: PlayerSymbol | None = None) -> tuple[int, int, int] | None:
    """Return the first line held entirely by one mark.

    When ``mark`` is given, only lines of that mark count.
    """
    for line in LINES:
        a, b, c = line
        first = board[a]
        if first is None or (mark is not None and first != mark):
            continue
        if first == board[b] == board[c]:
            return line
    return None


def get_winner(board: Board) -> PlayerSymbol | None:  # noqa: D103
    line = winning_line(board)
    if line is None:
        return None
    return board[line[0]]


def is_draw(board: Board) -> bool:  # noqa: D103
    return is_board_full(board) and get_winner(board) is None
