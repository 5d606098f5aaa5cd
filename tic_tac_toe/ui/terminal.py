# ruff: noqa: T201

import threading
from typing import Final, cast

from tic_tac_toe.event_bus.event_bus import EnableInput, EventBus, InputError, StateUpdated
from tic_tac_toe.game.board_utils import BOARD_SIZE, CELL_COUNT, Board
from tic_tac_toe.game.game import GAME_MODES, MODE_LABELS, GameMode
from tic_tac_toe.ui.ui import Ui


class TerminalUi(Ui):
    HELP: Final = (
        f"Commands: 1-{CELL_COUNT} to play a cell, 'restart' for a new game, "
        f"{' / '.join(repr(m) for m in GAME_MODES)} to switch mode, 'exit' to quit."
    )

    def __init__(self, event_bus: EventBus) -> None:
        super().__init__(event_bus)
        self._running = False
        self._print_lock = threading.Lock()

    def start(self) -> None:  # noqa: D102
        self._running = True
        self._print(self.HELP)
        self._set_started()
        self._input_loop()

    def stop(self) -> None:  # noqa: D102
        self._running = False

    def _input_loop(self) -> None:
        while self._running:
            try:
                input_str = input()
            except (KeyboardInterrupt, EOFError):
                self.stop()
                return
            self._handle_command(input_str.strip().lower())

    def _handle_command(self, command: str) -> None:
        match command:
            case "":
                return
            case "exit" | "quit":
                self.stop()
            case "restart":
                self._request_new_game()
            case "pvp" | "pvc":
                self._request_new_game(cast("GameMode", command))
            case "help":
                self._print(self.HELP)
            case _:
                self._handle_move(command)

    def _handle_move(self, command: str) -> None:
        if not self._input_enabled:
            self._print("Not accepting moves right now")
            return

        try:
            board_position = int(command)
        except ValueError:
            self._print(f"Unknown command: {command}")
            self._ask_for_move()
            return

        if not (1 <= board_position <= CELL_COUNT):
            self._print(f"Not between 1 and {CELL_COUNT}")
            self._ask_for_move()
            return

        self._request_move(board_position - 1)

    # -----------------------------
    # Rendering
    # -----------------------------

    @staticmethod
    def _format_board(board: Board) -> str:
        def _cell_value(index: int) -> str:
            value = board[index]
            return value if value is not None else str(index + 1)

        rows = []
        for r in range(BOARD_SIZE):
            start = r * BOARD_SIZE
            row = " | ".join(_cell_value(start + i) for i in range(BOARD_SIZE))
            rows.append(f" {row} ")

        return "\n-----------\n".join(rows)

    def _ask_for_move(self) -> None:
        with self._print_lock:
            print(f"Player {self._current_player}'s move (1-{CELL_COUNT}): ", end="", flush=True)

    def _print(self, msg: str) -> None:
        with self._print_lock:
            print(msg, flush=True)

    # -----------------------------
    # Event handling
    # -----------------------------

    def _enable_input(self, event: EnableInput) -> None:
        super()._enable_input(event)
        self._ask_for_move()

    def _on_state_updated(self, event: StateUpdated) -> None:
        self._disable_input()
        state = event.state
        self._print(f"\n[{MODE_LABELS[state.mode]}]\n{self._format_board(state.board)}\n\n{event.status}")
        if state.is_over:
            self._print("Type 'restart' to play again, or 'pvp' / 'pvc' to switch mode")

    def _on_input_error(self, event: InputError) -> None:
        self._print(event.error_msg)
