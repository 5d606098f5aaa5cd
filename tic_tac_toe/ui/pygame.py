from typing import Final

import pygame

from tic_tac_toe.event_bus.event_bus import EventBus, InputError, StateUpdated
from tic_tac_toe.game.board_utils import BOARD_SIZE, to_index, to_row_col, winning_line
from tic_tac_toe.game.game import GAME_MODES, GameMode, GameState
from tic_tac_toe.scheduler.scheduler import LoopScheduler
from tic_tac_toe.ui.ui import Ui


class PygameUi(Ui):
    TITLE: Final = "Tic-Tac-Toe (Pygame)"
    BOARD_PX: Final = 480
    CELL_SIZE: Final = BOARD_PX // BOARD_SIZE
    TOP_BAR: Final = 64
    STATUS_BAR: Final = 64
    WINDOW_SIZE: Final = (BOARD_PX, TOP_BAR + BOARD_PX + STATUS_BAR)
    LINE_WIDTH: Final = 4
    FPS: Final = 60

    BG_COLOR: Final = (0, 0, 0)
    LINE_COLOR: Final = (127, 127, 127)
    X_COLOR: Final = (191, 63, 63)
    O_COLOR: Final = (63, 63, 191)
    WIN_COLOR: Final = (255, 191, 63)
    TEXT_COLOR: Final = (255, 255, 255)
    BUTTON_COLOR: Final = (63, 63, 63)
    BUTTON_ACTIVE_COLOR: Final = (25, 118, 210)

    BUTTON_LABELS: Final[dict[GameMode, str]] = {"pvp": "PvP", "pvc": "PvC"}

    def __init__(self, event_bus: EventBus, scheduler: LoopScheduler) -> None:
        super().__init__(event_bus)
        self._scheduler = scheduler
        self._state: GameState | None = None
        self._status = ""
        self._error = ""
        self._running = False

        button_w, gap = 120, 16
        self._mode_buttons = {
            mode: pygame.Rect(gap + i * (button_w + gap), 12, button_w, self.TOP_BAR - 24)
            for i, mode in enumerate(GAME_MODES)
        }
        self._restart_button = pygame.Rect(self.BOARD_PX - gap - button_w, 12, button_w, self.TOP_BAR - 24)

    def start(self) -> None:  # noqa: D102
        pygame.init()
        self._screen = pygame.display.set_mode(self.WINDOW_SIZE)
        pygame.display.set_caption(self.TITLE)

        self._font = pygame.font.SysFont(None, 96)
        self._small_font = pygame.font.SysFont(None, 40)
        self._button_font = pygame.font.SysFont(None, 28)

        self._running = True
        self._set_started()
        self._main_loop()

    def stop(self) -> None:  # noqa: D102
        self._running = False

    # -----------------------------
    # Main loop
    # -----------------------------

    def _main_loop(self) -> None:
        clock = pygame.time.Clock()

        while self._running:
            clock.tick(self.FPS)
            self._scheduler.run_pending()  # Delayed computer moves run on this thread
            self._handle_events()
            self._render()

        self._scheduler.cancel_all()
        pygame.quit()

    # -----------------------------
    # Rendering
    # -----------------------------

    def _render(self) -> None:
        self._screen.fill(self.BG_COLOR)
        self._draw_buttons()
        self._draw_grid()
        self._draw_marks()
        self._draw_status()
        pygame.display.flip()

    def _draw_button(self, rect: pygame.Rect, label: str, *, active: bool) -> None:
        pygame.draw.rect(self._screen, self.BUTTON_ACTIVE_COLOR if active else self.BUTTON_COLOR, rect, border_radius=6)
        text = self._button_font.render(label, True, self.TEXT_COLOR)  # noqa: FBT003
        self._screen.blit(text, text.get_rect(center=rect.center))

    def _draw_buttons(self) -> None:
        current_mode = self._state.mode if self._state is not None else None
        for mode, rect in self._mode_buttons.items():
            self._draw_button(rect, self.BUTTON_LABELS[mode], active=mode == current_mode)
        self._draw_button(self._restart_button, "Restart", active=False)

    def _draw_grid(self) -> None:
        top = self.TOP_BAR
        for i in range(1, BOARD_SIZE):
            pygame.draw.line(
                self._screen,
                self.LINE_COLOR,
                (0, top + i * self.CELL_SIZE),
                (self.BOARD_PX, top + i * self.CELL_SIZE),
                self.LINE_WIDTH,
            )
            pygame.draw.line(
                self._screen,
                self.LINE_COLOR,
                (i * self.CELL_SIZE, top),
                (i * self.CELL_SIZE, top + self.BOARD_PX),
                self.LINE_WIDTH,
            )

    def _cell_center(self, index: int) -> tuple[int, int]:
        row, col = to_row_col(index)
        return col * self.CELL_SIZE + self.CELL_SIZE // 2, self.TOP_BAR + row * self.CELL_SIZE + self.CELL_SIZE // 2

    def _draw_marks(self) -> None:
        if self._state is None:
            return

        board = self._state.board
        line = winning_line(board)
        for index, value in enumerate(board):
            if value is None:
                continue
            if line is not None and index in line:
                color = self.WIN_COLOR
            else:
                color = self.X_COLOR if value == "X" else self.O_COLOR
            text = self._font.render(value, True, color)  # noqa: FBT003
            self._screen.blit(text, text.get_rect(center=self._cell_center(index)))

    def _draw_status(self) -> None:
        message = f"{self._status} ({self._error})" if self._error else self._status
        if not message:
            return

        text = self._small_font.render(message, True, self.TEXT_COLOR)  # noqa: FBT003
        center = (self.BOARD_PX // 2, self.TOP_BAR + self.BOARD_PX + self.STATUS_BAR // 2)
        self._screen.blit(text, text.get_rect(center=center))

    # -----------------------------
    # Event handling
    # -----------------------------

    def _handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.stop()
            elif event.type == pygame.MOUSEBUTTONDOWN:
                self._on_click(event.pos)

    def _on_click(self, pos: tuple[int, int]) -> None:
        for mode, rect in self._mode_buttons.items():
            if rect.collidepoint(pos):
                self._request_new_game(mode)
                return

        if self._restart_button.collidepoint(pos):
            self._request_new_game()
            return

        x, y = pos
        y -= self.TOP_BAR
        if not (0 <= x < self.BOARD_PX and 0 <= y < self.BOARD_PX):
            return

        self._request_move(to_index(y // self.CELL_SIZE, x // self.CELL_SIZE))

    def _on_state_updated(self, event: StateUpdated) -> None:
        self._disable_input()
        self._state = event.state
        self._status = event.status
        self._error = ""
        if self._started:
            pygame.display.set_caption(f"{self.TITLE} - {event.status}")

    def _on_input_error(self, event: InputError) -> None:
        self._error = event.error_msg  # Cleared by the next state update
