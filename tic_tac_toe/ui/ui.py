from abc import ABC, abstractmethod
from collections.abc import Callable

from tic_tac_toe.event_bus.event_bus import (
    EnableInput,
    EventBus,
    InputError,
    MoveRequested,
    NewGameRequested,
    StateUpdated,
)
from tic_tac_toe.game.board_utils import PlayerSymbol
from tic_tac_toe.game.game import GameMode


class Ui(ABC):
    def __init__(self, event_bus: EventBus) -> None:
        self._event_bus = event_bus
        self._event_bus.subscribe(StateUpdated, self._on_state_updated)
        self._event_bus.subscribe(InputError, self._on_input_error)
        self._event_bus.subscribe(EnableInput, self._enable_input)
        self._started = False
        self._started_cbs: list[Callable[[], None]] = []
        self._input_enabled = False
        self._current_player: PlayerSymbol | None = None

    def add_started_cb(self, callback: Callable[[], None]) -> None:
        """Register a callback to run once the UI is ready to receive events (e.g. GameEngine.start)."""
        self._started_cbs.append(callback)

    @abstractmethod
    def start(self) -> None:  # noqa: D102
        pass

    def _set_started(self) -> None:
        self._started = True
        for callback in list(self._started_cbs):
            callback()

    @abstractmethod
    def stop(self) -> None:  # noqa: D102
        pass

    @property
    def started(self) -> bool:  # noqa: D102
        return self._started

    @property
    def input_enabled(self) -> bool:  # noqa: D102
        return self._input_enabled

    def _enable_input(self, event: EnableInput) -> None:
        self._current_player = event.player
        self._input_enabled = True

    def _disable_input(self) -> None:
        self._input_enabled = False

    def _request_move(self, index: int) -> None:
        if not self._input_enabled or self._current_player is None:
            return
        # Prevents sending multiple moves. The player re-enables input if the move is rejected.
        self._disable_input()
        self._event_bus.publish(MoveRequested(self._current_player, index))

    def _request_new_game(self, mode: GameMode | None = None) -> None:
        self._disable_input()
        self._event_bus.publish(NewGameRequested(mode))

    @abstractmethod
    def _on_state_updated(self, event: StateUpdated) -> None:
        pass

    @abstractmethod
    def _on_input_error(self, event: InputError) -> None:
        pass
