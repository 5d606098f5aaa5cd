import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar, cast

from tic_tac_toe.game.board_utils import PlayerSymbol
from tic_tac_toe.game.game import GameMode, GameState

logger = logging.getLogger(__name__)


class Event:
    pass


@dataclass(frozen=True)
class StateUpdated(Event):
    state: GameState
    status: str
    generation: int


@dataclass(frozen=True)
class StartTurn(Event):
    player: PlayerSymbol
    mode: GameMode
    generation: int


@dataclass(frozen=True)
class MoveRequested(Event):
    player: PlayerSymbol
    index: int
    generation: int | None = None  # None: apply against whatever state is current


@dataclass(frozen=True)
class NewGameRequested(Event):
    mode: GameMode | None = None  # None: keep the previous mode


@dataclass(frozen=True)
class EnableInput(Event):
    player: PlayerSymbol


@dataclass(frozen=True)
class InvalidMove(Event):
    player: PlayerSymbol
    index: int
    error_msg: str


@dataclass(frozen=True)
class InputError(Event):
    player: PlayerSymbol
    error_msg: str


@dataclass(frozen=True)
class BoardRequested(Event):
    player: PlayerSymbol
    generation: int


@dataclass(frozen=True)
class BoardProvided(Event):
    player: PlayerSymbol
    state: GameState
    generation: int


E = TypeVar("E", bound=Event)


class EventBus:
    def __init__(self) -> None:
        self._handlers: dict[type[Event], list[Callable[[Event], None]]] = {}
        self._handlers_lock = threading.RLock()

    def subscribe(self, event_type: type[E], handler: Callable[[E], None]) -> None:  # noqa: D102
        with self._handlers_lock:
            self._handlers.setdefault(event_type, []).append(cast("Callable[[Event], None]", handler))

    def unsubscribe(self, event_type: type[E], handler: Callable[[E], None]) -> None:  # noqa: D102
        with self._handlers_lock:
            handlers = self._handlers.get(event_type)
            if not handlers:
                return
            try:
                handlers.remove(cast("Callable[[Event], None]", handler))
            except ValueError:
                return
            if not handlers:
                self._handlers.pop(event_type, None)

    def publish(self, event: Event) -> None:
        """Publish event synchronously (immediate delivery, blocking)."""
        with self._handlers_lock:
            handlers = self._handlers.get(type(event), []).copy()
        logger.debug("Publishing %s to %d handler(s)", event, len(handlers))
        for handler in handlers:
            handler(event)

    def close(self) -> None:  # noqa: D102
        with self._handlers_lock:
            self._handlers.clear()
