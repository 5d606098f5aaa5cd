from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

import pytest

from tic_tac_toe.engine.game_engine import GameEngine
from tic_tac_toe.event_bus.event_bus import EventBus, InputError, InvalidMove, StateUpdated
from tic_tac_toe.factories import GameSetup, create_game
from tic_tac_toe.game.game import GameMode, GameState
from tic_tac_toe.scheduler.scheduler import LoopScheduler
from tic_tac_toe.ui.ui import Ui
from tic_tac_toe.util.config import GameConfig


class FakeClock:
    """Manually advanced clock for LoopScheduler."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FirstChoice:
    """Deterministic random source: always picks the first candidate."""

    def __init__(self) -> None:
        self.seen: list[list[int]] = []

    def choice[T](self, seq: Sequence[T]) -> T:
        self.seen.append(list(seq))  # type: ignore[arg-type]
        return seq[0]


class FakeUI(Ui):
    """Fake UI implementation for testing."""

    def __init__(self, event_bus: EventBus) -> None:
        super().__init__(event_bus)
        self.states: list[StateUpdated] = []
        self.input_errors: list[str] = []
        self.end_message: str | None = None

    def start(self) -> None:
        """Start the game."""
        self._set_started()

    def stop(self) -> None:
        pass

    @property
    def game_finished(self) -> bool:
        return self.end_message is not None

    @property
    def last_state(self) -> GameState:
        return self.states[-1].state

    @property
    def last_status(self) -> str:
        return self.states[-1].status

    def _on_state_updated(self, event: StateUpdated) -> None:
        self._disable_input()
        self.states.append(event)
        self.end_message = event.status if event.state.is_over else None

    def _on_input_error(self, event: InputError) -> None:
        self.input_errors.append(event.error_msg)

    def simulate_move(self, index: int) -> None:
        """Simulate a user input move (for local players)."""
        if not self._input_enabled:
            raise RuntimeError("Input is not enabled - cannot move now")
        self._request_move(index)

    def simulate_new_game(self, mode: GameMode | None = None) -> None:
        self._request_new_game(mode)


@dataclass
class Harness:
    setup: GameSetup
    ui: FakeUI
    clock: FakeClock
    scheduler: LoopScheduler
    invalid_moves: list[InvalidMove] = field(default_factory=list)

    @property
    def engine(self) -> GameEngine:
        return self.setup.engine

    def think(self, seconds: float = 0.5) -> int:
        """Let the computer's thinking delay elapse."""
        self.clock.advance(seconds)
        return self.scheduler.run_pending()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_harness(clock: FakeClock) -> Callable[..., Harness]:
    def _make(mode: GameMode = "pvp", *, delay: float = 0.4, seed: int | None = 0, start: bool = True) -> Harness:
        scheduler = LoopScheduler(clock)
        setup = create_game(GameConfig(mode=mode, think_delay=delay, seed=seed), scheduler)
        ui = FakeUI(setup.event_bus)
        harness = Harness(setup, ui, clock, scheduler)
        setup.event_bus.subscribe(InvalidMove, harness.invalid_moves.append)
        ui.add_started_cb(setup.engine.start)
        if start:
            ui.start()
        return harness

    return _make
