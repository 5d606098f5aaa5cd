"""Factory functions for creating game components.

Provides factories for creating:
- Players (local humans and the computer)
- Game engines
- UIs (terminal, pygame)
"""

from dataclasses import dataclass

from tic_tac_toe.engine.game_engine import GameEngine
from tic_tac_toe.event_bus.event_bus import EventBus
from tic_tac_toe.player.ai_player import ComputerPlayer
from tic_tac_toe.player.local_player import LocalPlayer
from tic_tac_toe.scheduler.scheduler import LoopScheduler, Scheduler, ThreadingScheduler
from tic_tac_toe.ui.ui import Ui
from tic_tac_toe.util.config import GameConfig, UiName


@dataclass
class GameSetup:
    event_bus: EventBus
    engine: GameEngine
    scheduler: Scheduler
    players: tuple[LocalPlayer, LocalPlayer, ComputerPlayer]


# ============================================================================
# Scheduler Factories
# ============================================================================


def create_scheduler(ui: UiName) -> Scheduler:
    """The pygame UI owns a main loop and pumps a LoopScheduler; the terminal UI blocks on input()."""
    match ui:
        case "pygame":
            return LoopScheduler()
        case "terminal":
            return ThreadingScheduler()
        case _:
            msg = f"Unknown UI: {ui}. Choose from 'terminal', 'pygame'."
            raise ValueError(msg)


# ============================================================================
# Game Factories
# ============================================================================


def create_game(config: GameConfig, scheduler: Scheduler, event_bus: EventBus | None = None) -> GameSetup:
    """Build the engine and every player. Both local players exist in every mode; the mode decides who plays."""
    event_bus = event_bus if event_bus is not None else EventBus()
    rng = config.make_rng()

    engine = GameEngine(event_bus, mode=config.mode, rng=rng)
    player_x = LocalPlayer(event_bus, "X")
    player_o = LocalPlayer(event_bus, "O")
    computer = ComputerPlayer(event_bus, scheduler, rng=rng, delay=config.think_delay)

    return GameSetup(event_bus, engine, scheduler, (player_x, player_o, computer))


# ============================================================================
# UI Factories
# ============================================================================


def create_ui(ui: UiName, setup: GameSetup) -> Ui:
    match ui:
        case "terminal":
            from tic_tac_toe.ui.terminal import TerminalUi  # noqa: PLC0415

            return TerminalUi(setup.event_bus)
        case "pygame":
            from tic_tac_toe.ui.pygame import PygameUi  # noqa: PLC0415

            if not isinstance(setup.scheduler, LoopScheduler):
                raise ValueError("The pygame UI needs a LoopScheduler")
            return PygameUi(setup.event_bus, setup.scheduler)
        case _:
            msg = f"Unknown UI: {ui}. Choose from 'terminal', 'pygame'."
            raise ValueError(msg)
