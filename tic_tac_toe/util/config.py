import argparse
import random
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final, Literal, cast

from tic_tac_toe.game.game import GAME_MODES, GameMode

type UiName = Literal["terminal", "pygame"]

UI_CHOICES: Final[tuple[UiName, ...]] = ("terminal", "pygame")
LOG_LEVELS: Final = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class GameConfig:
    mode: GameMode = "pvp"
    ui: UiName = "terminal"
    think_delay: float = 0.4  # Seconds the computer "thinks" before moving
    seed: int | None = None
    log_level: str = "WARNING"

    def make_rng(self) -> random.Random:
        """Random source for the computer player. Seeded runs are reproducible."""
        return random.Random(self.seed)


def build_parser() -> argparse.ArgumentParser:  # noqa: D103
    defaults = GameConfig()
    parser = argparse.ArgumentParser(prog="tic_tac_toe", description="Tic-Tac-Toe, against a friend or the computer.")

    parser.add_argument("--mode", choices=GAME_MODES, default=defaults.mode)
    parser.add_argument("--ui", choices=UI_CHOICES, default=defaults.ui)
    parser.add_argument("--delay", type=float, default=defaults.think_delay, help="computer thinking delay (seconds)")
    parser.add_argument("--seed", type=int, default=defaults.seed, help="seed for the computer's random moves")
    parser.add_argument("--log-level", type=str.upper, choices=LOG_LEVELS, default=defaults.log_level)

    return parser


def parse_config(argv: Sequence[str] | None = None) -> GameConfig:  # noqa: D103
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.delay < 0:
        parser.error("--delay must not be negative")

    return GameConfig(
        mode=cast("GameMode", args.mode),
        ui=cast("UiName", args.ui),
        think_delay=args.delay,
        seed=args.seed,
        log_level=args.log_level,
    )
