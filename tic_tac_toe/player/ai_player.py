import logging
import random
from typing import Final

from tic_tac_toe.event_bus.event_bus import (
    BoardProvided,
    BoardRequested,
    EventBus,
    MoveRequested,
    StartTurn,
    StateUpdated,
)
from tic_tac_toe.game.game import COMPUTER_SYMBOL, RandomSource, choose_computer_move
from tic_tac_toe.player.player import Player
from tic_tac_toe.scheduler.scheduler import ScheduledCall, Scheduler

logger = logging.getLogger(__name__)


class ComputerPlayer(Player):
    """Plays O in "pvc" mode, picking a random empty cell after a short thinking delay.

    The pending move is tied to the engine generation it was scheduled for. Any newer
    StateUpdated cancels it, and the engine drops it anyway if it arrives late.
    """

    DEFAULT_DELAY: Final = 0.4

    def __init__(
        self,
        event_bus: EventBus,
        scheduler: Scheduler,
        *,
        rng: RandomSource | None = None,
        delay: float = DEFAULT_DELAY,
    ) -> None:
        super().__init__(event_bus, COMPUTER_SYMBOL)
        if delay < 0:
            msg = f"Thinking delay must not be negative: {delay}"
            raise ValueError(msg)
        self._scheduler = scheduler
        self._rng: RandomSource = rng if rng is not None else random.Random()
        self._delay = delay
        self._pending: ScheduledCall | None = None
        self._pending_generation: int | None = None

        self._event_bus.subscribe(StateUpdated, self._on_state_updated)
        self._event_bus.subscribe(BoardProvided, self._on_board_provided)

    @property
    def thinking(self) -> bool:  # noqa: D102
        return self._pending is not None and not (self._pending.cancelled or self._pending.done)

    def cancel(self) -> None:
        """Drop the pending move, if any."""
        if self._pending is not None:
            self._pending.cancel()
            logger.debug("Cancelled computer move for generation %s", self._pending_generation)
        self._pending = None
        self._pending_generation = None

    def _on_start_turn(self, event: StartTurn) -> None:
        if event.mode != "pvc" or event.player != self._symbol:
            return

        self.cancel()
        generation = event.generation
        self._pending_generation = generation
        self._pending = self._scheduler.call_later(self._delay, lambda: self._on_thinking_complete(generation))
        logger.debug("Computer thinking for %.2fs (generation %d)", self._delay, generation)

    def _on_state_updated(self, event: StateUpdated) -> None:
        if self._pending_generation is not None and event.generation != self._pending_generation:
            self.cancel()

    def _on_thinking_complete(self, generation: int) -> None:
        if generation != self._pending_generation:
            return
        self._pending = None

        # Ask for the board instead of trusting the one seen at StartTurn
        self._event_bus.publish(BoardRequested(self._symbol, generation))

    def _on_board_provided(self, event: BoardProvided) -> None:
        if event.player != self._symbol or event.generation != self._pending_generation:
            return
        self._pending_generation = None

        index = choose_computer_move(event.state, self._rng)
        self._event_bus.publish(MoveRequested(self._symbol, index, event.generation))
