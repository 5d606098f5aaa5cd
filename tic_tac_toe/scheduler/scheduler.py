import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable


class ScheduledCall:
    """Handle for a callback scheduled with ``Scheduler.call_later``."""

    def __init__(self, callback: Callable[[], None], deadline: float) -> None:
        self._callback = callback
        self._deadline = deadline
        self._cancelled = False
        self._done = False
        self._timer: threading.Timer | None = None

    @property
    def deadline(self) -> float:  # noqa: D102
        return self._deadline

    @property
    def cancelled(self) -> bool:  # noqa: D102
        return self._cancelled

    @property
    def done(self) -> bool:  # noqa: D102
        return self._done

    def cancel(self) -> None:  # noqa: D102
        if self._done:
            return
        self._cancelled = True
        if self._timer is not None:
            self._timer.cancel()

    def _run(self) -> None:
        if self._cancelled or self._done:
            return
        self._done = True
        self._callback()


class Scheduler(ABC):
    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:  # noqa: D102
        pass

    @abstractmethod
    def cancel_all(self) -> None:  # noqa: D102
        pass


class ThreadingScheduler(Scheduler):
    """Runs each callback on its own daemon timer thread."""

    def __init__(self) -> None:
        self._calls: list[ScheduledCall] = []
        self._lock = threading.Lock()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:  # noqa: D102
        call = ScheduledCall(callback, time.monotonic() + delay)
        timer = threading.Timer(delay, call._run)  # noqa: SLF001
        timer.daemon = True
        call._timer = timer  # noqa: SLF001
        with self._lock:
            self._calls = [c for c in self._calls if not (c.done or c.cancelled)]
            self._calls.append(call)
        timer.start()
        return call

    def cancel_all(self) -> None:  # noqa: D102
        with self._lock:
            calls, self._calls = self._calls, []
        for call in calls:
            call.cancel()


class LoopScheduler(Scheduler):
    """Cooperative scheduler. The owner of the main loop calls run_pending() every iteration.

    Callbacks run on the thread that calls run_pending(), in deadline order.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._calls: list[ScheduledCall] = []
        self._lock = threading.Lock()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:  # noqa: D102
        call = ScheduledCall(callback, self._clock() + delay)
        with self._lock:
            self._calls.append(call)
        return call

    def run_pending(self) -> int:
        """Run every call whose deadline has passed. Returns how many ran."""
        now = self._clock()
        with self._lock:
            due = sorted((c for c in self._calls if c.deadline <= now), key=lambda c: c.deadline)
            self._calls = [c for c in self._calls if c.deadline > now and not c.cancelled]

        ran = 0
        for call in due:
            if call.cancelled:
                continue
            call._run()  # noqa: SLF001
            ran += 1
        return ran

    @property
    def pending(self) -> int:  # noqa: D102
        with self._lock:
            return sum(1 for c in self._calls if not c.cancelled)

    def cancel_all(self) -> None:  # noqa: D102
        with self._lock:
            calls, self._calls = self._calls, []
        for call in calls:
            call.cancel()
