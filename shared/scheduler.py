"""Injectable time sources for timer-driven behaviour such as debouncing.

Two implementations share the :class:`Scheduler` protocol:

- :class:`LoopScheduler` defers to the running asyncio event loop (production).
- :class:`VirtualScheduler` keeps a manual clock that tests advance explicitly,
  so timing-dependent code runs deterministically without real delays.

Example::

    scheduler = VirtualScheduler()
    fired = []
    scheduler.call_later(0.3, lambda: fired.append(scheduler.now()))
    scheduler.advance(0.3)
    assert fired == [0.3]
"""

import asyncio
import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol


class Cancellable(Protocol):
    """Handle returned by :meth:`Scheduler.call_later`."""

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Time source able to run a callback after a delay."""

    def now(self) -> float:
        """Return the current time in seconds."""
        ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable:
        """Run ``callback`` once ``delay`` seconds have elapsed."""
        ...


class LoopScheduler:
    """Scheduler backed by an asyncio event loop.

    :param loop: Loop to schedule on. When omitted the loop running at call time
                 is used, so the scheduler can be built outside of a coroutine.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self._get_loop().time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable:
        return self._get_loop().call_later(delay, callback)


@dataclass(order=True)
class _Timer:
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class VirtualScheduler:
    """Manually advanced clock for deterministic tests.

    Timers fire in due-time order (ties in scheduling order) while
    :meth:`advance` moves the clock forward. A callback may schedule new
    timers; those fire during the same ``advance`` call when they fall inside
    the advanced window.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._timers: List[_Timer] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable:
        timer = _Timer(self._now + max(0.0, delay), next(self._seq), callback)
        heapq.heappush(self._timers, timer)
        return timer

    @property
    def pending(self) -> int:
        """Number of timers that are scheduled and not cancelled."""
        return sum(1 for t in self._timers if not t.cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward by ``seconds``, firing every due timer."""
        if seconds < 0:
            raise ValueError("Cannot move a clock backwards")
        target = self._now + seconds
        while self._timers and self._timers[0].due <= target:
            timer = heapq.heappop(self._timers)
            if timer.cancelled:
                continue
            self._now = timer.due
            timer.callback()
        self._now = target
