"""Message channels used to wire inputs and outputs of paginated views.

A :class:`Signal` delivers each emitted value synchronously to its subscribers
in subscription order. :class:`BehaviorSignal` additionally remembers the last
value and replays it to late subscribers. Any signal can be consumed as a lazy,
infinite async sequence through :meth:`Signal.stream`.

:class:`Debouncer` forwards a value only after a quiet period measured on an
injected :class:`shared.scheduler.Scheduler`.
"""

import asyncio
from typing import Callable, Generic, List, Optional, TypeVar

from shared.scheduler import Cancellable, Scheduler


T = TypeVar("T")

_MISSING = object()


class Subscription:
    """Handle returned by :meth:`Signal.subscribe`; call :meth:`cancel` to detach."""

    def __init__(self, signal: "Signal", callback: Callable) -> None:
        self._signal = signal
        self._callback = callback

    def cancel(self) -> None:
        self._signal._detach(self._callback)


class Signal(Generic[T]):
    """Hot, synchronous publish/subscribe channel.

    :param name: Label used in ``repr`` and log lines.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._subscribers: List[Callable[[T], None]] = []

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name or hex(id(self))}>"

    def subscribe(self, callback: Callable[[T], None]) -> Subscription:
        self._subscribers.append(callback)
        return Subscription(self, callback)

    def _detach(self, callback: Callable[[T], None]) -> None:
        try:
            self._subscribers.remove(callback)
        except ValueError:
            pass

    def emit(self, value: T) -> None:
        # Iterate over a copy so callbacks may subscribe or cancel while emitting
        for callback in list(self._subscribers):
            callback(value)

    def stream(self) -> "SignalStream[T]":
        """Return an async iterator over every value emitted from now on."""
        return SignalStream(self)


class BehaviorSignal(Signal[T]):
    """Signal that keeps its latest value and replays it on subscribe."""

    def __init__(self, name: str = "", initial: object = _MISSING) -> None:
        super().__init__(name)
        self._value = initial

    @property
    def has_value(self) -> bool:
        return self._value is not _MISSING

    @property
    def value(self) -> T:
        if self._value is _MISSING:
            raise LookupError(f"{self!r} has not emitted yet")
        return self._value  # type: ignore[return-value]

    def get(self, default: Optional[T] = None) -> Optional[T]:
        return default if self._value is _MISSING else self._value  # type: ignore[return-value]

    def subscribe(self, callback: Callable[[T], None]) -> Subscription:
        subscription = super().subscribe(callback)
        if self._value is not _MISSING:
            callback(self._value)  # type: ignore[arg-type]
        return subscription

    def emit(self, value: T) -> None:
        self._value = value
        super().emit(value)


class SignalStream(Generic[T]):
    """Async iterator fed by a signal through an unbounded queue.

    Usage::

        async with signal.stream() as values:
            async for value in values:
                ...
    """

    def __init__(self, signal: Signal[T]) -> None:
        self._queue: "asyncio.Queue[T]" = asyncio.Queue()
        self._subscription: Optional[Subscription] = signal.subscribe(
            self._queue.put_nowait
        )

    def __aiter__(self) -> "SignalStream[T]":
        return self

    async def __anext__(self) -> T:
        if self._subscription is None and self._queue.empty():
            raise StopAsyncIteration
        return await self._queue.get()

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None

    async def __aenter__(self) -> "SignalStream[T]":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()


class Debouncer(Generic[T]):
    """Emit the latest value on ``output`` once ``delay`` seconds pass without a new one.

    :param delay: Quiet period in seconds.
    :param scheduler: Time source used to schedule the delayed emission.
    """

    def __init__(self, delay: float, scheduler: Scheduler, name: str = "") -> None:
        self.delay = delay
        self.output: Signal[T] = Signal(name)
        self._scheduler = scheduler
        self._pending: Optional[Cancellable] = None

    def push(self, value: T) -> None:
        self.cancel()
        self._pending = self._scheduler.call_later(self.delay, lambda: self._fire(value))

    def cancel(self) -> None:
        """Drop the value waiting for the quiet period to elapse, if any."""
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _fire(self, value: T) -> None:
        self._pending = None
        self.output.emit(value)
