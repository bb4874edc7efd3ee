import asyncio
from typing import List

import pytest

from paging.signals import BehaviorSignal, Debouncer, Signal
from shared.scheduler import VirtualScheduler


def test_signal_delivers_in_subscription_order() -> None:
    signal: Signal[int] = Signal("numbers")
    seen: List[str] = []
    signal.subscribe(lambda v: seen.append(f"a{v}"))
    signal.subscribe(lambda v: seen.append(f"b{v}"))

    signal.emit(1)
    signal.emit(2)
    assert seen == ["a1", "b1", "a2", "b2"]


def test_cancelled_subscription_stops_receiving() -> None:
    signal: Signal[int] = Signal()
    seen: List[int] = []
    subscription = signal.subscribe(seen.append)
    signal.emit(1)
    subscription.cancel()
    subscription.cancel()
    signal.emit(2)
    assert seen == [1]


def test_behavior_signal_replays_latest_value() -> None:
    signal: BehaviorSignal[str] = BehaviorSignal("latest")
    assert not signal.has_value
    assert signal.get() is None
    with pytest.raises(LookupError):
        _ = signal.value

    signal.emit("a")
    signal.emit("b")
    seen: List[str] = []
    signal.subscribe(seen.append)
    assert seen == ["b"]
    assert signal.value == "b"


def test_stream_yields_emitted_values() -> None:
    async def scenario() -> List[int]:
        signal: Signal[int] = Signal()
        out: List[int] = []
        async with signal.stream() as values:
            signal.emit(1)
            signal.emit(2)
            async for value in values:
                out.append(value)
                if len(out) == 2:
                    break
        # Closed streams no longer receive values
        signal.emit(3)
        return out

    assert asyncio.run(scenario()) == [1, 2]


def test_debouncer_emits_last_value_after_quiet_period() -> None:
    scheduler = VirtualScheduler()
    debouncer: Debouncer[str] = Debouncer(0.3, scheduler)
    fired: List[tuple] = []
    debouncer.output.subscribe(lambda v: fired.append((v, scheduler.now())))

    debouncer.push("k")
    scheduler.advance(0.2)
    debouncer.push("ki")
    scheduler.advance(0.2)
    assert fired == []

    scheduler.advance(0.2)
    assert [v for v, _ in fired] == ["ki"]
    assert fired[0][1] == pytest.approx(0.5)


def test_debouncer_cancel_drops_pending_value() -> None:
    scheduler = VirtualScheduler()
    debouncer: Debouncer[str] = Debouncer(0.3, scheduler)
    fired: List[str] = []
    debouncer.output.subscribe(fired.append)

    debouncer.push("kick")
    debouncer.cancel()
    scheduler.advance(1.0)
    assert fired == []
