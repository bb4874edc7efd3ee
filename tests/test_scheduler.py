import asyncio
from typing import List

import pytest

from shared.scheduler import LoopScheduler, VirtualScheduler


def test_virtual_scheduler_fires_in_due_order() -> None:
    scheduler = VirtualScheduler()
    fired: List[str] = []
    scheduler.call_later(0.2, lambda: fired.append("b"))
    scheduler.call_later(0.1, lambda: fired.append("a"))
    scheduler.call_later(0.2, lambda: fired.append("c"))

    scheduler.advance(0.15)
    assert fired == ["a"]
    scheduler.advance(0.1)
    assert fired == ["a", "b", "c"]
    assert scheduler.now() == pytest.approx(0.25)


def test_virtual_scheduler_cancel_and_nested_timers() -> None:
    scheduler = VirtualScheduler()
    fired: List[float] = []
    handle = scheduler.call_later(0.1, lambda: fired.append(-1.0))
    handle.cancel()
    scheduler.call_later(
        0.1,
        lambda: scheduler.call_later(0.1, lambda: fired.append(scheduler.now())),
    )
    assert scheduler.pending == 1

    scheduler.advance(0.5)
    assert fired == [pytest.approx(0.2)]
    assert scheduler.pending == 0


def test_virtual_scheduler_rejects_negative_advance() -> None:
    with pytest.raises(ValueError):
        VirtualScheduler().advance(-1)


def test_loop_scheduler_uses_running_loop() -> None:
    async def scenario() -> List[str]:
        scheduler = LoopScheduler()
        fired: List[str] = []
        start = scheduler.now()
        scheduler.call_later(0.01, lambda: fired.append("done"))
        await asyncio.sleep(0.05)
        assert scheduler.now() >= start
        return fired

    assert asyncio.run(scenario()) == ["done"]
