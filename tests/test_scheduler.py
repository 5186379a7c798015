"""Tests for the refresh scheduler."""

import asyncio

from meal_dashboard.services.scheduler import RefreshScheduler
from tests.conftest import make_record


def test_scheduler_refreshes_immediately_and_periodically(service, store) -> None:
    store.add(make_record("uno_1", lunch=2))
    scheduler = RefreshScheduler(service, refresh_interval_seconds=0.05)

    async def run() -> int:
        await scheduler.start()
        await asyncio.sleep(0.21)
        await scheduler.stop()
        return len(store.fetches)

    total_fetches = asyncio.run(run())

    assert total_fetches >= 9
    assert service.latest is not None
    assert service.latest.grand_total == 2
    assert not scheduler.running


def test_scheduler_survives_failing_refresh(service) -> None:
    calls: list[int] = []

    async def broken_refresh():  # type: ignore[no-untyped-def]
        calls.append(1)
        raise RuntimeError("boom")

    service.refresh = broken_refresh
    scheduler = RefreshScheduler(service, refresh_interval_seconds=0.02)

    async def run() -> None:
        await scheduler.start()
        await asyncio.sleep(0.1)
        assert scheduler.running
        await scheduler.stop()

    asyncio.run(run())

    assert len(calls) >= 2


def test_scheduler_highlight_timer_is_independent(service, clock, view) -> None:
    scheduler = RefreshScheduler(
        service, refresh_interval_seconds=10, highlight_interval_seconds=0.02
    )

    async def run() -> None:
        await scheduler.start()
        await asyncio.sleep(0.01)
        clock.set_hour(7)
        await asyncio.sleep(0.08)
        await scheduler.stop()

    asyncio.run(run())

    assert str(view.active_rows) == "breakfast"


def test_scheduler_start_and_stop_are_idempotent(service) -> None:
    scheduler = RefreshScheduler(service, refresh_interval_seconds=10)

    async def run() -> None:
        await scheduler.stop()
        await scheduler.start()
        timers = list(scheduler._timers)
        await scheduler.start()
        assert scheduler._timers == timers
        await scheduler.stop()
        await scheduler.stop()

    asyncio.run(run())

    assert not scheduler.running
