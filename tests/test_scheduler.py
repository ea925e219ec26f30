import asyncio
from datetime import datetime

import pytest

from conftest import run
from craft_pricing.core.exceptions import ScrapeNetworkError
from craft_pricing.enums.metals import Metal
from craft_pricing.services.price_update_service import PriceUpdateResult
from craft_pricing.services.scheduler_service import PriceScheduler

# naive UTC for 2026-10-19 at the given NPT wall-clock time
NPT_0445 = datetime(2026, 10, 18, 23, 0)
NPT_0500 = datetime(2026, 10, 18, 23, 15)
NPT_1359 = datetime(2026, 10, 19, 8, 14)
NPT_1400 = datetime(2026, 10, 19, 8, 15)


class RecordingUpdateService:
    def __init__(self, failing=()):
        self.failing = set(failing)
        self.calls = []

    async def fetch_and_save_price(self, metal):
        self.calls.append(metal)
        if metal in self.failing:
            raise ScrapeNetworkError("source down", metal=metal.value, source="test")
        return PriceUpdateResult(price=1500.0, saved=True, daily_change="+10")


def _scheduler(service, clock=lambda: NPT_0500, sleep=None):
    async def no_sleep(_):
        return None

    return PriceScheduler(
        service,
        interval_seconds=900,
        start_hour=5,
        end_hour=13,
        clock=clock,
        sleep=sleep or no_sleep,
    )


@pytest.mark.parametrize(
    "now, expected",
    [(NPT_0445, False), (NPT_0500, True), (NPT_1359, True), (NPT_1400, False)],
)
def test_active_window_is_inclusive_of_end_hour(now, expected):
    assert _scheduler(RecordingUpdateService()).is_within_active_window(now) is expected


def test_invalid_window_rejected():
    with pytest.raises(ValueError):
        PriceScheduler(RecordingUpdateService(), 900, start_hour=14, end_hour=5)


def test_tick_updates_silver_then_gold():
    service = RecordingUpdateService()
    results = run(_scheduler(service).run_tick())

    assert service.calls == [Metal.silver, Metal.gold]
    assert results[Metal.silver].saved is True


def test_one_metal_failing_does_not_stop_the_other():
    service = RecordingUpdateService(failing={Metal.silver})
    results = run(_scheduler(service).run_tick())

    assert service.calls == [Metal.silver, Metal.gold]
    assert results[Metal.silver] is None
    assert results[Metal.gold].price == 1500.0


def test_run_skips_ticks_outside_window():
    service = RecordingUpdateService()
    run(_scheduler(service, clock=lambda: NPT_0445).run(max_ticks=3))

    assert service.calls == []


def test_run_sleeps_interval_between_ticks():
    service = RecordingUpdateService()
    sleeps = []

    async def fake_sleep(seconds):
        sleeps.append(seconds)

    run(_scheduler(service, sleep=fake_sleep).run(max_ticks=2))

    assert len(service.calls) == 4
    assert sleeps == [900]


def test_start_and_stop_manage_background_task():
    service = RecordingUpdateService()

    async def scenario():
        scheduler = _scheduler(service, sleep=asyncio.sleep)
        scheduler.interval_seconds = 3600
        scheduler.start()
        assert scheduler.is_running
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        await scheduler.stop()
        return scheduler

    scheduler = run(scenario())
    assert not scheduler.is_running
    assert service.calls[:2] == [Metal.silver, Metal.gold]
