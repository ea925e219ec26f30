import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable, Dict, Iterable, Optional

from craft_pricing.core.config import Settings, settings as default_settings
from craft_pricing.core.timezone import to_local, utcnow
from craft_pricing.enums.metals import Metal
from craft_pricing.services.price_update_service import PriceUpdateResult, PriceUpdateService

logger = logging.getLogger("craft_pricing.scheduler")


# ---------- PRICE UPDATE SCHEDULER ----------

class PriceScheduler:
    """
    Periodically refreshes the metal ledgers inside a daily window.

    Owned by the application entry point: ``start()`` on startup,
    ``await stop()`` on shutdown. A failed update is logged and simply
    retried on the next tick.
    """

    def __init__(
        self,
        update_service: PriceUpdateService,
        interval_seconds: float,
        start_hour: int,
        end_hour: int,
        metals: Iterable[Metal] = (Metal.silver, Metal.gold),
        clock: Callable[[], datetime] = utcnow,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if not 0 <= start_hour <= end_hour <= 23:
            raise ValueError(f"Invalid active window {start_hour}-{end_hour}")
        self.update_service = update_service
        self.interval_seconds = interval_seconds
        self.start_hour = start_hour
        self.end_hour = end_hour
        self.metals = tuple(Metal(m) for m in metals)
        self._clock = clock
        self._sleep = sleep
        self._running = False
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def is_within_active_window(self, now: Optional[datetime] = None) -> bool:
        local = to_local(now or self._clock())
        return self.start_hour <= local.hour <= self.end_hour

    async def run_tick(self) -> Dict[Metal, Optional[PriceUpdateResult]]:
        """
        Update every metal once. One metal failing does not stop the others.
        """
        logger.info("Running scheduled price updates")
        results: Dict[Metal, Optional[PriceUpdateResult]] = {}
        for metal in self.metals:
            try:
                result = await self.update_service.fetch_and_save_price(metal)
            except Exception as e:
                logger.error("[%s] Scheduled update failed: %s", metal.value, e, exc_info=True)
                results[metal] = None
                continue
            logger.info(
                "[%s] Price %s at Rs. %s",
                metal.value,
                "saved" if result.saved else "unchanged",
                result.price,
            )
            results[metal] = result
        return results

    async def run(self, max_ticks: Optional[int] = None) -> None:
        """
        Loop until stopped (or ``max_ticks`` iterations have elapsed).
        """
        self._running = True
        ticks = 0
        while self._running:
            if self.is_within_active_window():
                await self.run_tick()
            else:
                logger.debug("Outside active window %02d-%02d, skipping", self.start_hour, self.end_hour)
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                break
            await self._sleep(self.interval_seconds)
        self._running = False

    def start(self) -> None:
        """Spawn the loop on the running event loop; no-op if already running."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self.run(), name="price-scheduler")
        logger.info(
            "Price scheduler started: every %.0f min between %02d:00 and %02d:59",
            self.interval_seconds / 60,
            self.start_hour,
            self.end_hour,
        )

    async def stop(self) -> None:
        self._running = False
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Price scheduler stopped")


def build_price_scheduler(
    update_service: PriceUpdateService,
    config: Settings = default_settings,
) -> PriceScheduler:
    return PriceScheduler(
        update_service,
        interval_seconds=config.SCHEDULER_INTERVAL_MINUTES * 60,
        start_hour=config.SCHEDULER_START_HOUR,
        end_hour=config.SCHEDULER_END_HOUR,
    )
