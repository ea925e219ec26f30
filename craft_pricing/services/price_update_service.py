import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import httpx
from sqlalchemy.orm import Session

from craft_pricing.core.config import Settings, settings as default_settings
from craft_pricing.core.exceptions import ScrapeError, ScrapeParseError
from craft_pricing.database.connection import SessionLocal
from craft_pricing.enums.metals import Metal
from craft_pricing.services.price_ledger import upsert_daily_price
from craft_pricing.services.scrapers.base import PriceScraper, RawScrapeResult
from craft_pricing.services.scrapers.registry import build_scraper

logger = logging.getLogger("craft_pricing.price_update")


@dataclass
class PriceUpdateResult:
    price: float
    saved: bool
    daily_change: Optional[str] = None

    def to_dict(self) -> dict:
        return {"price": self.price, "saved": self.saved, "dailyChange": self.daily_change}


class PriceUpdateService:
    """Scrape one metal's source and record the result in its ledger.

    Safe to call repeatedly and from several callers (scheduler, admin
    trigger); idempotency comes from the ledger upsert rules.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        scrapers: Dict[Metal, PriceScraper],
        source_urls: Dict[Metal, str],
    ):
        self.session_factory = session_factory
        self.scrapers = scrapers
        self.source_urls = source_urls

    async def test_scrape(self, metal: Metal) -> RawScrapeResult:
        """Scrape without writing anything."""
        metal = Metal(metal)
        return await self.scrapers[metal].scrape(self.source_urls[metal])

    async def fetch_and_save_price(self, metal: Metal) -> PriceUpdateResult:
        metal = Metal(metal)
        scraper = self.scrapers[metal]
        try:
            scraped = await scraper.scrape(self.source_urls[metal])
        except ScrapeParseError as exc:
            logger.error(
                "[%s] Source layout changed? %s selector=%r url=%s",
                metal.value,
                exc,
                exc.selector,
                self.source_urls[metal],
            )
            raise
        except ScrapeError as exc:
            logger.warning("[%s] Scrape failed: %s", metal.value, exc)
            raise

        db = self.session_factory()
        try:
            upserted = upsert_daily_price(
                db,
                metal,
                price=scraped.price,
                scraped_at=scraped.scraped_at,
                daily_change=scraped.daily_change,
            )
        finally:
            db.close()

        # Unchanged and stale paths report the stored observation, not the scrape
        return PriceUpdateResult(
            price=upserted.price,
            saved=upserted.saved,
            daily_change=upserted.daily_change,
        )


def build_price_update_service(
    config: Settings = default_settings,
    session_factory: Callable[[], Session] = SessionLocal,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> PriceUpdateService:
    """Wire scrapers and source URLs from configuration."""
    strategies = {
        Metal.silver: config.SILVER_SCRAPER,
        Metal.gold: config.GOLD_SCRAPER,
    }
    scrapers = {
        metal: build_scraper(
            strategy,
            metal,
            timeout=config.SCRAPE_TIMEOUT_SECONDS,
            transport=transport,
        )
        for metal, strategy in strategies.items()
    }
    source_urls = {
        Metal.silver: config.SILVER_PRICE_URL,
        Metal.gold: config.GOLD_PRICE_URL,
    }
    return PriceUpdateService(session_factory, scrapers, source_urls)
