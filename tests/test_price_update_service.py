from datetime import datetime

import httpx
import pytest

from conftest import SessionFactory, run
from craft_pricing.core.config import Settings
from craft_pricing.core.exceptions import ScrapeNetworkError, ScrapeParseError
from craft_pricing.enums.metals import Metal
from craft_pricing.models.metal_price import SilverPrice
from craft_pricing.services.price_update_service import PriceUpdateService, build_price_update_service
from craft_pricing.services.scrapers.base import RawScrapeResult


class FakeScraper:
    def __init__(self, results):
        self.results = list(results)
        self.urls = []

    async def scrape(self, url):
        self.urls.append(url)
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def _service(db, scraper):
    return PriceUpdateService(
        SessionFactory(db),
        scrapers={Metal.silver: scraper},
        source_urls={Metal.silver: "https://bullion.example/silver"},
    )


SCRAPED_AT = datetime(2026, 10, 19, 2, 0)


def test_fetch_and_save_creates_then_reports_unchanged(db):
    scraper = FakeScraper([
        RawScrapeResult(price=1500.0, scraped_at=SCRAPED_AT, daily_change="+15"),
        RawScrapeResult(price=1500.0, scraped_at=SCRAPED_AT.replace(hour=3), daily_change="+15"),
    ])
    service = _service(db, scraper)

    first = run(service.fetch_and_save_price(Metal.silver))
    second = run(service.fetch_and_save_price(Metal.silver))

    assert first.to_dict() == {"price": 1500.0, "saved": True, "dailyChange": "+15"}
    assert second.saved is False
    assert scraper.urls == ["https://bullion.example/silver"] * 2
    assert db.query(SilverPrice).count() == 1


def test_scrape_failure_writes_nothing(db):
    scraper = FakeScraper([ScrapeNetworkError("boom", metal="silver", source="table_row")])
    service = _service(db, scraper)

    with pytest.raises(ScrapeNetworkError):
        run(service.fetch_and_save_price(Metal.silver))

    assert db.query(SilverPrice).count() == 0


def test_parse_failure_propagates_with_selector(db):
    error = ScrapeParseError("No table row labelled 'silver'", selector="table tbody tr")
    service = _service(db, FakeScraper([error]))

    with pytest.raises(ScrapeParseError) as exc_info:
        run(service.fetch_and_save_price("silver"))

    assert exc_info.value.selector == "table tbody tr"


def test_test_scrape_never_writes(db):
    scraper = FakeScraper([RawScrapeResult(price=1500.0, scraped_at=SCRAPED_AT)])
    result = run(_service(db, scraper).test_scrape(Metal.silver))

    assert result.price == 1500.0
    assert db.query(SilverPrice).count() == 0


def test_scraped_page_is_saved_once_per_day(db):
    page = """
    <table><tbody>
      <tr><td>Silver</td><td>tola</td><td>Rs. 1,234.50/tola</td><td>(+15)</td></tr>
    </tbody></table>
    """
    config = Settings(SECRET_KEY="test", SILVER_PRICE_URL="https://bullion.example/")
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text=page))
    service = build_price_update_service(config, session_factory=SessionFactory(db), transport=transport)

    first = run(service.fetch_and_save_price(Metal.silver))
    second = run(service.fetch_and_save_price(Metal.silver))

    assert first.to_dict() == {"price": 1234.50, "saved": True, "dailyChange": "+15"}
    assert second.saved is False
    assert db.query(SilverPrice).count() == 1


def test_stale_scrape_reports_stored_price_and_change(db):
    scraper = FakeScraper([
        RawScrapeResult(price=1520.0, scraped_at=SCRAPED_AT.replace(hour=5), daily_change="+20"),
        RawScrapeResult(price=1500.0, scraped_at=SCRAPED_AT, daily_change="+5"),
    ])
    service = _service(db, scraper)

    run(service.fetch_and_save_price(Metal.silver))
    stale = run(service.fetch_and_save_price(Metal.silver))

    assert stale.to_dict() == {"price": 1520.0, "saved": False, "dailyChange": "+20"}
