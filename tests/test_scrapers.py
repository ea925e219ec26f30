import httpx
import pytest

from conftest import run
from craft_pricing.core.exceptions import (
    ScrapeNetworkError,
    ScrapeParseError,
    ScrapeValueError,
)
from craft_pricing.enums.metals import Metal
from craft_pricing.services.scrapers.base import extract_price_number, parse_daily_change
from craft_pricing.services.scrapers.highlight_cell import HighlightCellScraper
from craft_pricing.services.scrapers.registry import build_scraper
from craft_pricing.services.scrapers.table_row import TableRowScraper

URL = "https://bullion.example/prices"

BULLION_TABLE = """
<html><body>
<table>
  <thead><tr><th>Metal</th><th>Unit</th><th>Price</th><th>Change</th></tr></thead>
  <tbody>
    <tr><td>Fine Gold (9999)</td><td>tola</td><td>1,86,000</td><td>(+500)</td></tr>
    <tr><td>Silver</td><td>tola</td><td>Rs. 1,234.50/tola</td><td>(+15)</td></tr>
  </tbody>
</table>
</body></html>
"""

GOLD_BOARD = """
<html><body><table><tr>
  <td style="background-color: #D4AF37; width: 50%">
    <h4><p>Rs. 1,86,000/tola</p></h4>
    <h5><p><b><font>(-300)</font></b></p></h5>
  </td>
</tr></table></body></html>
"""


def _transport(body: str = "", status_code: int = 200, exc: Exception = None):
    def handler(request: httpx.Request) -> httpx.Response:
        if exc is not None:
            raise exc
        return httpx.Response(status_code, text=body)

    return httpx.MockTransport(handler)


def test_extract_price_number_strips_currency_and_grouping():
    assert extract_price_number("Rs. 1,234.50/tola") == 1234.50
    assert extract_price_number("NPR 1,86,000") == 186000.0
    assert extract_price_number("n/a") is None


@pytest.mark.parametrize(
    "raw, expected",
    [("(+15)", "+15"), ("(-45.5)", "-45.5"), ("20", "+20"), ("(0)", "0"), ("unchanged", None), (None, None)],
)
def test_parse_daily_change(raw, expected):
    assert parse_daily_change(raw) == expected


def test_table_row_scraper_reads_labelled_row():
    scraper = TableRowScraper(Metal.silver, transport=_transport(BULLION_TABLE))
    result = run(scraper.scrape(URL))

    assert result.price == 1234.50
    assert result.daily_change == "+15"
    assert result.scraped_at is not None


def test_table_row_scraper_missing_row_names_selector():
    page = "<table><tbody><tr><td>Copper</td><td>kg</td><td>900</td></tr></tbody></table>"
    scraper = TableRowScraper(Metal.silver, transport=_transport(page))

    with pytest.raises(ScrapeParseError) as exc_info:
        run(scraper.scrape(URL))

    assert "table tbody tr" in exc_info.value.selector
    assert "silver" in str(exc_info.value)


def test_highlight_cell_scraper_reads_nested_price_and_change():
    scraper = HighlightCellScraper(Metal.gold, transport=_transport(GOLD_BOARD))
    result = run(scraper.scrape(URL))

    assert result.price == 186000.0
    assert result.daily_change == "-300"


def test_unparseable_change_does_not_fail_scrape():
    page = BULLION_TABLE.replace("(+15)", "n/a")
    scraper = TableRowScraper(Metal.silver, transport=_transport(page))

    result = run(scraper.scrape(URL))

    assert result.price == 1234.50
    assert result.daily_change is None


def test_highlight_cell_scraper_missing_cell():
    scraper = HighlightCellScraper(Metal.gold, transport=_transport("<html><body></body></html>"))

    with pytest.raises(ScrapeParseError) as exc_info:
        run(scraper.scrape(URL))

    assert "#D4AF37" in exc_info.value.selector


def test_non_positive_price_is_rejected():
    page = BULLION_TABLE.replace("Rs. 1,234.50/tola", "0")
    scraper = TableRowScraper(Metal.silver, transport=_transport(page))

    with pytest.raises(ScrapeValueError):
        run(scraper.scrape(URL))


def test_http_error_status_is_network_error():
    scraper = TableRowScraper(Metal.silver, transport=_transport(status_code=503))

    with pytest.raises(ScrapeNetworkError) as exc_info:
        run(scraper.scrape(URL))

    assert "503" in str(exc_info.value)


def test_timeout_is_network_error():
    scraper = TableRowScraper(
        Metal.silver,
        transport=_transport(exc=httpx.ReadTimeout("too slow")),
    )

    with pytest.raises(ScrapeNetworkError):
        run(scraper.scrape(URL))


def test_registry_builds_known_strategies_and_rejects_unknown():
    assert isinstance(build_scraper("table_row", Metal.silver), TableRowScraper)
    assert isinstance(build_scraper("highlight_cell", Metal.gold), HighlightCellScraper)

    with pytest.raises(ValueError):
        build_scraper("xpath_magic", Metal.silver)
