from typing import Optional, Type

import httpx

from craft_pricing.enums.metals import Metal
from craft_pricing.services.scrapers.base import PriceScraper
from craft_pricing.services.scrapers.highlight_cell import HighlightCellScraper
from craft_pricing.services.scrapers.table_row import TableRowScraper

SCRAPER_STRATEGIES: dict[str, Type[PriceScraper]] = {
    TableRowScraper.strategy: TableRowScraper,
    HighlightCellScraper.strategy: HighlightCellScraper,
}


def build_scraper(
    strategy: str,
    metal: Metal,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> PriceScraper:
    """Instantiate the scraper registered under ``strategy`` for ``metal``."""
    try:
        scraper_cls = SCRAPER_STRATEGIES[strategy]
    except KeyError:
        valid = ", ".join(sorted(SCRAPER_STRATEGIES))
        raise ValueError(f"Unknown scraper strategy '{strategy}' (available: {valid})") from None
    return scraper_cls(metal, timeout=timeout, transport=transport)
