# craft_pricing/services/scrapers/highlight_cell.py

"""Scraper for bullion boards that render each metal as a coloured cell."""

from typing import Optional

from bs4 import BeautifulSoup

from craft_pricing.services.scrapers.base import PriceScraper


class HighlightCellScraper(PriceScraper):
    """Locate a styled cell, then read nested price/change elements.

    The gold board marks its cell with ``background-color: #D4AF37`` and
    renders ``<h4><p>Rs. 1,86,000/tola</p></h4>`` with the change in
    ``<h5><p><b><font>(+500)</font></b></p></h5>``.
    """

    strategy = "highlight_cell"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        if self.metal.value not in self.selectors.get("cells", {}):
            raise ValueError(
                f"No highlight cell selector configured for {self.metal.value}"
            )

    def locate(self, soup: BeautifulSoup) -> tuple[str, Optional[str]]:
        cell_selector = self.selectors["cells"][self.metal.value]
        price_selector = self.selectors["price"]
        change_selector = self.selectors.get("change")

        cell = soup.select_one(cell_selector)
        if cell is None:
            raise self._parse_error(
                f"{self.metal.value.capitalize()} price cell not found",
                selector=cell_selector,
            )

        price_el = cell.select_one(price_selector)
        if price_el is None:
            raise self._parse_error(
                "Price element missing inside highlighted cell",
                selector=f"{cell_selector} {price_selector}",
            )

        change_text = None
        if change_selector:
            change_el = cell.select_one(change_selector)
            if change_el is not None:
                change_text = change_el.get_text(strip=True)

        return price_el.get_text(strip=True), change_text
