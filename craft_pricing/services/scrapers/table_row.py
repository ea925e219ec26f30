# craft_pricing/services/scrapers/table_row.py

"""Scraper for bullion tables where each metal is one labelled row."""

from typing import Optional

from bs4 import BeautifulSoup

from craft_pricing.services.scrapers.base import PriceScraper


class TableRowScraper(PriceScraper):
    """Locate the row whose first cell equals the metal label.

    Used for the sharesansar.com bullion table, where the silver price sits
    in the third column of the row labelled ``Silver``.
    """

    strategy = "table_row"

    def locate(self, soup: BeautifulSoup) -> tuple[str, Optional[str]]:
        rows_selector = self.selectors["rows"]
        cell_selector = self.selectors.get("label_cell", "td")
        label = self.selectors["labels"][self.metal.value].strip().lower()
        price_column = int(self.selectors["price_column"])
        change_column = self.selectors.get("change_column")

        for row in soup.select(rows_selector):
            cells = row.select(cell_selector)
            if not cells or cells[0].get_text(strip=True).lower() != label:
                continue

            if len(cells) <= price_column:
                raise self._parse_error(
                    f"Row '{label}' has no price column {price_column}",
                    selector=f"{rows_selector} > {cell_selector}[{price_column}]",
                )
            price_text = cells[price_column].get_text(strip=True)

            change_text = None
            if change_column is not None and len(cells) > int(change_column):
                change_text = cells[int(change_column)].get_text(strip=True)
            return price_text, change_text

        raise self._parse_error(
            f"No table row labelled '{label}'",
            selector=f"{rows_selector} > {cell_selector}:first-child == '{label}'",
        )
