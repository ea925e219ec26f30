"""Abstract base class for bullion price scrapers.

A scraper is a pure fetch + parse + validate step: it never touches the
ledger. Each source layout is a subclass that only knows how to locate the
price (and optional change) text in a parsed page; the selectors it uses
come from ``core/selectors.json`` so a layout change is a one-place edit.
"""

import json
import logging
import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import httpx
from bs4 import BeautifulSoup

from craft_pricing.core.config import settings
from craft_pricing.core.exceptions import (
    ScrapeNetworkError,
    ScrapeParseError,
    ScrapeValueError,
)
from craft_pricing.core.timezone import utcnow
from craft_pricing.enums.metals import Metal

SELECTORS_PATH = Path(__file__).resolve().parent.parent.parent / "core" / "selectors.json"

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/131.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

# Currency and unit annotations around the number, e.g. "Rs. 1,234.50/tola"
_PRICE_NOISE_RE = re.compile(r"n?rs\.?|npr|/\s*tola|,", re.IGNORECASE)
_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")
_CHANGE_RE = re.compile(r"^([+-]?)\s*(\d+(?:\.\d+)?)$")


@dataclass
class RawScrapeResult:
    """Normalised output of one successful scrape."""

    price: float
    scraped_at: datetime
    daily_change: Optional[str] = None


def extract_price_number(text: Optional[str]) -> Optional[float]:
    """Pull the first number out of a price string, or None if there is none."""
    if not text:
        return None
    cleaned = _PRICE_NOISE_RE.sub("", text)
    match = _NUMBER_RE.search(cleaned)
    if not match:
        return None
    return float(match.group(0))


def parse_daily_change(text: Optional[str]) -> Optional[str]:
    """Normalise a change annotation like ``"(+15)"`` to ``"+15"``.

    Best effort: anything unrecognisable yields None.
    """
    if not text:
        return None
    cleaned = (
        text.replace("−", "-")
        .replace("(", "")
        .replace(")", "")
    )
    cleaned = _PRICE_NOISE_RE.sub("", cleaned).strip()
    match = _CHANGE_RE.match(cleaned)
    if not match:
        return None
    sign, number = match.groups()
    if float(number) == 0:
        return "0"
    return f"{sign or '+'}{number}"


def load_selectors(strategy: str, path: Path = SELECTORS_PATH) -> dict[str, Any]:
    """Load the selector block for one source strategy."""
    with open(path, encoding="utf-8") as f:
        all_selectors: dict[str, Any] = json.load(f)
    return all_selectors.get(strategy, {})


class PriceScraper(ABC):
    """Common fetch/validate pipeline; subclasses locate the price text."""

    strategy: str = ""

    def __init__(
        self,
        metal: Metal,
        timeout: Optional[float] = None,
        selectors: Optional[dict[str, Any]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.metal = Metal(metal)
        self.logger = logging.getLogger(f"craft_pricing.scraper.{self.strategy}")
        self.selectors: dict[str, Any] = (
            selectors if selectors is not None else load_selectors(self.strategy)
        )
        self.timeout = timeout or settings.SCRAPE_TIMEOUT_SECONDS
        self._transport = transport

    async def scrape(self, url: str) -> RawScrapeResult:
        """Fetch ``url`` and return the normalised price for this metal."""
        html = await self._fetch(url)
        soup = BeautifulSoup(html, "html.parser")

        price_text, change_text = self.locate(soup)
        price = self._parse_price(price_text)
        daily_change = parse_daily_change(change_text)
        if change_text and daily_change is None:
            self.logger.debug(
                "[%s] Ignoring unparseable daily change %r", self.metal.value, change_text
            )

        # Stamped after parsing so ordering reflects when the value was seen
        scraped_at = utcnow()
        self.logger.info(
            "[%s] Scraped price Rs. %s (change: %s) via %s",
            self.metal.value,
            price,
            daily_change,
            self.strategy,
        )
        return RawScrapeResult(price=price, scraped_at=scraped_at, daily_change=daily_change)

    async def _fetch(self, url: str) -> str:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers=DEFAULT_HEADERS,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                resp = await client.get(url)
                resp.raise_for_status()
        except httpx.TimeoutException as exc:
            raise self._network_error(f"Timed out after {self.timeout}s fetching {url}") from exc
        except httpx.HTTPStatusError as exc:
            raise self._network_error(
                f"HTTP {exc.response.status_code} from {url}"
            ) from exc
        except httpx.HTTPError as exc:
            raise self._network_error(f"Could not reach {url}: {exc}") from exc
        return resp.text

    def _parse_price(self, text: str) -> float:
        value = extract_price_number(text)
        if value is None or not math.isfinite(value) or value <= 0:
            raise ScrapeValueError(
                "Price text is not a positive number",
                raw_text=text,
                metal=self.metal.value,
                source=self.strategy,
            )
        return value

    def _network_error(self, message: str) -> ScrapeNetworkError:
        return ScrapeNetworkError(message, metal=self.metal.value, source=self.strategy)

    def _parse_error(self, message: str, selector: str) -> ScrapeParseError:
        return ScrapeParseError(
            message, selector=selector, metal=self.metal.value, source=self.strategy
        )

    @abstractmethod
    def locate(self, soup: BeautifulSoup) -> tuple[str, Optional[str]]:
        """Return ``(price_text, change_text)``; raise ScrapeParseError if absent."""
        ...
