from typing import Optional


class PricingError(Exception):
    """Base class for failures in the metal pricing pipeline."""


class ScrapeError(PricingError):
    """A single scrape attempt against a price source failed."""

    def __init__(self, message: str, metal: Optional[str] = None, source: Optional[str] = None):
        self.metal = metal
        self.source = source
        prefix = f"[{metal or '?'}:{source or '?'}] "
        super().__init__(prefix + message)


class ScrapeNetworkError(ScrapeError):
    """Source unreachable, timed out or answered with a non-2xx status."""


class ScrapeParseError(ScrapeError):
    """The expected element is missing from the page (layout changed)."""

    def __init__(self, message: str, selector: str, metal: Optional[str] = None, source: Optional[str] = None):
        self.selector = selector
        super().__init__(f"{message} (selector: {selector!r})", metal=metal, source=source)


class ScrapeValueError(ScrapeError):
    """Extracted text did not parse to a finite positive number."""

    def __init__(self, message: str, raw_text: str, metal: Optional[str] = None, source: Optional[str] = None):
        self.raw_text = raw_text
        super().__init__(f"{message}: {raw_text!r}", metal=metal, source=source)


class LedgerWriteError(PricingError):
    """The price ledger could not be written; nothing was persisted."""
