from datetime import datetime
from typing import List, Optional

from craft_pricing.schemas.common import CamelModel


class MetalPriceResponse(CamelModel):
    id: int
    price_per_tola: float
    effective_date: datetime
    trading_day: str
    last_scraped_at: datetime
    daily_change: Optional[str] = None


class PriceHistoryPagination(CamelModel):
    current_page: int
    total_pages: int
    total_records: int
    has_next: bool


class PriceHistoryPageResponse(CamelModel):
    history: List[MetalPriceResponse]
    pagination: PriceHistoryPagination


class PriceUpdateResultResponse(CamelModel):
    price: float
    saved: bool
    daily_change: Optional[str] = None


class PriceUpdateResponse(CamelModel):
    message: str
    result: PriceUpdateResultResponse


class TestScrapeResponse(CamelModel):
    message: str
    price: float
    scraped_at: datetime
    daily_change: Optional[str] = None


def build_pagination(page: int, limit: int, returned: int, total: int) -> PriceHistoryPagination:
    offset = (page - 1) * limit
    return PriceHistoryPagination(
        current_page=page,
        total_pages=(total + limit - 1) // limit if limit else 0,
        total_records=total,
        has_next=offset + returned < total,
    )
