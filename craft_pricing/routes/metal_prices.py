from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from craft_pricing.core.config import settings
from craft_pricing.database.connection import get_db
from craft_pricing.dependencies.auth import get_price_update_service, require_admin
from craft_pricing.enums.metals import Metal
from craft_pricing.schemas.metal_price import (
    MetalPriceResponse,
    PriceHistoryPageResponse,
    PriceUpdateResponse,
    TestScrapeResponse,
    build_pagination,
)
from craft_pricing.services.price_ledger import get_latest_price, get_price_history
from craft_pricing.services.price_update_service import PriceUpdateService

router = APIRouter(prefix="/api", tags=["Metal Prices"])


# MANUAL TRIGGER
@router.post(
    "/{metal}/update",
    response_model=PriceUpdateResponse,
    dependencies=[Depends(require_admin)],
)
async def update_price(metal: Metal, service: PriceUpdateService = Depends(get_price_update_service)):
    # Scrape and ledger failures surface through the PricingError handler as 500.
    result = await service.fetch_and_save_price(metal)
    message = f"{metal.value.capitalize()} price saved" if result.saved else f"{metal.value.capitalize()} price unchanged"
    return {"message": message, "result": result.to_dict()}


# DRY RUN
@router.get(
    "/{metal}/test-scrape",
    response_model=TestScrapeResponse,
    dependencies=[Depends(require_admin)],
)
async def test_scrape(metal: Metal, service: PriceUpdateService = Depends(get_price_update_service)):
    scraped = await service.test_scrape(metal)
    return TestScrapeResponse(
        message="Scrape succeeded; nothing was saved",
        price=scraped.price,
        scraped_at=scraped.scraped_at,
        daily_change=scraped.daily_change,
    )


# CURRENT PRICE
@router.get("/{metal}/today", response_model=MetalPriceResponse)
def today(metal: Metal, db: Session = Depends(get_db)):
    record = get_latest_price(db, metal)
    if record is None:
        raise HTTPException(404, f"No {metal.value} price recorded yet")
    return record


# HISTORY
@router.get("/{metal}/history", response_model=PriceHistoryPageResponse)
def history(
    metal: Metal,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.PRICE_HISTORY_DEFAULT_LIMIT, ge=1, le=settings.PRICE_HISTORY_MAX_LIMIT),
    db: Session = Depends(get_db),
):
    items, total = get_price_history(db, metal, page=page, limit=limit)
    return PriceHistoryPageResponse(
        history=[MetalPriceResponse.model_validate(item) for item in items],
        pagination=build_pagination(page, limit, len(items), total),
    )
