from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from craft_pricing.database.connection import get_db
from craft_pricing.schemas.product import PriceRange, ProductPriceResponse
from craft_pricing.services.price_resolution import (
    ResolvedPrice,
    estimate_price_range,
    latest_silver_for,
    resolve_price,
)
from craft_pricing.services.product_service import get_product

router = APIRouter(prefix="/api/products", tags=["Product Pricing"])


# CURRENT SELL PRICE
@router.get("/{product_id}/price", response_model=ProductPriceResponse)
def product_price(product_id: int, db: Session = Depends(get_db)):
    product = get_product(db, product_id)
    if not product:
        raise HTTPException(404, "Product not found")

    latest_silver = latest_silver_for(db, product)
    resolution = resolve_price(product, latest_silver)

    response = ProductPriceResponse(
        product_id=product.id,
        title=product.title,
        category_type=product.category_type,
    )
    if isinstance(resolution, ResolvedPrice):
        response.price = resolution.price
        response.metal_rate_used = resolution.metal_rate_used
        return response

    response.price_on_request = True
    response.reason = resolution.reason
    estimate = estimate_price_range(product, latest_silver)
    if estimate is not None:
        response.estimated_range = PriceRange(low=estimate[0], high=estimate[1])
    return response
