"""
Sell-price resolution for catalogue products.

``resolve_price`` is pure: callers hand it the product and the latest silver
ledger record. ``resolve_current_price`` is the I/O wrapper used by the cart
and order features.
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from sqlalchemy.orm import Session

from craft_pricing.enums.metals import SILVER_PRICED_TYPES, CategoryType, Metal
from craft_pricing.models.product import Product
from craft_pricing.services.price_ledger import get_latest_price


@dataclass(frozen=True)
class ResolvedPrice:
    price: float
    metal_rate_used: Optional[float] = None


@dataclass(frozen=True)
class PriceUnresolvable:
    """Not enough data to price the product now; show "price on request"."""

    reason: str


PriceResolution = Union[ResolvedPrice, PriceUnresolvable]


def _rate_of(latest_silver: Any) -> Optional[float]:
    if latest_silver is None:
        return None
    if isinstance(latest_silver, (int, float)):
        return float(latest_silver)
    return float(latest_silver.price_per_tola)


def resolve_price(product: Product, latest_silver: Any) -> PriceResolution:
    """
    Price a product from its own data and the latest silver record.

    1. constant price wins, metal rate ignored
    2. silver-priced categories: rate * weight_in_tola + making_cost
    3. anything else cannot be priced
    """
    if product.constant_price is not None:
        return ResolvedPrice(price=float(product.constant_price))

    category_type = product.category_type
    if category_type not in SILVER_PRICED_TYPES:
        return PriceUnresolvable(f"No pricing rule for '{category_type.value}' products")

    if product.weight_in_tola is None or product.making_cost is None:
        return PriceUnresolvable("Weight or making cost not set")

    rate = _rate_of(latest_silver)
    if rate is None:
        return PriceUnresolvable("No silver rate recorded yet")

    price = rate * float(product.weight_in_tola) + float(product.making_cost)
    return ResolvedPrice(price=round(price, 2), metal_rate_used=rate)


def estimate_price_range(product: Product, latest_silver: Any) -> Optional[Tuple[float, float]]:
    """Low/high estimate for made-to-order silver items with a weight range."""
    if product.category_type != CategoryType.customSilver:
        return None
    if product.weight_min is None or product.weight_max is None:
        return None
    rate = _rate_of(latest_silver)
    if rate is None:
        return None
    making_cost = float(product.making_cost or 0.0)
    low = rate * float(product.weight_min) + making_cost
    high = rate * float(product.weight_max) + making_cost
    return round(min(low, high), 2), round(max(low, high), 2)


def latest_silver_for(db: Session, product: Product):
    """Only silver-priced products need the ledger read."""
    if product.constant_price is None and product.category_type in SILVER_PRICED_TYPES:
        return get_latest_price(db, Metal.silver)
    return None


def resolve_current_price(db: Session, product: Product) -> PriceResolution:
    return resolve_price(product, latest_silver_for(db, product))
