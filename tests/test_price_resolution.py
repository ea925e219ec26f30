from datetime import datetime

from conftest import make_category, make_fixed_price_product, make_silver_product, record_silver
from craft_pricing.enums.metals import CategoryType
from craft_pricing.schemas.product import ProductCreate
from craft_pricing.services.price_resolution import (
    PriceUnresolvable,
    ResolvedPrice,
    estimate_price_range,
    resolve_current_price,
    resolve_price,
)
from craft_pricing.services.product_service import create_product

SCRAPED_AT = datetime(2026, 10, 19, 2, 0)


def test_constant_price_wins_and_ignores_metal_rate(db):
    product = make_fixed_price_product(db, price=5000.0)

    assert resolve_price(product, 1000.0) == ResolvedPrice(price=5000.0)
    assert resolve_price(product, None) == ResolvedPrice(price=5000.0)


def test_silver_product_uses_rate_times_weight_plus_making_cost(db):
    product = make_silver_product(db, weight=2.0, making_cost=300.0)

    result = resolve_price(product, 1000.0)

    assert result == ResolvedPrice(price=2300.0, metal_rate_used=1000.0)


def test_zero_making_cost_is_allowed(db):
    product = make_silver_product(db, weight=1.5, making_cost=0.0)

    assert resolve_price(product, 1000.0).price == 1500.0


def test_silver_product_without_rate_is_unresolvable(db):
    product = make_silver_product(db)

    result = resolve_price(product, None)

    assert isinstance(result, PriceUnresolvable)
    assert "silver rate" in result.reason


def test_silver_product_missing_weight_is_unresolvable(db):
    category = make_category(db, "Custom Silver", CategoryType.customSilver)
    product = create_product(
        db,
        ProductCreate(title="Made to order Buddha", category_id=category.category_id, weight_min=3, weight_max=5, making_cost=500),
    )

    assert isinstance(resolve_price(product, 1000.0), PriceUnresolvable)
    assert estimate_price_range(product, 1000.0) == (3500.0, 5500.0)


def test_other_category_without_constant_price_is_unresolvable(db):
    category = make_category(db, "Thangka", CategoryType.other)
    product = create_product(db, ProductCreate(title="Thangka", category_id=category.category_id))

    result = resolve_price(product, 1000.0)

    assert isinstance(result, PriceUnresolvable)


def test_resolve_current_price_reads_latest_silver_record(db):
    product = make_silver_product(db, weight=2.0, making_cost=300.0)
    record_silver(db, 1000.0, SCRAPED_AT)

    assert resolve_current_price(db, product).price == 2300.0
