import logging
import uuid
from typing import List, Optional, Tuple

from fastapi import HTTPException
from sqlalchemy.orm import Session

from craft_pricing.enums.metals import OrderStatus
from craft_pricing.models.order import Order
from craft_pricing.schemas.order import OrderCreate, OrderUpdate
from craft_pricing.services.price_resolution import ResolvedPrice, resolve_current_price
from craft_pricing.services.product_service import get_product

logger = logging.getLogger("craft_pricing.orders")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def generate_order_id() -> str:
    return f"ORD_{uuid.uuid4().hex[:8].upper()}"


def _total(unit_price: Optional[float], quantity: int) -> Optional[float]:
    if unit_price is None:
        return None
    return round(unit_price * quantity, 2)


# ---------- CREATE ----------

def create_order(db: Session, data: OrderCreate) -> Order:
    """Place a single-product order, freezing the unit price resolved right now."""
    product = get_product(db, data.product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")

    resolution = resolve_current_price(db, product)
    unit_price = None
    metal_rate = None
    if isinstance(resolution, ResolvedPrice):
        unit_price = resolution.price
        metal_rate = resolution.metal_rate_used
    else:
        logger.info("Order for product %s placed without a price: %s", product.id, resolution.reason)

    order = Order(
        order_id=generate_order_id(),
        customer_name=data.customer_name.strip(),
        customer_phone=data.customer_phone.strip(),
        customer_email=data.customer_email,
        customer_address=data.customer_address,
        product=product,
        quantity=data.quantity,
        notes=data.notes,
        customization=data.customization,
        price_snapshot=unit_price,
        silver_price_snapshot=metal_rate,
        total_price=_total(unit_price, data.quantity),
        status=OrderStatus.pending,
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    logger.info("Order %s created (total=%s)", order.order_id, order.total_price)
    return order


# ---------- READ ----------

def get_order(db: Session, order_id: str) -> Optional[Order]:
    return db.query(Order).filter(Order.order_id == order_id).first()


def list_orders(
    db: Session,
    status: Optional[OrderStatus] = None,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> Tuple[List[Order], int]:
    """
    Returns (orders, total_count), newest first.
    page is 1-based.
    """
    if page < 1:
        page = 1
    if page_size < 1:
        page_size = DEFAULT_PAGE_SIZE
    if page_size > MAX_PAGE_SIZE:
        page_size = MAX_PAGE_SIZE

    query = db.query(Order)
    if status:
        query = query.filter(Order.status == status)

    total = query.count()
    orders = (
        query.order_by(Order.created_at.desc(), Order.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return orders, total


# ---------- UPDATE / DELETE ----------

def update_order(db: Session, order_id: str, data: OrderUpdate) -> Optional[Order]:
    order = get_order(db, order_id)
    if not order:
        return None

    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if value is not None:
            setattr(order, field, value)

    # The unit snapshot stays frozen; only the multiplier can move.
    if "quantity" in changes:
        order.total_price = _total(order.price_snapshot, order.quantity)

    db.commit()
    db.refresh(order)
    return order


def update_order_status(db: Session, order_id: str, status: OrderStatus) -> Optional[Order]:
    order = get_order(db, order_id)
    if not order:
        return None
    order.status = status
    db.commit()
    db.refresh(order)
    return order


def delete_order(db: Session, order_id: str) -> bool:
    order = get_order(db, order_id)
    if not order:
        return False
    db.delete(order)
    db.commit()
    return True
