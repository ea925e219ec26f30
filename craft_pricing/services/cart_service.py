"""
Session carts with frozen per-line prices.

Every line carries the unit price resolved when the line was last touched
(added, merged into, or updated). Later ledger changes never move an existing
line; only touching that line again re-resolves it.
"""

import logging
from datetime import timedelta
from typing import Iterable, Optional, Tuple

from fastapi import HTTPException
from sqlalchemy.orm import Session

from craft_pricing.core.config import settings
from craft_pricing.core.timezone import utcnow
from craft_pricing.enums.metals import CartStatus
from craft_pricing.models.cart import Cart, CartItem
from craft_pricing.schemas.cart import AddToCartRequest, CustomerInfoRequest, UpdateCartItemRequest
from craft_pricing.services.messaging_service import cart_checkout_link
from craft_pricing.services.price_resolution import ResolvedPrice, resolve_current_price
from craft_pricing.services.product_service import get_product

logger = logging.getLogger("craft_pricing.cart")

OPEN_STATUSES = (CartStatus.active, CartStatus.checkout)


# --------------------------
# TOTALS
# --------------------------
def recalculate_totals(items: Iterable[CartItem]) -> Tuple[float, int]:
    """(subtotal, total_items) over the lines; unpriced lines add quantity only."""
    subtotal = 0.0
    total_items = 0
    for item in items:
        total_items += item.quantity
        if item.price_snapshot is not None:
            subtotal += item.price_snapshot * item.quantity
    return round(subtotal, 2), total_items


def cart_summary(cart: Cart) -> dict:
    return {
        "item_count": len(cart.items),
        "total_quantity": cart.total_items,
        "subtotal": cart.subtotal,
        "has_unpriced_items": any(item.price_snapshot is None for item in cart.items),
    }


def _save(db: Session, cart: Cart) -> Cart:
    cart.subtotal, cart.total_items = recalculate_totals(cart.items)
    cart.expires_at = utcnow() + timedelta(days=settings.CART_TTL_DAYS)
    db.commit()
    db.refresh(cart)
    return cart


def _snapshot_line(db: Session, item: CartItem) -> None:
    resolution = resolve_current_price(db, item.product)
    if isinstance(resolution, ResolvedPrice):
        item.price_snapshot = resolution.price
        item.silver_price_snapshot = resolution.metal_rate_used
    else:
        logger.info(
            "Product %s priced on request: %s", item.product.id, resolution.reason
        )
        item.price_snapshot = None
        item.silver_price_snapshot = None


# --------------------------
# LOOKUPS
# --------------------------
def get_open_cart(db: Session, session_id: str) -> Optional[Cart]:
    return (
        db.query(Cart)
        .filter(Cart.session_id == session_id, Cart.status.in_(OPEN_STATUSES))
        .order_by(Cart.id.desc())
        .first()
    )


def find_or_create_cart(db: Session, session_id: str) -> Cart:
    cart = get_open_cart(db, session_id)
    if cart is not None:
        return cart

    cart = Cart(session_id=session_id, status=CartStatus.active)
    db.add(cart)
    return _save(db, cart)


def _require_cart(db: Session, session_id: str) -> Cart:
    cart = get_open_cart(db, session_id)
    if cart is None:
        raise HTTPException(status_code=404, detail="Cart not found")
    return cart


def _require_item(cart: Cart, item_id: int) -> CartItem:
    for item in cart.items:
        if item.id == item_id:
            return item
    raise HTTPException(status_code=404, detail="Cart item not found")


# --------------------------
# MUTATIONS
# --------------------------
def add_to_cart(db: Session, session_id: str, data: AddToCartRequest) -> Cart:
    product = get_product(db, data.product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")

    cart = find_or_create_cart(db, session_id)

    item = next((i for i in cart.items if i.product_id == product.id), None)
    if item is None:
        item = CartItem(product=product, quantity=data.quantity, customization=data.customization)
        cart.items.append(item)
    else:
        item.quantity += data.quantity
        if data.customization is not None:
            item.customization = data.customization

    _snapshot_line(db, item)
    return _save(db, cart)


def update_cart_item(
    db: Session, session_id: str, item_id: int, data: UpdateCartItemRequest
) -> Cart:
    cart = _require_cart(db, session_id)
    item = _require_item(cart, item_id)

    if data.quantity == 0:
        cart.items.remove(item)
        return _save(db, cart)

    item.quantity = data.quantity
    if data.customization is not None:
        item.customization = data.customization
    _snapshot_line(db, item)
    return _save(db, cart)


def remove_cart_item(db: Session, session_id: str, item_id: int) -> Cart:
    cart = _require_cart(db, session_id)
    cart.items.remove(_require_item(cart, item_id))
    return _save(db, cart)


def clear_cart(db: Session, session_id: str) -> Cart:
    cart = _require_cart(db, session_id)
    cart.items.clear()
    cart.status = CartStatus.active
    return _save(db, cart)


def update_customer_info(db: Session, session_id: str, data: CustomerInfoRequest) -> Cart:
    cart = _require_cart(db, session_id)
    if not cart.items:
        raise HTTPException(status_code=400, detail="Cart is empty")

    cart.customer_name = data.customer_name.strip()
    cart.customer_phone = data.customer_phone.strip()
    cart.customer_email = data.customer_email
    cart.customer_address = data.customer_address
    cart.order_notes = data.order_notes
    cart.status = CartStatus.checkout
    return _save(db, cart)


def checkout(db: Session, session_id: str) -> Tuple[Cart, str]:
    """Build the WhatsApp order link and close the cart."""
    cart = _require_cart(db, session_id)
    if not cart.items:
        raise HTTPException(status_code=400, detail="Cart is empty")
    if not cart.customer_name or not cart.customer_phone:
        raise HTTPException(status_code=400, detail="Customer name and phone are required")

    link = cart_checkout_link(cart)
    if link is None:
        raise HTTPException(status_code=503, detail="WhatsApp ordering is not configured")

    cart.status = CartStatus.ordered
    db.commit()
    db.refresh(cart)
    logger.info("Cart %s checked out (%s items, subtotal %s)", cart.id, cart.total_items, cart.subtotal)
    return cart, link
