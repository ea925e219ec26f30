from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from craft_pricing.database.connection import get_db
from craft_pricing.models.cart import Cart
from craft_pricing.schemas.cart import (
    AddToCartRequest,
    CartEnvelope,
    CheckoutResponse,
    CustomerInfoRequest,
    UpdateCartItemRequest,
)
from craft_pricing.services import cart_service

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def _envelope(message: str, cart: Cart) -> dict:
    return {"message": message, "cart": cart, "summary": cart_service.cart_summary(cart)}


@router.get("/{session_id}", response_model=CartEnvelope)
def get_cart(session_id: str, db: Session = Depends(get_db)):
    cart = cart_service.find_or_create_cart(db, session_id)
    return _envelope("Cart retrieved", cart)


@router.post("/{session_id}/items", response_model=CartEnvelope)
def add_item(session_id: str, data: AddToCartRequest, db: Session = Depends(get_db)):
    cart = cart_service.add_to_cart(db, session_id, data)
    return _envelope("Item added to cart", cart)


@router.put("/{session_id}/items/{item_id}", response_model=CartEnvelope)
def update_item(session_id: str, item_id: int, data: UpdateCartItemRequest, db: Session = Depends(get_db)):
    cart = cart_service.update_cart_item(db, session_id, item_id, data)
    message = "Item removed from cart" if data.quantity == 0 else "Cart item updated"
    return _envelope(message, cart)


@router.delete("/{session_id}/items/{item_id}", response_model=CartEnvelope)
def remove_item(session_id: str, item_id: int, db: Session = Depends(get_db)):
    cart = cart_service.remove_cart_item(db, session_id, item_id)
    return _envelope("Item removed from cart", cart)


@router.delete("/{session_id}", response_model=CartEnvelope)
def clear(session_id: str, db: Session = Depends(get_db)):
    cart = cart_service.clear_cart(db, session_id)
    return _envelope("Cart cleared", cart)


@router.put("/{session_id}/customer", response_model=CartEnvelope)
def customer_info(session_id: str, data: CustomerInfoRequest, db: Session = Depends(get_db)):
    cart = cart_service.update_customer_info(db, session_id, data)
    return _envelope("Customer information saved", cart)


@router.post("/{session_id}/checkout", response_model=CheckoutResponse)
def checkout(session_id: str, db: Session = Depends(get_db)):
    cart, link = cart_service.checkout(db, session_id)
    return {"message": "Order ready to send via WhatsApp", "whatsapp_url": link, "cart": cart}
