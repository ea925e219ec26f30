from datetime import datetime
from typing import List, Optional

from pydantic import Field

from craft_pricing.enums.metals import CartStatus, CategoryType
from craft_pricing.schemas.common import CamelModel


class AddToCartRequest(CamelModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)
    customization: Optional[str] = None


class UpdateCartItemRequest(CamelModel):
    quantity: int = Field(ge=0)  # 0 removes the line
    customization: Optional[str] = None


class CustomerInfoRequest(CamelModel):
    customer_name: str = Field(min_length=1)
    customer_phone: str = Field(min_length=1)
    customer_email: Optional[str] = None
    customer_address: Optional[str] = None
    order_notes: Optional[str] = None


class CartProductInfo(CamelModel):
    id: int
    title: str
    category_type: CategoryType


class CartItemResponse(CamelModel):
    id: int
    product_id: int
    product: Optional[CartProductInfo] = None
    quantity: int
    price_snapshot: Optional[float] = None
    silver_price_snapshot: Optional[float] = None
    customization: Optional[str] = None
    added_at: Optional[datetime] = None


class CartResponse(CamelModel):
    id: int
    session_id: str
    status: CartStatus
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_email: Optional[str] = None
    customer_address: Optional[str] = None
    order_notes: Optional[str] = None
    subtotal: float
    total_items: int
    expires_at: Optional[datetime] = None
    items: List[CartItemResponse] = []


class CartSummary(CamelModel):
    item_count: int
    total_quantity: int
    subtotal: float
    has_unpriced_items: bool


class CartEnvelope(CamelModel):
    message: str
    cart: CartResponse
    summary: CartSummary


class CheckoutResponse(CamelModel):
    message: str
    whatsapp_url: str
    cart: CartResponse
