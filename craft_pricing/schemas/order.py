from datetime import datetime
from typing import List, Optional

from pydantic import Field

from craft_pricing.enums.metals import OrderStatus
from craft_pricing.schemas.common import CamelModel


class OrderCreate(CamelModel):
    customer_name: str = Field(min_length=1)
    customer_phone: str = Field(min_length=1)
    customer_email: Optional[str] = None
    customer_address: Optional[str] = None
    product_id: int
    quantity: int = Field(default=1, ge=1)
    notes: Optional[str] = None
    customization: Optional[str] = None


class OrderUpdate(CamelModel):
    status: Optional[OrderStatus] = None
    quantity: Optional[int] = Field(default=None, ge=1)
    notes: Optional[str] = None
    customer_address: Optional[str] = None


class OrderStatusUpdate(CamelModel):
    status: OrderStatus


class OrderResponse(CamelModel):
    id: int
    order_id: str
    customer_name: str
    customer_phone: str
    customer_email: Optional[str] = None
    customer_address: Optional[str] = None
    product_id: int
    quantity: int
    notes: Optional[str] = None
    customization: Optional[str] = None
    price_snapshot: Optional[float] = None
    silver_price_snapshot: Optional[float] = None
    total_price: Optional[float] = None
    status: OrderStatus
    created_at: datetime
    updated_at: Optional[datetime] = None


class WhatsAppNotification(CamelModel):
    success: bool
    url: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None


class OrderCreatedResponse(CamelModel):
    message: str
    order: OrderResponse
    whatsapp: WhatsAppNotification


class OrderPagination(CamelModel):
    current_page: int
    total_pages: int
    total_orders: int
    has_next: bool


class OrderListResponse(CamelModel):
    orders: List[OrderResponse]
    pagination: OrderPagination
