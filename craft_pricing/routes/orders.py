from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from craft_pricing.database.connection import get_db
from craft_pricing.dependencies.auth import require_admin
from craft_pricing.enums.metals import OrderStatus
from craft_pricing.schemas.order import (
    OrderCreate,
    OrderCreatedResponse,
    OrderListResponse,
    OrderResponse,
    OrderStatusUpdate,
    OrderUpdate,
)
from craft_pricing.services.messaging_service import order_notification
from craft_pricing.services.order_service import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    create_order,
    delete_order,
    list_orders,
    update_order,
    update_order_status,
)

router = APIRouter(prefix="/api/orders", tags=["Orders"])


# PLACE ORDER (public)
@router.post("", response_model=OrderCreatedResponse, status_code=201)
def place_order(data: OrderCreate, db: Session = Depends(get_db)):
    order = create_order(db, data)
    return {
        "message": "Order created successfully",
        "order": order,
        "whatsapp": order_notification(order),
    }


# LIST
@router.get("", response_model=OrderListResponse, dependencies=[Depends(require_admin)])
def list_all(
    status: Optional[OrderStatus] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    orders, total = list_orders(db, status=status, page=page, page_size=limit)
    return {
        "orders": orders,
        "pagination": {
            "current_page": page,
            "total_pages": (total + limit - 1) // limit,
            "total_orders": total,
            "has_next": page * limit < total,
        },
    }


# UPDATE
@router.put("/{order_id}", response_model=OrderResponse, dependencies=[Depends(require_admin)])
def update(order_id: str, data: OrderUpdate, db: Session = Depends(get_db)):
    order = update_order(db, order_id, data)
    if not order:
        raise HTTPException(404, "Order not found")
    return order


# STATUS
@router.patch("/{order_id}/status", response_model=OrderResponse, dependencies=[Depends(require_admin)])
def change_status(order_id: str, data: OrderStatusUpdate, db: Session = Depends(get_db)):
    order = update_order_status(db, order_id, data.status)
    if not order:
        raise HTTPException(404, "Order not found")
    return order


# DELETE
@router.delete("/{order_id}", dependencies=[Depends(require_admin)])
def delete(order_id: str, db: Session = Depends(get_db)):
    if not delete_order(db, order_id):
        raise HTTPException(404, "Order not found")
    return {"message": "Order deleted"}
