from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from craft_pricing.core.timezone import utcnow
from craft_pricing.database.connection import Base
from craft_pricing.enums.metals import CartStatus


class Cart(Base):
    """Session-based cart; no customer account needed."""

    __tablename__ = "carts"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(String, index=True, nullable=False)

    # Filled in at checkout
    customer_name = Column(String, nullable=True)
    customer_phone = Column(String, nullable=True)
    customer_email = Column(String, nullable=True)
    customer_address = Column(String, nullable=True)
    order_notes = Column(String, nullable=True)

    status = Column(Enum(CartStatus), nullable=False, default=CartStatus.active, index=True)

    # Derived from the items on every mutation
    subtotal = Column(Float, nullable=False, default=0.0)
    total_items = Column(Integer, nullable=False, default=0)

    expires_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    items = relationship(
        "CartItem",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItem.id",
    )


class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True, index=True)
    cart_id = Column(Integer, ForeignKey("carts.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=1)

    # Frozen at the last touch of this line; None means "price on request"
    price_snapshot = Column(Float, nullable=True)
    silver_price_snapshot = Column(Float, nullable=True)

    customization = Column(String, nullable=True)
    added_at = Column(DateTime, default=utcnow)

    cart = relationship("Cart", back_populates="items")
    product = relationship("Product")
