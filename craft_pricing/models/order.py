from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from craft_pricing.core.timezone import utcnow
from craft_pricing.database.connection import Base
from craft_pricing.enums.metals import OrderStatus


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String, unique=True, index=True)  # e.g. ORD_1A2B3C4D

    customer_name = Column(String, nullable=False)
    customer_phone = Column(String, nullable=False)
    customer_email = Column(String, nullable=True)
    customer_address = Column(String, nullable=True)

    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=1)
    notes = Column(String, nullable=True)
    customization = Column(String, nullable=True)

    # Snapshots taken when the order was placed
    price_snapshot = Column(Float, nullable=True)
    silver_price_snapshot = Column(Float, nullable=True)
    total_price = Column(Float, nullable=True)  # None = to be determined

    status = Column(Enum(OrderStatus), nullable=False, default=OrderStatus.pending, index=True)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    product = relationship("Product")
