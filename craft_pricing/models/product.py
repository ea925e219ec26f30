from sqlalchemy import Boolean, Column, DateTime, Enum, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from craft_pricing.core.timezone import utcnow
from craft_pricing.database.connection import Base
from craft_pricing.enums.metals import CategoryType


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, unique=True, index=True, nullable=False)  # 100, 101, ...
    name = Column(String, unique=True, nullable=False)
    description = Column(String, nullable=True)
    type = Column(Enum(CategoryType), nullable=False, default=CategoryType.other)
    created_at = Column(DateTime, default=utcnow)

    products = relationship("Product", back_populates="category")


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)

    # Fixed-price items (gold statues)
    constant_price = Column(Float, nullable=True)
    height = Column(String, nullable=True)

    # Silver items priced from the live rate
    weight_in_tola = Column(Float, nullable=True)
    making_cost = Column(Float, nullable=True)

    # Made-to-order silver items
    weight_min = Column(Float, nullable=True)
    weight_max = Column(Float, nullable=True)
    is_customizable = Column(Boolean, default=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    category = relationship("Category", back_populates="products")

    @property
    def category_type(self) -> CategoryType:
        if self.category is None:
            return CategoryType.other
        return CategoryType(self.category.type)
