from typing import Optional

from pydantic import Field

from craft_pricing.enums.metals import CategoryType
from craft_pricing.schemas.common import CamelModel


class CategoryCreate(CamelModel):
    name: str
    description: Optional[str] = None
    type: CategoryType = CategoryType.other


class ProductCreate(CamelModel):
    title: str
    description: Optional[str] = None
    category_id: int
    constant_price: Optional[float] = Field(default=None, gt=0)
    height: Optional[str] = None
    weight_in_tola: Optional[float] = Field(default=None, gt=0)
    making_cost: Optional[float] = Field(default=None, ge=0)
    weight_min: Optional[float] = Field(default=None, gt=0)
    weight_max: Optional[float] = Field(default=None, gt=0)
    is_customizable: bool = False


class PriceRange(CamelModel):
    low: float
    high: float


class ProductPriceResponse(CamelModel):
    product_id: int
    title: str
    category_type: CategoryType
    price: Optional[float] = None
    metal_rate_used: Optional[float] = None
    price_on_request: bool = False
    reason: Optional[str] = None
    estimated_range: Optional[PriceRange] = None
