from enum import Enum


class Metal(str, Enum):
    silver = "silver"
    gold = "gold"


class CategoryType(str, Enum):
    silver = "silver"
    customSilver = "customSilver"
    gold = "gold"
    other = "other"


# Categories whose products are priced from the live silver rate
SILVER_PRICED_TYPES = frozenset({CategoryType.silver, CategoryType.customSilver})


class CartStatus(str, Enum):
    active = "active"
    checkout = "checkout"
    ordered = "ordered"
    abandoned = "abandoned"


class OrderStatus(str, Enum):
    pending = "pending"
    contacted = "contacted"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"
