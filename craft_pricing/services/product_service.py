from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from craft_pricing.models.product import Category, Product
from craft_pricing.schemas.product import CategoryCreate, ProductCreate

FIRST_CATEGORY_ID = 100


# --------------------------
# CATEGORIES
# --------------------------
def create_category(db: Session, data: CategoryCreate) -> Category:
    last_id = db.query(func.max(Category.category_id)).scalar()
    category = Category(
        category_id=(last_id + 1) if last_id is not None else FIRST_CATEGORY_ID,
        name=data.name,
        description=data.description,
        type=data.type,
    )
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def get_category(db: Session, category_id: int) -> Optional[Category]:
    return db.query(Category).filter(Category.category_id == category_id).first()


# --------------------------
# PRODUCTS
# --------------------------
def create_product(db: Session, data: ProductCreate) -> Product:
    category = get_category(db, data.category_id)
    if category is None:
        raise ValueError(f"Category {data.category_id} not found")

    fields = data.model_dump(exclude={"category_id"})
    product = Product(**fields, category=category)
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def get_product(db: Session, product_id: int) -> Optional[Product]:
    return db.query(Product).filter(Product.id == product_id).first()
