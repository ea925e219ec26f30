import os
import tempfile

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["LOGS_DIR"] = tempfile.mkdtemp(prefix="craft_pricing_logs_")
os.environ.pop("WHATSAPP_PHONE", None)

import asyncio
from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from craft_pricing.core.security import create_access_token
from craft_pricing.database.connection import Base, get_db
from craft_pricing.enums.metals import CategoryType, Metal
from craft_pricing.models import cart, metal_price, order, product, user  # noqa: F401
from craft_pricing.schemas.product import CategoryCreate, ProductCreate
from craft_pricing.services.admin_service import create_admin_user
from craft_pricing.services.price_ledger import upsert_daily_price
from craft_pricing.services.product_service import create_category, create_product

TEST_DB_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def create_test_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    connection = engine.connect()
    trans = connection.begin()
    session = TestingSessionLocal(bind=connection)
    try:
        yield session
    finally:
        session.close()
        trans.rollback()
        connection.close()


@pytest.fixture()
def client(db):
    from craft_pricing.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def admin_headers(db):
    create_admin_user(db, "owner", "s3cret-pass")
    token = create_access_token({"sub": "owner", "role": "admin"})
    return {"Authorization": f"Bearer {token}"}


def run(coro):
    return asyncio.run(coro)


# ---------- catalogue helpers ----------

def make_category(db, name: str, type_: CategoryType):
    return create_category(db, CategoryCreate(name=name, type=type_))


def make_silver_product(db, weight=2.0, making_cost=300.0, category=None, **extra):
    category = category or make_category(db, f"Silver {weight}", CategoryType.silver)
    return create_product(
        db,
        ProductCreate(
            title=f"Silver Buddha {weight} tola",
            category_id=category.category_id,
            weight_in_tola=weight,
            making_cost=making_cost,
            **extra,
        ),
    )


def make_fixed_price_product(db, price=5000.0):
    category = make_category(db, "Gold Statues", CategoryType.gold)
    return create_product(
        db,
        ProductCreate(title="Gold Tara", category_id=category.category_id, constant_price=price),
    )


def record_silver(db, price: float, scraped_at: datetime):
    return upsert_daily_price(db, Metal.silver, price=price, scraped_at=scraped_at)


class SessionFactory:
    """Hands out the test session; close() is a no-op so the test can inspect it."""

    def __init__(self, db):
        self.db = db

    def __call__(self):
        return self

    def __getattr__(self, name):
        return getattr(self.db, name)

    def close(self):
        pass
