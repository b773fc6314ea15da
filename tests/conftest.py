"""
Shared fixtures

Every test runs against a fresh SQLite file database. The environment is set
before ``solemate`` is imported because settings and engines are module level.
"""

import os
import tempfile
from decimal import Decimal
from types import SimpleNamespace

_TEST_DIR = tempfile.mkdtemp(prefix="solemate-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DIR}/test.db"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient

from solemate.core.database import sync_engine, SessionLocal, AsyncSessionLocal
from solemate.core.security import SecurityUtils
from solemate.models import Base, Account, Product, ProductVariant

PASSWORD = "correct-horse-battery"

@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(sync_engine)
    yield
    Base.metadata.drop_all(sync_engine)

@pytest.fixture
async def db():
    async with AsyncSessionLocal() as session:
        yield session

@pytest.fixture
def client():
    from solemate.main import app
    return TestClient(app)

@pytest.fixture
def catalog():
    """Two products; the first has two buyable sizes and one unavailable size"""
    with SessionLocal() as session:
        runner = Product(name="Trail Runner", brand="SoleMate", category="running")
        size_9 = ProductVariant(product=runner, sku="TR-9-BLK", size="9", color="black", price=Decimal("100.00"), stock=10)
        size_10 = ProductVariant(product=runner, sku="TR-10-BLK", size="10", color="black", price=Decimal("120.00"), stock=10)
        size_11 = ProductVariant(
            product=runner, sku="TR-11-BLK", size="11", color="black",
            price=Decimal("120.00"), is_available=False, stock=10
        )
        court = Product(name="Court Classic", brand="SoleMate", category="lifestyle")
        court_8 = ProductVariant(product=court, sku="CC-8-WHT", size="8", color="white", price=Decimal("80.00"), stock=5)

        session.add_all([runner, court])
        session.commit()

        return SimpleNamespace(
            product_id=runner.id,
            variant_id=size_9.id,
            price=Decimal("100.00"),
            second_variant_id=size_10.id,
            second_price=Decimal("120.00"),
            stock=10,
            unavailable_variant_id=size_11.id,
            other_product_id=court.id,
            other_variant_id=court_8.id,
        )

def _create_account(email: str, full_name: str) -> SimpleNamespace:
    with SessionLocal() as session:
        account = Account(
            email=email,
            full_name=full_name,
            password_hash=SecurityUtils.hash_password(PASSWORD),
        )
        session.add(account)
        session.commit()
        return SimpleNamespace(id=account.id, email=email, password=PASSWORD)

@pytest.fixture
def account():
    return _create_account("jane@example.com", "Jane Doe")

@pytest.fixture
def other_account():
    return _create_account("sam@example.com", "Sam Roe")

@pytest.fixture
def auth_headers(account):
    token = SecurityUtils.create_access_token({"sub": str(account.id), "email": account.email})
    return {"Authorization": f"Bearer {token}"}
