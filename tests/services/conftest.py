"""Service test fixtures: in-memory stores, async SQLite DB, FastAPI test client.

Invariants:
    - Every test gets a fresh Inventory and a fresh in-memory SQLite database
    - get_db dependency overridden to use the test session factory
    - db_manager patched so the readiness probe sees the test engine

Design Decisions:
    - StaticPool: all sessions share the one in-memory SQLite connection
"""

import pytest
from decimal import Decimal
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from order_admission.db.base import Base
from order_admission.infrastructure.database import get_db, DatabaseSessionManager
from order_admission.models.customer import Customer
from order_admission.models.product import Product
from order_admission.services.order_admission import OrderAdmissionService
import order_admission.infrastructure.database as db_module
import order_admission.models  # noqa: F401
from order_admission.main import app

from tests.services.fake_stores import (
    FakeCustomerStore, FakeOrderStore, FakeProductStore, FakeTransaction, Inventory,
)


# ─── In-memory stores ────────────────────────────────────────────

@pytest.fixture
def inventory():
    """C1 exists; P1(price=100, qty=3), P2(price=50, qty=10)."""
    inv = Inventory()
    inv.add_customer("C1")
    inv.add_product("P1", "100", 3)
    inv.add_product("P2", "50", 10)
    return inv


@pytest.fixture
def make_service():
    """Build an admission service with its own transaction over a shared Inventory."""

    def _make(inv: Inventory, tx: FakeTransaction | None = None):
        tx = tx or FakeTransaction()
        service = OrderAdmissionService(
            customers=FakeCustomerStore(inv),
            products=FakeProductStore(inv, tx),
            orders=FakeOrderStore(inv, tx),
            transaction=tx,
        )
        return service, tx

    return _make


# ─── SQLite ──────────────────────────────────────────────────────

@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def seed_catalog(test_session_factory):
    """Insert C1, P1(100, qty=3), P2(50, qty=10) and return their ids."""
    async with test_session_factory() as session:
        customer = Customer(id="C1", name="Ada", email="ada@example.com")
        p1 = Product(id="P1", name="Keyboard", price=Decimal("100.00"), quantity=3)
        p2 = Product(id="P2", name="Mouse", price=Decimal("50.00"), quantity=10)
        session.add_all([customer, p1, p2])
        await session.commit()
    return {"customer": "C1", "p1": "P1", "p2": "P2"}


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
