"""SQL Stores: SQLAlchemy implementations of the admission store protocols.

Invariants:
    - All three stores share the caller's AsyncSession: one admission, one transaction
    - Stores flush, they never commit; the service owns the commit point
    - reserve_stock is a single conditional UPDATE per product, so two
      admissions racing for the same row cannot both decrement past the limit
    - ORM rows never leave this module; callers get frozen domain records
    - reserve_stock updates rows in product id order, whatever the request order
    - Unique-constraint violations on registration surface as DuplicateResourceError

Design Decisions:
    - Conditional decrement (quantity > :q) over SELECT ... FOR UPDATE: works on
      SQLite for tests and row-locks on PostgreSQL without an extra round trip
    - Strict > mirrors the admission rule that stock may not reach zero
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Sequence

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from order_admission.core.domain_types import (
    CustomerId, CustomerRecord, LineItemDraft, OrderId, PersistedLine,
    PersistedOrder, ProductId, ProductSnapshot, StockReservation,
)
from order_admission.core.errors import DuplicateResourceError
from order_admission.models.customer import Customer
from order_admission.models.order import Order
from order_admission.models.order_line import OrderLine
from order_admission.models.product import Product

logger = logging.getLogger(__name__)


def _to_customer_record(row: Customer) -> CustomerRecord:
    return CustomerRecord(
        id=CustomerId(row.id), name=row.name, email=row.email,
    )


def _to_snapshot(row: Product) -> ProductSnapshot:
    return ProductSnapshot(
        id=ProductId(row.id),
        unit_price=Decimal(row.price),
        available_quantity=row.quantity,
    )


def _to_persisted_order(row: Order) -> PersistedOrder:
    return PersistedOrder(
        id=OrderId(row.id),
        customer_id=CustomerId(row.customer_id),
        lines=tuple(
            PersistedLine(
                order_id=OrderId(row.id),
                product_id=ProductId(line.product_id),
                unit_price=Decimal(line.unit_price),
                quantity=line.quantity,
            )
            for line in row.lines
        ),
        created_at=row.created_at,
    )


async def _flush_unique(db: AsyncSession, code: str, field: str, value: str) -> None:
    """Flush, reporting a unique-constraint hit as a duplicate.

    The pre-insert lookup can lose to a concurrent registration; the
    constraint is the final word.
    """
    try:
        await db.flush()
    except IntegrityError as e:
        raise DuplicateResourceError(code, field, value) from e


class SqlCustomerStore:
    """Customer lookup and registration."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, customer_id: CustomerId) -> CustomerRecord | None:
        result = await self.db.execute(
            select(Customer).where(Customer.id == customer_id),
        )
        row = result.scalar_one_or_none()
        return _to_customer_record(row) if row else None

    async def email_taken(self, email: str) -> bool:
        result = await self.db.execute(
            select(Customer.id).where(Customer.email == email),
        )
        return result.scalar_one_or_none() is not None

    async def add(self, name: str, email: str) -> CustomerRecord:
        """Register a customer. Email must be unused."""
        if await self.email_taken(email):
            raise DuplicateResourceError("CUSTOMER_EMAIL_TAKEN", "email", email)
        row = Customer(name=name, email=email)
        self.db.add(row)
        await _flush_unique(self.db, "CUSTOMER_EMAIL_TAKEN", "email", email)
        return _to_customer_record(row)


class SqlProductStore:
    """Product lookup, registration and conditional stock reservation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_all_by_id(
        self, product_ids: Iterable[ProductId],
    ) -> list[ProductSnapshot]:
        ids = set(product_ids)
        if not ids:
            return []
        result = await self.db.execute(
            select(Product).where(Product.id.in_(ids)),
        )
        return [_to_snapshot(row) for row in result.scalars().all()]

    async def reserve_stock(
        self, reservations: Sequence[StockReservation],
    ) -> list[ProductId]:
        """Decrement each product by its reserved quantity if stock stays above zero.

        Returns ids whose condition failed. Decrements that succeeded are
        left in the transaction; the caller rolls back on any conflict.
        """
        conflicted: list[ProductId] = []
        now = datetime.now(timezone.utc)
        # Row locks are held to commit; a fixed id order keeps two
        # admissions over the same products from deadlocking.
        for reservation in sorted(reservations, key=lambda r: r.product_id):
            result = await self.db.execute(
                update(Product)
                .where(Product.id == reservation.product_id)
                .where(Product.quantity > reservation.quantity)
                .values(
                    quantity=Product.quantity - reservation.quantity,
                    updated_at=now,
                )
                .execution_options(synchronize_session=False),
            )
            if result.rowcount != 1:
                conflicted.append(reservation.product_id)
        if conflicted:
            logger.warning(
                f"Conditional stock decrement failed for {len(conflicted)} product(s)",
                extra={"product_ids": conflicted},
            )
        return conflicted

    async def get(self, product_id: ProductId) -> Product | None:
        result = await self.db.execute(
            select(Product).where(Product.id == product_id),
        )
        return result.scalar_one_or_none()

    async def name_taken(self, name: str) -> bool:
        result = await self.db.execute(
            select(Product.id).where(Product.name == name),
        )
        return result.scalar_one_or_none() is not None

    async def add(self, name: str, price: Decimal, quantity: int) -> Product:
        """Register a product. Name must be unused."""
        if await self.name_taken(name):
            raise DuplicateResourceError("PRODUCT_NAME_TAKEN", "name", name)
        row = Product(name=name, price=price, quantity=quantity)
        self.db.add(row)
        await _flush_unique(self.db, "PRODUCT_NAME_TAKEN", "name", name)
        return row


class SqlOrderStore:
    """Order persistence. Lines are written with the order in one flush."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(
        self, customer_id: CustomerId, line_items: Sequence[LineItemDraft],
    ) -> PersistedOrder:
        row = Order(
            customer_id=customer_id,
            lines=[
                OrderLine(
                    position=position,
                    product_id=item.product_id,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                )
                for position, item in enumerate(line_items)
            ],
        )
        self.db.add(row)
        await self.db.flush()
        return _to_persisted_order(row)

    async def find_by_id(self, order_id: OrderId) -> PersistedOrder | None:
        result = await self.db.execute(
            select(Order).where(Order.id == order_id),
        )
        row = result.scalar_one_or_none()
        return _to_persisted_order(row) if row else None
