"""Product ORM: catalog entry with its current price and stock level.

Invariants:
    - name is unique
    - quantity is never negative (CHECK constraint); only reserve_stock decrements it
    - price is Numeric, read as Decimal

Design Decisions:
    - Stock lives on the product row: single warehouse, single counter
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import CheckConstraint, String, Integer, Numeric, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from order_admission.db.base import Base


class Product(Base):
    """Product entity: the row every reservation decrements."""
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
