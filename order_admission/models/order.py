"""Order ORM: an admitted order and its line items.

Invariants:
    - Always belongs to a Customer (customer_id FK)
    - Created together with its lines in one transaction, never edited afterwards

Design Decisions:
    - cascade delete for lines: order owns its lines
    - lines loaded with selectin: the admission reads them right after insert
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from order_admission.db.base import Base


class Order(Base):
    """Order aggregate root: owns its OrderLines."""
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
    )
    customer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("customers.id"), nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    customer: Mapped["Customer"] = relationship(
        "Customer", back_populates="orders",
    )
    lines: Mapped[list["OrderLine"]] = relationship(
        "OrderLine", back_populates="order",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="OrderLine.position",
    )
