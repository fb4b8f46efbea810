"""Domain Types: identities and value records shared by core and shell.

Invariants:
    - CustomerId, ProductId, OrderId wrap str: never use bare str ids in domain logic
    - Prices are Decimal, never float
    - Every record here is frozen: the core reads products, it never mutates them

Design Decisions:
    - NewType over wrapper classes: zero runtime cost, full type-checker support
    - Frozen dataclasses over ORM rows: core stays importable without SQLAlchemy
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

CustomerId = NewType("CustomerId", str)
ProductId = NewType("ProductId", str)
OrderId = NewType("OrderId", str)


# ─── Input ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class LineRequest:
    """One requested (product, quantity) pair. Ephemeral, never persisted."""
    product_id: ProductId
    quantity: int


# ─── Store Views ─────────────────────────────────────────────────

@dataclass(frozen=True)
class CustomerRecord:
    id: CustomerId
    name: str
    email: str


@dataclass(frozen=True)
class ProductSnapshot:
    """Product as read at validation time."""
    id: ProductId
    unit_price: Decimal
    available_quantity: int


# ─── Order Materialization ───────────────────────────────────────

@dataclass(frozen=True)
class LineItemDraft:
    """Price-snapshotted line handed to the order store."""
    product_id: ProductId
    unit_price: Decimal
    quantity: int


@dataclass(frozen=True)
class PersistedLine:
    order_id: OrderId
    product_id: ProductId
    unit_price: Decimal
    quantity: int


@dataclass(frozen=True)
class PersistedOrder:
    """Order as written by the order store. Lines are the authoritative record."""
    id: OrderId
    customer_id: CustomerId
    lines: tuple[PersistedLine, ...] = field(default_factory=tuple)
    created_at: datetime | None = None

    @property
    def total(self) -> Decimal:
        return sum(
            (line.unit_price * line.quantity for line in self.lines),
            Decimal("0"),
        )


# ─── Reservation ─────────────────────────────────────────────────

@dataclass(frozen=True)
class StockReservation:
    """One conditional decrement, applied to the committed quantity."""
    product_id: ProductId
    quantity: int
