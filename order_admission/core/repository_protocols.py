"""Boundary Protocols: contracts between the admission core and its stores.

Invariants:
    - Core NEVER imports from shell: dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by the shell via constructor injection
    - All store calls made during one admission share one transaction

Design Decisions:
    - Protocol over ABC: structural subtyping, SQLAlchemy AsyncSession
      satisfies TransactionScope without a wrapper
    - reserve_stock replaces a read-then-write quantity update with conditional
      decrements, returning the ids whose condition failed
"""

from typing import Iterable, Protocol, Sequence

from order_admission.core.domain_types import (
    CustomerId, CustomerRecord, LineItemDraft, PersistedOrder, ProductId,
    ProductSnapshot, StockReservation,
)


class CustomerStore(Protocol):
    """Contract for customer lookup: implemented by shell."""
    async def find_by_id(self, customer_id: CustomerId) -> CustomerRecord | None: ...


class ProductStore(Protocol):
    """Contract for product lookup and stock reservation: implemented by shell."""
    async def find_all_by_id(
        self, product_ids: Iterable[ProductId],
    ) -> list[ProductSnapshot]: ...

    async def reserve_stock(
        self, reservations: Sequence[StockReservation],
    ) -> list[ProductId]: ...


class OrderStore(Protocol):
    """Contract for order persistence: implemented by shell."""
    async def create(
        self, customer_id: CustomerId, line_items: Sequence[LineItemDraft],
    ) -> PersistedOrder: ...


class TransactionScope(Protocol):
    """Unit-of-work boundary around one admission."""
    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
