"""Admission Rules: pure validation, price snapshot and reservation planning.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - check_* functions return an error value on violation, None on success
    - validate_admission chains all product checks: first error wins
    - A line is rejected when available_quantity <= requested quantity
      (an order that would zero out stock is refused)
    - Line items and reservations are derived from the same product snapshot

Design Decisions:
    - Duplicate product ids are merged before validation: two lines of 3
      against a stock of 5 must fail like one line of 6
    - Errors returned, not raised: the service decides when to raise,
      after it has rolled back whatever it opened
"""

from typing import Iterable, Sequence

from order_admission.core.domain_types import (
    CustomerId, CustomerRecord, LineItemDraft, LineRequest, PersistedLine,
    ProductId, ProductSnapshot, StockReservation,
)
from order_admission.core.errors import (
    CustomerNotFoundError, InsufficientStockError, NoProductsFoundError,
    OrderAdmissionError, ProductsNotFoundError, StockShortfall,
)


def merge_duplicate_lines(lines: Iterable[LineRequest]) -> list[LineRequest]:
    """Sum quantities per product id, keeping first-appearance order."""
    totals: dict[ProductId, int] = {}
    for line in lines:
        totals[line.product_id] = totals.get(line.product_id, 0) + line.quantity
    return [LineRequest(product_id=pid, quantity=qty) for pid, qty in totals.items()]


def index_products(
    products: Iterable[ProductSnapshot],
) -> dict[ProductId, ProductSnapshot]:
    return {p.id: p for p in products}


def check_customer(
    customer_id: CustomerId, customer: CustomerRecord | None,
) -> OrderAdmissionError | None:
    """Stage 1: the customer must exist."""
    if customer is None:
        return CustomerNotFoundError(customer_id)
    return None


def check_products_resolved(
    lines: Sequence[LineRequest],
    products_by_id: dict[ProductId, ProductSnapshot],
) -> OrderAdmissionError | None:
    """Stage 2a: every requested product must exist."""
    requested = [line.product_id for line in lines]
    if not products_by_id:
        return NoProductsFoundError(requested)
    missing = [pid for pid in requested if pid not in products_by_id]
    if missing:
        return ProductsNotFoundError(missing)
    return None


def check_stock(
    lines: Sequence[LineRequest],
    products_by_id: dict[ProductId, ProductSnapshot],
) -> OrderAdmissionError | None:
    """Stage 2b: every line must leave stock strictly above zero."""
    offending = [
        StockShortfall(
            product_id=line.product_id,
            available_quantity=products_by_id[line.product_id].available_quantity,
            requested_quantity=line.quantity,
        )
        for line in lines
        if products_by_id[line.product_id].available_quantity <= line.quantity
    ]
    if offending:
        return InsufficientStockError(offending)
    return None


def validate_admission(
    lines: Sequence[LineRequest],
    products_by_id: dict[ProductId, ProductSnapshot],
) -> OrderAdmissionError | None:
    """Chain the product checks. Returns first error or None.

    Expects lines already merged by merge_duplicate_lines.
    """
    return (
        check_products_resolved(lines, products_by_id)
        or check_stock(lines, products_by_id)
    )


def build_line_items(
    lines: Sequence[LineRequest],
    products_by_id: dict[ProductId, ProductSnapshot],
) -> list[LineItemDraft]:
    """Stage 3: freeze each product's unit price into its line."""
    return [
        LineItemDraft(
            product_id=line.product_id,
            unit_price=products_by_id[line.product_id].unit_price,
            quantity=line.quantity,
        )
        for line in lines
    ]


def plan_reservations(
    persisted_lines: Iterable[PersistedLine],
) -> list[StockReservation]:
    """Stage 4: one decrement per persisted line, in line order."""
    return [
        StockReservation(product_id=line.product_id, quantity=line.quantity)
        for line in persisted_lines
    ]


def describe_shortfalls(
    conflicted_ids: Iterable[ProductId],
    lines: Sequence[LineRequest],
    fresh_products: Iterable[ProductSnapshot],
) -> InsufficientStockError:
    """Build the rejection for reservations that lost a race.

    Uses availability re-read after rollback. A product that vanished
    meanwhile is reported with zero available.
    """
    requested = {line.product_id: line.quantity for line in lines}
    fresh = index_products(fresh_products)
    return InsufficientStockError([
        StockShortfall(
            product_id=pid,
            available_quantity=fresh[pid].available_quantity if pid in fresh else 0,
            requested_quantity=requested.get(pid, 0),
        )
        for pid in conflicted_ids
    ])
