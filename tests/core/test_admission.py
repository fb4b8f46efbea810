"""Admission Rules: tests for pure validation, pricing and reservation planning.

Tests cover:
    - merge_duplicate_lines sums per product, keeps first-appearance order
    - check_products_resolved distinguishes "none" from "some missing"
    - check_stock rejects at the exact-stock boundary and enumerates all offenders
    - validate_admission chains checks, first error wins
    - build_line_items snapshots unit prices
    - plan_reservations follows persisted lines
"""

from decimal import Decimal

from order_admission.core.admission import (
    build_line_items, check_customer, check_products_resolved, check_stock,
    describe_shortfalls, index_products, merge_duplicate_lines,
    plan_reservations, validate_admission,
)
from order_admission.core.domain_types import (
    CustomerId, CustomerRecord, LineRequest, OrderId, PersistedLine,
    ProductId, ProductSnapshot, StockReservation,
)
from order_admission.core.errors import (
    CustomerNotFoundError, InsufficientStockError, NoProductsFoundError,
    ProductsNotFoundError, StockShortfall,
)


def _catalog() -> dict[ProductId, ProductSnapshot]:
    return index_products([
        ProductSnapshot(ProductId("P1"), Decimal("100"), 3),
        ProductSnapshot(ProductId("P2"), Decimal("50"), 10),
    ])


def _line(pid: str, qty: int) -> LineRequest:
    return LineRequest(ProductId(pid), qty)


# ─── merge_duplicate_lines ───────────────────────────────────────

def test_merge_sums_duplicates_in_first_seen_order():
    merged = merge_duplicate_lines([
        _line("P2", 1), _line("P1", 2), _line("P2", 4),
    ])
    assert merged == [_line("P2", 5), _line("P1", 2)]


def test_merge_leaves_distinct_lines_untouched():
    lines = [_line("P1", 1), _line("P2", 1)]
    assert merge_duplicate_lines(lines) == lines


# ─── check_customer ──────────────────────────────────────────────

def test_check_customer_missing():
    error = check_customer(CustomerId("C9"), None)
    assert isinstance(error, CustomerNotFoundError)
    assert error.code == "CUSTOMER_NOT_FOUND"


def test_check_customer_present():
    record = CustomerRecord(CustomerId("C1"), "Ada", "ada@example.com")
    assert check_customer(CustomerId("C1"), record) is None


# ─── check_products_resolved ─────────────────────────────────────

def test_no_products_resolved():
    error = check_products_resolved([_line("P8", 1), _line("P9", 1)], {})
    assert isinstance(error, NoProductsFoundError)
    assert error.requested_ids == ["P8", "P9"]


def test_some_products_missing_named_exactly():
    error = check_products_resolved(
        [_line("P1", 1), _line("P9", 1), _line("P7", 1)], _catalog(),
    )
    assert isinstance(error, ProductsNotFoundError)
    assert error.missing_ids == ["P9", "P7"]


def test_all_products_resolved():
    assert check_products_resolved([_line("P1", 1), _line("P2", 1)], _catalog()) is None


# ─── check_stock ─────────────────────────────────────────────────

def test_exact_stock_is_rejected():
    error = check_stock([_line("P1", 3)], _catalog())
    assert isinstance(error, InsufficientStockError)
    assert error.offending == [StockShortfall("P1", 3, 3)]


def test_one_below_stock_is_accepted():
    assert check_stock([_line("P1", 2)], _catalog()) is None


def test_every_short_line_enumerated():
    error = check_stock([_line("P1", 4), _line("P2", 1), _line("P2", 10)], _catalog())
    assert [(s.product_id, s.requested_quantity) for s in error.offending] == [
        ("P1", 4), ("P2", 10),
    ]


# ─── validate_admission ──────────────────────────────────────────

def test_missing_products_reported_before_stock():
    error = validate_admission([_line("P1", 99), _line("P9", 1)], _catalog())
    assert isinstance(error, ProductsNotFoundError)


def test_valid_request_passes():
    assert validate_admission([_line("P1", 2), _line("P2", 1)], _catalog()) is None


# ─── build_line_items / plan_reservations ────────────────────────

def test_line_items_snapshot_prices():
    drafts = build_line_items([_line("P1", 2), _line("P2", 1)], _catalog())
    assert [(d.product_id, d.unit_price, d.quantity) for d in drafts] == [
        ("P1", Decimal("100"), 2),
        ("P2", Decimal("50"), 1),
    ]


def test_reservations_follow_persisted_lines():
    persisted = [
        PersistedLine(OrderId("O1"), ProductId("P2"), Decimal("50"), 1),
        PersistedLine(OrderId("O1"), ProductId("P1"), Decimal("100"), 2),
    ]
    assert plan_reservations(persisted) == [
        StockReservation(ProductId("P2"), 1),
        StockReservation(ProductId("P1"), 2),
    ]


def test_describe_shortfalls_uses_fresh_availability():
    error = describe_shortfalls(
        [ProductId("P1"), ProductId("P5")],
        [_line("P1", 2), _line("P5", 1)],
        [ProductSnapshot(ProductId("P1"), Decimal("100"), 1)],
    )
    assert error.offending == [
        StockShortfall("P1", 1, 2),
        StockShortfall("P5", 0, 1),
    ]
