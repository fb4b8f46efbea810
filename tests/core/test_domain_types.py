"""Domain Types: identity wrappers and order totals."""

from decimal import Decimal

from order_admission.core.domain_types import (
    CustomerId, OrderId, PersistedLine, PersistedOrder, ProductId,
)


def test_identity_types_wrap_str():
    assert CustomerId("C1") == "C1"
    assert ProductId("P1") == "P1"
    assert OrderId("O1") == "O1"


def test_order_total_uses_snapshot_prices():
    order = PersistedOrder(
        id=OrderId("O1"),
        customer_id=CustomerId("C1"),
        lines=(
            PersistedLine(OrderId("O1"), ProductId("P1"), Decimal("100.00"), 2),
            PersistedLine(OrderId("O1"), ProductId("P2"), Decimal("0.10"), 3),
        ),
    )
    assert order.total == Decimal("200.30")


def test_empty_order_total_is_zero():
    assert PersistedOrder(OrderId("O1"), CustomerId("C1")).total == Decimal("0")
