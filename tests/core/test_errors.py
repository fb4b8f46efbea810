"""Error Hierarchy: REST envelopes and structured payloads."""

from order_admission.core.errors import (
    CustomerNotFoundError, ErrorCategory, ErrorSeverity, InsufficientStockError,
    NoProductsFoundError, OrderAdmissionError, ProductsNotFoundError,
    ReservationCommitError, StockShortfall,
)


def test_all_rejections_share_base():
    for error in (
        CustomerNotFoundError("C1"),
        NoProductsFoundError(["P1"]),
        ProductsNotFoundError(["P9"]),
        InsufficientStockError([StockShortfall("P1", 3, 3)]),
        ReservationCommitError("boom"),
    ):
        assert isinstance(error, OrderAdmissionError)


def test_envelope_shape():
    response = ProductsNotFoundError(["P9", "P8"]).to_response()
    error = response["error"]
    assert error["code"] == "PRODUCTS_NOT_FOUND"
    assert error["category"] == ErrorCategory.RESOURCE_NOT_FOUND.value
    assert error["severity"] == "error"
    assert error["details"] == {"missing_ids": ["P9", "P8"]}
    assert "P9, P8" in error["message"]
    assert "timestamp" in error


def test_insufficient_stock_details_enumerate_offenders():
    error = InsufficientStockError([
        StockShortfall("P1", 3, 3), StockShortfall("P2", 1, 4),
    ])
    assert error.http_status == 409
    assert error.details()["offending"] == [
        {"id": "P1", "available_quantity": 3, "requested_quantity": 3},
        {"id": "P2", "available_quantity": 1, "requested_quantity": 4},
    ]


def test_reservation_commit_error_is_critical():
    error = ReservationCommitError("commit failed", order_id="O7")
    assert error.severity == ErrorSeverity.CRITICAL
    assert error.http_status == 503
    assert error.context.order_id == "O7"
    assert error.details() == {"order_id": "O7", "reason": "commit failed"}
