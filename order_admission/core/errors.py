"""Error Hierarchy: typed, categorized exceptions for every admission failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Rejections (400-level) carry structured payloads: offending ids, never only prose
    - ReservationCommitError is CRITICAL: an order may have been written without stock
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with OrderAdmissionError base: FastAPI global handler catches all
    - Pure core returns these as values; the service layer raises them
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    customer_id: str | None = None
    order_id: str | None = None
    debug_info: dict[str, Any] | None = None


class OrderAdmissionError(Exception):
    """Base exception for all order admission errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def details(self) -> dict[str, Any]:
        """Structured payload for the caller. Subclasses add their offending ids."""
        return {}

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "details": self.details(),
            }
        }


# ─── Admission Rejections (400-level) ───────────────────────────

class CustomerNotFoundError(OrderAdmissionError):
    """Referenced customer id does not resolve."""
    def __init__(self, customer_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"Customer '{customer_id}' not found",
            "CUSTOMER_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.customer_id = customer_id

    def details(self) -> dict[str, Any]:
        return {"customer_id": self.customer_id}


class NoProductsFoundError(OrderAdmissionError):
    """None of the requested product ids resolve."""
    def __init__(self, requested_ids: list[str], context: ErrorContext | None = None):
        super().__init__(
            "Could not find any products with the given ids",
            "NO_PRODUCTS_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.requested_ids = requested_ids

    def details(self) -> dict[str, Any]:
        return {"requested_ids": list(self.requested_ids)}


class ProductsNotFoundError(OrderAdmissionError):
    """Some requested product ids do not resolve."""
    def __init__(self, missing_ids: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"Could not find products: {', '.join(missing_ids)}",
            "PRODUCTS_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.missing_ids = missing_ids

    def details(self) -> dict[str, Any]:
        return {"missing_ids": list(self.missing_ids)}


@dataclass(frozen=True)
class StockShortfall:
    """One product whose requested quantity meets or exceeds its availability."""
    product_id: str
    available_quantity: int
    requested_quantity: int


class InsufficientStockError(OrderAdmissionError):
    """One or more requested quantities meet or exceed available stock."""
    def __init__(
        self, offending: list[StockShortfall], context: ErrorContext | None = None,
    ):
        listing = ", ".join(
            f"{s.product_id} ({s.available_quantity} available)" for s in offending
        )
        super().__init__(
            f"The products below do not have enough stock: {listing}",
            "INSUFFICIENT_STOCK", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 409,
        )
        self.offending = offending

    def details(self) -> dict[str, Any]:
        return {
            "offending": [
                {
                    "id": s.product_id,
                    "available_quantity": s.available_quantity,
                    "requested_quantity": s.requested_quantity,
                }
                for s in self.offending
            ],
        }


class ResourceNotFoundError(OrderAdmissionError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class DuplicateResourceError(OrderAdmissionError):
    """Unique field already taken (customer email, product name)."""
    def __init__(
        self, code: str, field: str, value: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{field} '{value}' is already in use",
            code, ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field

    def details(self) -> dict[str, Any]:
        return {"field": self.field}


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(OrderAdmissionError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class ReservationCommitError(OrderAdmissionError):
    """Order was written but the stock reservation could not be committed.

    The transaction is rolled back before this is raised, but callers must
    still treat it as a consistency alarm needing operator attention.
    """
    def __init__(
        self,
        reason: str,
        order_id: str | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.order_id = order_id
        super().__init__(
            f"Stock reservation could not be committed: {reason}",
            "RESERVATION_COMMIT_FAILED", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.order_id = order_id
        self.reason = reason

    def details(self) -> dict[str, Any]:
        return {"order_id": self.order_id, "reason": self.reason}
