"""Order Admission Service: resolve, validate, persist, reserve; all or nothing.

Invariants:
    - Stages run strictly in order: customer -> products -> order -> reservation
    - Reservations are planned from the persisted lines, not the raw request
    - Exactly one commit per successful admission; every failure path rolls back,
      including cancellation of the running task
    - A reservation that loses a race surfaces as InsufficientStockError with
      availability re-read after rollback
    - Any other failure after the order was written surfaces as ReservationCommitError
    - No retries here: callers decide whether to resubmit

Design Decisions:
    - Stores and transaction injected through the constructor (core protocols), so
      tests swap in fakes and production wires one AsyncSession into all of them
"""

import asyncio
import logging
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from order_admission.core.admission import (
    build_line_items, check_customer, describe_shortfalls, index_products,
    merge_duplicate_lines, plan_reservations, validate_admission,
)
from order_admission.core.domain_types import (
    CustomerId, LineRequest, PersistedOrder,
)
from order_admission.core.errors import (
    ErrorSeverity, OrderAdmissionError, ReservationCommitError,
)
from order_admission.core.repository_protocols import (
    CustomerStore, OrderStore, ProductStore, TransactionScope,
)
from order_admission.infrastructure.sql_stores import (
    SqlCustomerStore, SqlOrderStore, SqlProductStore,
)

logger = logging.getLogger(__name__)


class OrderAdmissionService:
    """Turns an order request into a persisted order plus a stock decrement."""

    def __init__(
        self,
        customers: CustomerStore,
        products: ProductStore,
        orders: OrderStore,
        transaction: TransactionScope,
    ):
        self.customers = customers
        self.products = products
        self.orders = orders
        self.transaction = transaction

    @classmethod
    def for_session(cls, db: AsyncSession) -> "OrderAdmissionService":
        """Wire the SQL stores onto one session so they share its transaction."""
        return cls(
            customers=SqlCustomerStore(db),
            products=SqlProductStore(db),
            orders=SqlOrderStore(db),
            transaction=db,
        )

    async def admit_order(
        self, customer_id: CustomerId, requested_lines: Iterable[LineRequest],
    ) -> PersistedOrder:
        """Admit an order or raise; nothing is left committed on failure."""
        lines = merge_duplicate_lines(requested_lines)
        try:
            order = await self._admit(customer_id, lines)
        except OrderAdmissionError as e:
            await self.transaction.rollback()
            self._log_failure(customer_id, e)
            raise
        except (Exception, asyncio.CancelledError):
            await self.transaction.rollback()
            raise
        logger.info(
            f"Order admitted with {len(order.lines)} line(s)",
            extra={"order_id": order.id, "customer_id": customer_id},
        )
        return order

    async def _admit(
        self, customer_id: CustomerId, lines: list[LineRequest],
    ) -> PersistedOrder:
        customer = await self.customers.find_by_id(customer_id)
        error = check_customer(customer_id, customer)
        if error:
            raise error

        products = await self.products.find_all_by_id(
            {line.product_id for line in lines},
        )
        products_by_id = index_products(products)
        error = validate_admission(lines, products_by_id)
        if error:
            raise error

        order = await self.orders.create(
            customer_id, build_line_items(lines, products_by_id),
        )
        reservations = plan_reservations(order.lines)

        try:
            conflicted = await self.products.reserve_stock(reservations)
        except Exception as e:
            raise ReservationCommitError(str(e), order.id) from e

        if conflicted:
            await self.transaction.rollback()
            fresh = await self.products.find_all_by_id(set(conflicted))
            raise describe_shortfalls(conflicted, lines, fresh)

        try:
            await self.transaction.commit()
        except Exception as e:
            raise ReservationCommitError(f"commit failed: {e}", order.id) from e
        return order

    @staticmethod
    def _log_failure(customer_id: CustomerId, error: OrderAdmissionError) -> None:
        extra = {
            "customer_id": customer_id,
            "error_code": error.code,
            "order_id": error.context.order_id,
        }
        if error.severity == ErrorSeverity.CRITICAL:
            logger.error(f"Order admission failed: {error.message}", extra=extra)
        else:
            logger.warning(f"Order rejected: {error.message}", extra=extra)
