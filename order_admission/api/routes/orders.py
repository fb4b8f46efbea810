"""Order Routes: admission and lookup.

Invariants:
    - POST delegates the whole procedure to OrderAdmissionService; the route never commits
    - Admission errors propagate to the global handler with their structured details
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from order_admission.core.domain_types import CustomerId, OrderId
from order_admission.core.errors import ResourceNotFoundError
from order_admission.infrastructure.database import get_db
from order_admission.infrastructure.sql_stores import SqlOrderStore
from order_admission.schemas.order import OrderCreate, OrderResponse
from order_admission.services.order_admission import OrderAdmissionService

router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


@router.post(
    "", response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_order(
    body: OrderCreate, db: AsyncSession = Depends(get_db),
):
    """Admit an order: validate stock, snapshot prices, persist, reserve."""
    service = OrderAdmissionService.for_session(db)
    order = await service.admit_order(
        CustomerId(body.customer_id), body.to_line_requests(),
    )
    return OrderResponse.from_domain(order)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str, db: AsyncSession = Depends(get_db),
):
    order = await SqlOrderStore(db).find_by_id(OrderId(order_id))
    if order is None:
        raise ResourceNotFoundError("Order", order_id)
    return OrderResponse.from_domain(order)
