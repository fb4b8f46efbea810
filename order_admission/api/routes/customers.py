"""Customer Routes: registration only; lookup is consumed by order admission."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from order_admission.infrastructure.database import get_db
from order_admission.infrastructure.sql_stores import SqlCustomerStore
from order_admission.schemas.catalog import CustomerCreate, CustomerResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/customers", tags=["customers"])


@router.post(
    "", response_model=CustomerResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_customer(
    body: CustomerCreate, db: AsyncSession = Depends(get_db),
):
    customer = await SqlCustomerStore(db).add(body.name, body.email)
    await db.commit()
    logger.info("Customer registered", extra={"customer_id": customer.id})
    return CustomerResponse(
        id=customer.id, name=customer.name, email=customer.email,
    )
