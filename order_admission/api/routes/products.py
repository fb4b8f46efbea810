"""Product Routes: registration and lookup.

Invariants:
    - Stock is never written here after creation; only order admission decrements it
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from order_admission.core.domain_types import ProductId
from order_admission.core.errors import ResourceNotFoundError
from order_admission.infrastructure.database import get_db
from order_admission.infrastructure.sql_stores import SqlProductStore
from order_admission.models.product import Product
from order_admission.schemas.catalog import ProductCreate, ProductResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/products", tags=["products"])


def _to_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=product.id, name=product.name,
        price=product.price, quantity=product.quantity,
    )


@router.post(
    "", response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    body: ProductCreate, db: AsyncSession = Depends(get_db),
):
    product = await SqlProductStore(db).add(body.name, body.price, body.quantity)
    await db.commit()
    logger.info(f"Product registered: {product.name}")
    return _to_response(product)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: str, db: AsyncSession = Depends(get_db),
):
    product = await SqlProductStore(db).get(ProductId(product_id))
    if product is None:
        raise ResourceNotFoundError("Product", product_id)
    return _to_response(product)
