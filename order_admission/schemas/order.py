"""Order Schemas: request validation and response shape for order admission.

Invariants:
    - OrderCreate.products is non-empty; every quantity is a positive integer
    - Response prices serialized as strings (Decimal, no float rounding)
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from order_admission.core.domain_types import (
    LineRequest, PersistedOrder, ProductId,
)


class OrderProductRequest(BaseModel):
    id: str = Field(min_length=1, max_length=36)
    quantity: int = Field(ge=1)


class OrderCreate(BaseModel):
    """Order admission request."""
    customer_id: str = Field(min_length=1, max_length=36)
    products: list[OrderProductRequest] = Field(min_length=1)

    def to_line_requests(self) -> list[LineRequest]:
        return [
            LineRequest(product_id=ProductId(p.id), quantity=p.quantity)
            for p in self.products
        ]


class OrderProductResponse(BaseModel):
    product_id: str
    price: Decimal
    quantity: int


class OrderResponse(BaseModel):
    id: str
    customer_id: str
    created_at: datetime | None = None
    total: Decimal
    order_products: list[OrderProductResponse]

    @classmethod
    def from_domain(cls, order: PersistedOrder) -> "OrderResponse":
        return cls(
            id=order.id,
            customer_id=order.customer_id,
            created_at=order.created_at,
            total=order.total,
            order_products=[
                OrderProductResponse(
                    product_id=line.product_id,
                    price=line.unit_price,
                    quantity=line.quantity,
                )
                for line in order.lines
            ],
        )
