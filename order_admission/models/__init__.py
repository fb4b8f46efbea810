"""ORM Models: SQLAlchemy declarative models for customers, products and orders.

Invariants:
    - All models inherit from Base (db/base.py)
    - Order is the aggregate root for its lines; lines never outlive their order

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from order_admission.models.customer import Customer  # noqa: F401
from order_admission.models.product import Product  # noqa: F401
from order_admission.models.order import Order  # noqa: F401
from order_admission.models.order_line import OrderLine  # noqa: F401
