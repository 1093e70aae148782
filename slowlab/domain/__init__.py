"""
Domain package for the Slow Query Lab.

Exports the `orders` row model, its filter predicate and the hot-row
constants shared by the populator and the scenario catalog.
"""

from slowlab.domain.hot_rows import (
    DATE_RANGE_END,
    DATE_RANGE_START,
    HOT_CUSTOMER_ID,
    HOT_CUSTOMER_TARGET,
    HOT_PHONE,
)
from slowlab.domain.models import ORDER_COLUMNS, Order, OrderFilter

__all__ = [
    "DATE_RANGE_END",
    "DATE_RANGE_START",
    "HOT_CUSTOMER_ID",
    "HOT_CUSTOMER_TARGET",
    "HOT_PHONE",
    "ORDER_COLUMNS",
    "Order",
    "OrderFilter",
]
