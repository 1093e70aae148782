"""
Deliberately overrepresented keys that the scenario catalog queries against.

Each constant pairs a value with the row count the populator tops it up to.
"""
from __future__ import annotations

from datetime import datetime, timedelta

# Bookmark lookup vs covering index: one customer owning a huge slice of orders.
HOT_CUSTOMER_ID = 100
HOT_CUSTOMER_TARGET = 1_000_000
# The first N synthetic orders go to the hot customer so a template row exists.
HOT_CUSTOMER_SEED_ROWS = 1_000

# Implicit type conversion: a phone number shared by many orders.
HOT_PHONE = "13812345678"
HOT_PHONE_TARGET = 2_000

# Function-wrapped vs range predicate on created_at.
DATE_RANGE_DAY = "2024-01-01"
DATE_RANGE_START = datetime(2024, 1, 1)
DATE_RANGE_END = DATE_RANGE_START + timedelta(hours=24)
DATE_RANGE_TARGET = 2_000

__all__ = [
    "DATE_RANGE_DAY",
    "DATE_RANGE_END",
    "DATE_RANGE_START",
    "DATE_RANGE_TARGET",
    "HOT_CUSTOMER_ID",
    "HOT_CUSTOMER_SEED_ROWS",
    "HOT_CUSTOMER_TARGET",
    "HOT_PHONE",
    "HOT_PHONE_TARGET",
]
