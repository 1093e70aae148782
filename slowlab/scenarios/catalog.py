"""
The built-in slow/fast scenario pairs.

Each pair runs the same logical lookup twice: once written in a way that keeps
PostgreSQL from using the index well, once written so it can.
"""

from __future__ import annotations

from slowlab.domain.hot_rows import (
    DATE_RANGE_END,
    DATE_RANGE_START,
    HOT_CUSTOMER_ID,
    HOT_PHONE,
)
from slowlab.scenarios.abstract import Scenario
from slowlab.seeding.populator import Populator

BOOKMARK_LOOKUP = "bookmark lookup vs covering index"
FUNCTION_ON_INDEX = "function on indexed column"
TYPE_MATCHING = "type matching"


def _hot_customer(populator: Populator) -> int:
    return populator.ensure_hot_customer_orders()


def _date_range(populator: Populator) -> int:
    return populator.ensure_date_range_orders()


def _hot_phone(populator: Populator) -> int:
    return populator.ensure_phone_hot_orders()


def default_scenarios() -> list[Scenario]:
    """The six catalog entries, in run order."""
    return [
        Scenario(
            type=BOOKMARK_LOOKUP,
            name="index + row fetch",
            description=(
                "Finds rows through the customer_id index, then fetches every full "
                "row from the heap."
            ),
            query="SELECT * FROM orders WHERE customer_id = %s",
            params=(HOT_CUSTOMER_ID,),
            setup=_hot_customer,
        ),
        Scenario(
            type=BOOKMARK_LOOKUP,
            name="covering index",
            description=(
                "Same filter but selects only customer_id, so the index alone "
                "answers the query."
            ),
            query="SELECT customer_id FROM orders WHERE customer_id = %s",
            params=(HOT_CUSTOMER_ID,),
            setup=_hot_customer,
        ),
        Scenario(
            type=FUNCTION_ON_INDEX,
            name="function-wrapped column",
            description="DATE(created_at) hides the column behind a function; the index is unusable.",
            query="SELECT * FROM orders WHERE DATE(created_at) = %s",
            params=(DATE_RANGE_START.date(),),
            setup=_date_range,
        ),
        Scenario(
            type=FUNCTION_ON_INDEX,
            name="range predicate",
            description=(
                "The same day as a half-open created_at range; the planner can "
                "scan the created_at index."
            ),
            query="SELECT * FROM orders WHERE created_at >= %s AND created_at < %s",
            params=(DATE_RANGE_START, DATE_RANGE_END),
            setup=_date_range,
        ),
        Scenario(
            type=TYPE_MATCHING,
            name="implicit type conversion",
            description=(
                "phone is text but is compared with a number, so every row is "
                "cast and the phone index is skipped."
            ),
            # PostgreSQL rejects text = bigint outright; the cast spells out the
            # conversion other engines apply silently.
            query=f"SELECT * FROM orders WHERE phone::bigint = {int(HOT_PHONE)}",
            setup=_hot_phone,
        ),
        Scenario(
            type=TYPE_MATCHING,
            name="type-matched literal",
            description="The same phone compared as a string hits the phone index directly.",
            query="SELECT * FROM orders WHERE phone = %s",
            params=(HOT_PHONE,),
            setup=_hot_phone,
        ),
    ]


__all__ = [
    "BOOKMARK_LOOKUP",
    "FUNCTION_ON_INDEX",
    "TYPE_MATCHING",
    "default_scenarios",
]
