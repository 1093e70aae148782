"""
Synthetic order construction.

One function per population the populator maintains. Builders are pure: the
same index, random source state and reference time always produce the same
order.
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from decimal import Decimal

from slowlab.domain.hot_rows import (
    DATE_RANGE_DAY,
    DATE_RANGE_START,
    HOT_CUSTOMER_ID,
    HOT_CUSTOMER_SEED_ROWS,
    HOT_PHONE,
)
from slowlab.domain.models import Order
from slowlab.seeding.generators import (
    CATEGORIES,
    REGIONS,
    choice,
    discount_code,
    random_created_at,
    random_note,
    random_phone,
    random_shipped_at,
    random_status,
)

MAX_CUSTOMER_ID = 50_000
SHIPPED_RATIO = 0.7

HOT_NOTE_CHAR_LIMIT = 70
# Wide, near-identical notes make each heap fetch on the hot customer expensive.
HOT_NOTE_PREFIX = ("hot-customer order payload " * 40)[:HOT_NOTE_CHAR_LIMIT]

PHONE_HOT_CUSTOMER_BASE = HOT_CUSTOMER_ID + 2_000
DATE_RANGE_CUSTOMER_ID = HOT_CUSTOMER_ID + 1_000
DATE_RANGE_SHIPPED_RATIO = 0.6


def _amount(value: float) -> Decimal:
    return Decimal(f"{value:.2f}")


def customer_name(customer_id: int) -> str:
    return f"Customer {customer_id:06d}"


def build_synthetic_order(index: int, rng: random.Random, now: datetime) -> Order:
    """
    Build the general-population order at global position ``index``.

    The first ``HOT_CUSTOMER_SEED_ROWS`` indexes belong to the hot customer;
    the rest get a uniformly random customer id.
    """
    if index < HOT_CUSTOMER_SEED_ROWS:
        customer_id = HOT_CUSTOMER_ID
    else:
        customer_id = rng.randint(1, MAX_CUSTOMER_ID)

    created = random_created_at(now, rng)
    shipped = random_shipped_at(created, rng) if rng.random() < SHIPPED_RATIO else None

    return Order(
        customer_id=customer_id,
        customer_name=customer_name(customer_id),
        phone=random_phone(rng),
        status=random_status(rng),
        product_category=choice(CATEGORIES, rng),
        region=choice(REGIONS, rng),
        total_amount=_amount(10 + rng.random() * 990),
        discount_code=discount_code(rng),
        note=random_note(rng),
        created_at=created,
        updated_at=created,
        shipped_at=shipped,
    )


def clone_hot_customer_order(template: Order, index: int) -> Order:
    """Re-stamp ``template`` as hot-customer row ``index``; timestamps shift by ``index`` seconds."""
    offset = timedelta(seconds=index)
    created = template.created_at + offset
    return template.model_copy(
        update={
            "id": None,
            "created_at": created,
            "updated_at": created,
            "shipped_at": template.shipped_at + offset if template.shipped_at else None,
            "note": f"{HOT_NOTE_PREFIX}#{index}",
        }
    )


def build_phone_hot_order(index: int, rng: random.Random, now: datetime) -> Order:
    created = random_created_at(now, rng)
    return Order(
        customer_id=PHONE_HOT_CUSTOMER_BASE + index,
        customer_name=f"PhoneHot {index:06d}",
        phone=HOT_PHONE,
        status=random_status(rng),
        product_category="electronics",
        region="east",
        total_amount=_amount(199 + rng.random() * 50),
        discount_code="PHONEHOT",
        note=f"Phone hot sample #{index}",
        created_at=created,
        updated_at=created,
    )


def build_date_range_order(index: int, rng: random.Random) -> Order:
    """An order created at a uniformly random second of the date-range day."""
    created = DATE_RANGE_START + timedelta(seconds=rng.randrange(24 * 60 * 60))
    shipped = None
    if rng.random() < DATE_RANGE_SHIPPED_RATIO:
        shipped = created + timedelta(hours=rng.randint(1, 48))

    return Order(
        customer_id=DATE_RANGE_CUSTOMER_ID,
        customer_name=f"DateHot {index:06d}",
        phone=random_phone(rng),
        status=random_status(rng),
        product_category=choice(CATEGORIES, rng),
        region=choice(REGIONS, rng),
        total_amount=_amount(50 + rng.random() * 500),
        discount_code=discount_code(rng),
        note=f"Date range order {DATE_RANGE_DAY} #{index}",
        created_at=created,
        updated_at=created,
        shipped_at=shipped,
    )


__all__ = [
    "HOT_NOTE_PREFIX",
    "build_date_range_order",
    "build_phone_hot_order",
    "build_synthetic_order",
    "clone_hot_customer_order",
    "customer_name",
]
