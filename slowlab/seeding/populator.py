"""
Idempotent, resumable population of the `orders` table.

Every top-up follows the same shape: count the rows matching the population's
filter, return if the count already meets the target, otherwise insert exactly
the deficit in batches. Re-running against a seeded store therefore writes
nothing, and a run interrupted between batches resumes where it stopped.

A failed batch write propagates immediately; batches committed before it stay
in place.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterator, Optional

from slowlab.domain.hot_rows import (
    DATE_RANGE_END,
    DATE_RANGE_START,
    DATE_RANGE_TARGET,
    HOT_CUSTOMER_ID,
    HOT_CUSTOMER_TARGET,
    HOT_PHONE,
    HOT_PHONE_TARGET,
)
from slowlab.domain.models import Order, OrderFilter
from slowlab.errors import PopulationError
from slowlab.infrastructure.order_store import OrderStore
from slowlab.seeding.builder import (
    build_date_range_order,
    build_phone_hot_order,
    build_synthetic_order,
    clone_hot_customer_order,
)
from slowlab.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_BATCH_SIZE = 1000
GENERAL_SEED = 42
DEFAULT_RANDOM_SEED = 2024

HOT_CUSTOMER_FILTER = OrderFilter(customer_id=HOT_CUSTOMER_ID)
HOT_PHONE_FILTER = OrderFilter(phone=HOT_PHONE)
DATE_RANGE_FILTER = OrderFilter(created_from=DATE_RANGE_START, created_to=DATE_RANGE_END)
ALL_ORDERS = OrderFilter()


def _utc_now() -> datetime:
    # Stored as TIMESTAMP (no zone); everything is kept in naive UTC.
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class PopulationTargets:
    """Row counts the three hot populations are topped up to."""

    hot_customer: int = HOT_CUSTOMER_TARGET
    hot_phone: int = HOT_PHONE_TARGET
    date_range: int = DATE_RANGE_TARGET


@dataclass
class SeedReport:
    """Rows inserted per population by one `seed_dataset` call."""

    general: int = 0
    hot_customer: int = 0
    date_range: int = 0
    hot_phone: int = 0
    target_orders: int = 0

    @property
    def total_inserted(self) -> int:
        return self.general + self.hot_customer + self.date_range + self.hot_phone


class Populator:
    """
    Tops up the four order populations through an `OrderStore`.

    Parameters
    ----------
    store : OrderStore
        Where rows are counted and inserted.
    batch_size : int
        Rows per insert call; non-positive values fall back to 1000.
    targets : PopulationTargets
        Targets for the hot populations.
    rng : random.Random, optional
        Source for the hot-phone and date-range populations; defaults to
        ``Random(2024)``. The general population always uses its own
        ``Random(42)``.
    clock : callable, optional
        Returns the reference "now" for generated timestamps.
    """

    def __init__(
        self,
        store: OrderStore,
        batch_size: int = DEFAULT_BATCH_SIZE,
        targets: Optional[PopulationTargets] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.store = store
        self.batch_size = batch_size if batch_size > 0 else DEFAULT_BATCH_SIZE
        self.targets = targets or PopulationTargets()
        self.rng = rng if rng is not None else random.Random(DEFAULT_RANDOM_SEED)
        self.clock = clock

    def _flush_batches(self, population: str, orders: Iterator[Order], total: int) -> int:
        """Insert ``orders`` in batches; returns the number of rows written."""
        batch: list[Order] = []
        written = 0
        for order in orders:
            batch.append(order)
            if len(batch) == self.batch_size:
                self.store.insert_many(batch)
                written += len(batch)
                batch = []
                log.debug(
                    f"[{population}] {written}/{total} rows",
                    extra={"population": population, "written": written, "total": total},
                )
        if batch:
            self.store.insert_many(batch)
            written += len(batch)
        return written

    def _deficit(self, population: str, flt: OrderFilter, target: int) -> tuple[int, int]:
        """Return ``(existing, missing)`` for a population."""
        existing = self.store.count(flt)
        missing = max(target - existing, 0)
        if missing:
            log.info(
                f"[{population}] topping up {missing} rows",
                extra={"population": population, "existing": existing, "target": target},
            )
        else:
            log.debug(
                f"[{population}] already at target",
                extra={"population": population, "existing": existing, "target": target},
            )
        return existing, missing

    def ensure_general_orders(self, target: int) -> int:
        """
        Top up the whole table to ``target`` rows with general synthetic orders.

        The deficit is measured against every row, but global indexes continue
        after the rows that are not hot-phone or date-range rows. A store that
        only holds those special populations therefore still gets the 1,000
        designated hot-customer rows.
        """
        existing, missing = self._deficit("general", ALL_ORDERS, target)
        if not missing:
            return 0

        special = self.store.count(HOT_PHONE_FILTER) + self.store.count(DATE_RANGE_FILTER)
        start = max(existing - special, 0)
        rng = random.Random(GENERAL_SEED)
        now = self.clock()
        orders = (build_synthetic_order(start + i, rng, now) for i in range(missing))
        return self._flush_batches("general", orders, missing)

    def ensure_hot_customer_orders(self) -> int:
        """Clone the hot customer's first order until the customer owns the target row count."""
        existing, missing = self._deficit(
            "hot_customer", HOT_CUSTOMER_FILTER, self.targets.hot_customer
        )
        if not missing:
            return 0

        template = self.store.first(HOT_CUSTOMER_FILTER)
        if template is None:
            raise PopulationError(
                f"fetch template order: no order for customer {HOT_CUSTOMER_ID}; "
                "seed the general population first"
            )
        orders = (clone_hot_customer_order(template, existing + i) for i in range(missing))
        return self._flush_batches("hot_customer", orders, missing)

    def ensure_phone_hot_orders(self) -> int:
        existing, missing = self._deficit("hot_phone", HOT_PHONE_FILTER, self.targets.hot_phone)
        if not missing:
            return 0

        now = self.clock()
        orders = (build_phone_hot_order(existing + i, self.rng, now) for i in range(missing))
        return self._flush_batches("hot_phone", orders, missing)

    def ensure_date_range_orders(self) -> int:
        existing, missing = self._deficit(
            "date_range", DATE_RANGE_FILTER, self.targets.date_range
        )
        if not missing:
            return 0

        orders = (build_date_range_order(existing + i, self.rng) for i in range(missing))
        return self._flush_batches("date_range", orders, missing)

    def seed_dataset(self, orders: int) -> SeedReport:
        """
        Bring every population up to target.

        ``orders`` is raised to the hot-customer target when lower, since the
        general population has to be at least that large for the lab to make
        sense.
        """
        target = max(orders, self.targets.hot_customer)
        report = SeedReport(target_orders=target)
        report.general = self.ensure_general_orders(target)
        report.hot_customer = self.ensure_hot_customer_orders()
        report.date_range = self.ensure_date_range_orders()
        report.hot_phone = self.ensure_phone_hot_orders()
        return report


__all__ = [
    "ALL_ORDERS",
    "DATE_RANGE_FILTER",
    "DEFAULT_RANDOM_SEED",
    "GENERAL_SEED",
    "HOT_CUSTOMER_FILTER",
    "HOT_PHONE_FILTER",
    "PopulationTargets",
    "Populator",
    "SeedReport",
]
