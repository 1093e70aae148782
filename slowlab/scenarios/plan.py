"""
Query-plan capture.

Plans are collected by trying an ordered list of strategies until one
succeeds: ``EXPLAIN ANALYZE`` first for actual row counts and timings, plain
``EXPLAIN`` when the analyzing form is unavailable. A plan that cannot be
captured at all is reported as a single diagnostic line; it never fails the
scenario.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from slowlab.infrastructure.order_store import OrderStore, PlanRow
from slowlab.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class PlanStrategy:
    """Prefix a query with a plan statement and run it through the store."""

    name: str
    prefix: str

    def capture(self, store: OrderStore, query: str, params: Sequence[Any]) -> list[PlanRow]:
        return store.explain(f"{self.prefix} {query}", params)


ANALYZE_PLAN = PlanStrategy(name="analyze", prefix="EXPLAIN ANALYZE")
STATIC_PLAN = PlanStrategy(name="static", prefix="EXPLAIN")
DEFAULT_PLAN_STRATEGIES: tuple[PlanStrategy, ...] = (ANALYZE_PLAN, STATIC_PLAN)


def format_plan_row(row: PlanRow) -> str:
    """
    Render one plan row as text.

    A single-column row (PostgreSQL's ``QUERY PLAN``) is printed bare; wider
    rows become ``key=value`` pairs in column order.
    """
    if len(row) == 1:
        return str(row[0][1])
    return " ".join(f"{key}={value}" for key, value in row)


def capture_plan(
    store: OrderStore,
    query: str,
    params: Sequence[Any] = (),
    strategies: Sequence[PlanStrategy] = DEFAULT_PLAN_STRATEGIES,
) -> list[str]:
    """
    Return the plan lines from the first strategy that succeeds.

    Raises ValueError when ``strategies`` is empty.
    """
    if not strategies:
        raise ValueError("capture_plan needs at least one plan strategy")
    last_error: Exception | None = None
    for strategy in strategies:
        try:
            rows = strategy.capture(store, query, params)
        except Exception as exc:  # noqa: BLE001 - each strategy fails independently
            log.debug(
                f"plan strategy '{strategy.name}' failed",
                extra={"strategy": strategy.name, "error": str(exc)},
            )
            last_error = exc
            continue
        return [format_plan_row(row) for row in rows]
    return [f"failed to collect EXPLAIN: {last_error}"]


__all__ = [
    "ANALYZE_PLAN",
    "DEFAULT_PLAN_STRATEGIES",
    "PlanStrategy",
    "STATIC_PLAN",
    "capture_plan",
    "format_plan_row",
]
