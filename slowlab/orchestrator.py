"""
Orchestrator for a lab run: schema, seeding, dataset stats, scenarios.

Usage (example from CLI):
    from slowlab.orchestrator import LabConfig, open_store, run_lab

    store = open_store()
    try:
        results = run_lab(LabConfig(orders=1_000_000), store)
    finally:
        store.close()

Connection, schema and seeding failures are fatal and raised as `SetupError`
labelled with the stage. Scenario failures are recorded on their results.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional, Sequence

from slowlab.config import get_settings
from slowlab.domain.hot_rows import DATE_RANGE_TARGET, HOT_CUSTOMER_TARGET
from slowlab.errors import SetupError
from slowlab.infrastructure.db_factory import get_sync_connection
from slowlab.infrastructure.order_store import OrderStore, PostgresOrderStore
from slowlab.scenarios.abstract import Scenario, ScenarioResult
from slowlab.scenarios.catalog import default_scenarios
from slowlab.scenarios.runner import ScenarioRunner
from slowlab.seeding.populator import ALL_ORDERS, Populator, SeedReport
from slowlab.utils.logging import get_logger
from slowlab.utils.profiler import profile_block

log = get_logger(__name__)


def _default_orders() -> int:
    return get_settings().seed_orders


def _default_batch_size() -> int:
    return get_settings().seed_batch_size


def _default_seed() -> int:
    return get_settings().seed_random


@dataclass
class LabConfig:
    """Knobs for one run; mirrors the CLI flags."""

    orders: int = field(default_factory=_default_orders)
    batch_size: int = field(default_factory=_default_batch_size)
    seed: int = field(default_factory=_default_seed)
    skip_seed: bool = False
    skip_scenarios: bool = False
    show_plan: bool = True


def effective_orders(orders: int, minimum: int = HOT_CUSTOMER_TARGET) -> int:
    """Raise ``orders`` to the hot-customer minimum, warning when it changes."""
    if orders < minimum:
        log.warning(
            f"orders={orders} is below the {minimum} rows the hot-customer scenario needs; "
            f"raising to {minimum}",
            extra={"requested": orders, "minimum": minimum},
        )
        return minimum
    return orders


def open_store(dsn_override: Optional[str] = None) -> PostgresOrderStore:
    try:
        conn = get_sync_connection(dsn_override)
    except Exception as exc:
        raise SetupError("connect", exc) from exc
    return PostgresOrderStore(conn)


def prepare_dataset(store: OrderStore, populator: Populator, config: LabConfig) -> Optional[SeedReport]:
    """
    Ensure the schema and, unless skipped, seed every population.

    Returns the seed report, or None when seeding was skipped.
    """
    try:
        store.ensure_schema()
    except Exception as exc:
        raise SetupError("schema", exc) from exc

    if config.skip_seed:
        log.info("skip-seed enabled; reusing existing data")
        return None

    orders = effective_orders(config.orders, populator.targets.hot_customer)
    with profile_block("seed") as stats:
        try:
            report = populator.seed_dataset(orders)
        except Exception as exc:
            raise SetupError("seed", exc) from exc

    log.info(
        f"dataset ready (orders target={orders}) in {stats.duration_seconds:.2f}s",
        extra={**stats.as_log_extra(), "inserted": report.total_inserted},
    )
    return report


def log_dataset_stats(store: OrderStore) -> Optional[int]:
    """Log the current row count against the expected minimum; failures only warn."""
    try:
        orders = store.count(ALL_ORDERS)
    except Exception as exc:  # noqa: BLE001 - stats are informational
        log.warning(f"failed to collect dataset stats: {exc}")
        return None

    minimum = HOT_CUSTOMER_TARGET + DATE_RANGE_TARGET
    log.info(
        f"current dataset: orders={orders} (expected at least ~{minimum}: "
        f"hot customer={HOT_CUSTOMER_TARGET}, date range={DATE_RANGE_TARGET})",
        extra={"orders": orders, "expected_min": minimum},
    )
    return orders


def run_lab(
    config: LabConfig,
    store: OrderStore,
    populator: Optional[Populator] = None,
    scenarios: Optional[Sequence[Scenario]] = None,
) -> list[ScenarioResult]:
    """
    Run the full lab flow against ``store``.

    Returns an empty list when scenarios are skipped.
    """
    populator = populator or Populator(
        store, batch_size=config.batch_size, rng=random.Random(config.seed)
    )

    prepare_dataset(store, populator, config)
    log_dataset_stats(store)

    if config.skip_scenarios:
        log.info("skip-scenarios enabled; exiting")
        return []

    runner = ScenarioRunner(store, populator, capture_plans=config.show_plan)
    catalog = list(scenarios) if scenarios is not None else default_scenarios()
    with profile_block("scenarios") as stats:
        results = runner.run(catalog)

    failed = sum(1 for result in results if not result.ok)
    log.info(
        f"[LAB COMPLETE] {len(results)} scenario(s), {failed} failed",
        extra={**stats.as_log_extra(), "scenarios": len(results), "failed": failed},
    )
    return results


__all__ = [
    "LabConfig",
    "effective_orders",
    "log_dataset_stats",
    "open_store",
    "prepare_dataset",
    "run_lab",
]
