"""
Sequential scenario execution.

For each scenario, in catalog order: ensure its data precondition, run and
time the query, then capture its plan. Failures stay local to the scenario
that raised them; the runner always returns one result per scenario.
"""

from __future__ import annotations

import time
from typing import Iterable, Sequence

from slowlab.infrastructure.order_store import OrderStore
from slowlab.scenarios.abstract import Scenario, ScenarioResult
from slowlab.scenarios.plan import DEFAULT_PLAN_STRATEGIES, PlanStrategy, capture_plan
from slowlab.seeding.populator import Populator
from slowlab.utils.logging import get_logger

log = get_logger(__name__)


class ScenarioRunner:
    """
    Run scenarios against an `OrderStore`.

    Parameters
    ----------
    store : OrderStore
        Store the queries run against.
    populator : Populator
        Handed to each scenario's setup so preconditions write through the
        same path as seeding.
    plan_strategies : sequence of PlanStrategy
        Tried in order when capturing plans.
    capture_plans : bool
        Skip plan capture entirely when False.
    """

    def __init__(
        self,
        store: OrderStore,
        populator: Populator,
        plan_strategies: Sequence[PlanStrategy] = DEFAULT_PLAN_STRATEGIES,
        capture_plans: bool = True,
    ) -> None:
        self.store = store
        self.populator = populator
        if capture_plans and not plan_strategies:
            raise ValueError("plan capture is enabled but no plan strategies were given")
        self.plan_strategies = tuple(plan_strategies)
        self.capture_plans = capture_plans

    def run_one(self, scenario: Scenario) -> ScenarioResult:
        result = ScenarioResult.for_scenario(scenario)
        log.info(f"[SCENARIO START] {scenario.name}", extra={"scenario": scenario.name})

        if scenario.setup is not None:
            try:
                inserted = scenario.setup(self.populator)
            except Exception as exc:  # noqa: BLE001 - recorded on the result, run continues
                log.exception(f"[SCENARIO SETUP FAILED] {scenario.name}")
                result.error = f"setup: {exc}"
                return result
            if inserted:
                log.info(
                    f"[SCENARIO SETUP] {scenario.name} inserted {inserted} rows",
                    extra={"scenario": scenario.name, "rows": inserted},
                )

        try:
            start = time.perf_counter()
            result.row_count = self.store.drain(scenario.query, scenario.params)
            result.duration_seconds = time.perf_counter() - start
        except Exception as exc:  # noqa: BLE001 - recorded on the result, run continues
            log.exception(f"[SCENARIO FAILED] {scenario.name}")
            result.error = str(exc)
            return result

        if self.capture_plans:
            result.plan = capture_plan(
                self.store, scenario.query, scenario.params, self.plan_strategies
            )

        log.info(
            f"[SCENARIO SUCCESS] {scenario.name}",
            extra={
                "scenario": scenario.name,
                "rows": result.row_count,
                "duration_seconds": round(result.duration_seconds, 4),
            },
        )
        return result

    def run(self, scenarios: Iterable[Scenario]) -> list[ScenarioResult]:
        return [self.run_one(scenario) for scenario in scenarios]


__all__ = ["ScenarioRunner"]
