"""
Scenarios package for the Slow Query Lab.

Re-exports the scenario contracts, the built-in catalog and the runner so
downstream code can import from `slowlab.scenarios` directly.
"""

from slowlab.scenarios.abstract import Scenario, ScenarioResult
from slowlab.scenarios.catalog import default_scenarios
from slowlab.scenarios.plan import DEFAULT_PLAN_STRATEGIES, PlanStrategy, capture_plan
from slowlab.scenarios.runner import ScenarioRunner

__all__ = [
    "DEFAULT_PLAN_STRATEGIES",
    "PlanStrategy",
    "Scenario",
    "ScenarioResult",
    "ScenarioRunner",
    "capture_plan",
    "default_scenarios",
]
