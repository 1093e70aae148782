"""
Slow Query Lab - reproducible PostgreSQL indexing pitfall demonstrations.

Seeds an `orders` table with deterministic synthetic data, then runs paired
slow/fast query scenarios and captures their plans:

- Bookmark lookups (index scan + heap fetch) vs covering-index reads
- Function-wrapped predicates vs range predicates on a timestamp column
- Type-mismatched vs type-matched comparisons on a text column
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

from slowlab.config import Settings, get_settings
from slowlab.orchestrator import LabConfig, run_lab
from slowlab.scenarios import Scenario, ScenarioResult, ScenarioRunner, default_scenarios
from slowlab.seeding import Populator, PopulationTargets
from slowlab.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Orchestration
    "LabConfig",
    "run_lab",
    # Seeding
    "PopulationTargets",
    "Populator",
    # Scenarios
    "Scenario",
    "ScenarioResult",
    "ScenarioRunner",
    "default_scenarios",
    # Logging
    "configure_logging",
    "get_logger",
]
