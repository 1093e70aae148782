"""
Scenario definitions and result contracts for the Slow Query Lab.

A `Scenario` is static: one query plus the data precondition it needs. A
`ScenarioResult` is produced once per scenario per run and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Optional

if TYPE_CHECKING:
    from slowlab.seeding.populator import Populator

ScenarioSetup = Callable[["Populator"], int]


@dataclass(frozen=True)
class Scenario:
    """
    One side of a slow/fast comparison.

    Attributes
    ----------
    type : str
        Comparison group; the two scenarios of a pair share it.
    name : str
        Short label for the variant.
    description : str
        What the query does to the index, in one sentence.
    query : str
        SQL with psycopg ``%s`` placeholders.
    params : tuple
        Values bound to the placeholders.
    setup : callable, optional
        Precondition run before the query; receives the populator and returns
        the number of rows it inserted.
    """

    type: str
    name: str
    description: str
    query: str
    params: tuple[Any, ...] = ()
    setup: Optional[ScenarioSetup] = None


@dataclass
class ScenarioResult:
    type: str
    name: str
    description: str
    duration_seconds: float = 0.0
    row_count: int = 0
    plan: list[str] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def for_scenario(cls, scenario: Scenario) -> "ScenarioResult":
        return cls(type=scenario.type, name=scenario.name, description=scenario.description)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def status(self) -> str:
        return "OK" if self.error is None else f"ERR: {self.error}"

    def as_dict(self) -> dict[str, Any]:
        """Flat row for display or JSON output."""
        return {
            "type": self.type,
            "name": self.name,
            "description": self.description,
            "duration_seconds": round(self.duration_seconds, 4),
            "row_count": self.row_count,
            "status": self.status,
        }


__all__ = ["Scenario", "ScenarioResult", "ScenarioSetup"]
