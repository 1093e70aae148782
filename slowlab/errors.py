"""
Exception hierarchy for the Slow Query Lab.

Database driver errors (psycopg) are not wrapped at the point they occur; the
orchestrator labels them with the stage that failed.
"""
from __future__ import annotations


class SlowLabError(Exception):
    """Base class for lab-specific failures."""


class PopulationError(SlowLabError):
    """A top-up could not start, e.g. no template row to clone from."""


class SetupError(SlowLabError):
    """A fatal run stage (connect, schema, seed) failed."""

    def __init__(self, stage: str, cause: BaseException) -> None:
        super().__init__(f"{stage}: {cause}")
        self.stage = stage
        self.cause = cause


__all__ = ["PopulationError", "SetupError", "SlowLabError"]
