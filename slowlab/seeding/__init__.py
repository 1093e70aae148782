"""
Seeding package for the Slow Query Lab.

Random generators, per-population order builders and the idempotent
populator that writes them through an `OrderStore`.
"""

from slowlab.seeding.builder import build_synthetic_order, clone_hot_customer_order
from slowlab.seeding.populator import PopulationTargets, Populator, SeedReport

__all__ = [
    "PopulationTargets",
    "Populator",
    "SeedReport",
    "build_synthetic_order",
    "clone_hot_customer_order",
]
