"""
Seeded random helpers for synthetic order data.

Every function takes the `random.Random` instance to draw from; nothing here
touches the module-level `random` state, so a seed fixed by the caller fully
determines the output.
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from typing import Sequence, TypeVar

T = TypeVar("T")

STATUSES: tuple[str, ...] = ("pending", "paid", "fulfilled", "cancelled")
STATUS_WEIGHTS: tuple[int, ...] = (30, 40, 20, 10)
CATEGORIES: tuple[str, ...] = ("fashion", "electronics", "books", "grocery", "home")
REGIONS: tuple[str, ...] = ("north", "south", "east", "west")
PHONE_PREFIXES: tuple[str, ...] = ("138", "139", "137", "188", "199")
NOTES: tuple[str, ...] = (
    "Need gift wrap and rush delivery please.",
    "Customer called to change shipping address.",
    "Large wholesale order awaiting approval.",
    "Repeat customer eligible for loyalty perks.",
    "Flagged for manual fraud review before shipment.",
)

MAX_CREATED_AGE_HOURS = 365 * 24
MAX_SHIP_DELAY_SECONDS = 72 * 3600


def choice(items: Sequence[T], rng: random.Random) -> T:
    """Uniform pick from a non-empty sequence."""
    return items[rng.randrange(len(items))]


def weighted_choice(items: Sequence[T], weights: Sequence[int], rng: random.Random) -> T:
    """
    Pick ``items[i]`` with probability ``weights[i] / sum(weights)``.

    Draws one integer in ``[0, total)`` and walks the weights in order,
    subtracting until the remainder goes negative.
    """
    if not items or len(items) != len(weights):
        raise ValueError("items and weights must be non-empty and the same length")
    total = sum(weights)
    if total <= 0:
        raise ValueError("weights must sum to a positive value")

    n = rng.randrange(total)
    for item, weight in zip(items, weights):
        n -= weight
        if n < 0:
            return item
    return items[0]


def random_status(rng: random.Random) -> str:
    return weighted_choice(STATUSES, STATUS_WEIGHTS, rng)


def random_phone(rng: random.Random) -> str:
    """Mobile-looking number: a known prefix plus eight zero-padded digits."""
    return f"{choice(PHONE_PREFIXES, rng)}{rng.randrange(100_000_000):08d}"


def discount_code(rng: random.Random) -> str:
    return f"CODE{rng.randrange(100):02d}"


def random_note(rng: random.Random) -> str:
    return choice(NOTES, rng)


def random_created_at(now: datetime, rng: random.Random) -> datetime:
    """A whole-hour offset up to one year before ``now``."""
    return now - timedelta(hours=rng.randrange(MAX_CREATED_AGE_HOURS))


def random_shipped_at(created_at: datetime, rng: random.Random) -> datetime:
    """Strictly after ``created_at``, at most 72 hours later."""
    return created_at + timedelta(seconds=rng.randint(1, MAX_SHIP_DELAY_SECONDS))


__all__ = [
    "CATEGORIES",
    "NOTES",
    "PHONE_PREFIXES",
    "REGIONS",
    "STATUSES",
    "STATUS_WEIGHTS",
    "choice",
    "discount_code",
    "random_created_at",
    "random_note",
    "random_phone",
    "random_shipped_at",
    "random_status",
    "weighted_choice",
]
