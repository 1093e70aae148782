"""
Pytest configuration for the Slow Query Lab.

Provides fixtures for:
- In-memory store, populator and shrunken population targets (unit tests)
- Database connection management (integration tests)
- Settings override for integration tests
"""

from __future__ import annotations

import os
import random
from datetime import datetime
from typing import Generator

import psycopg
import pytest

from slowlab.config import Settings
from slowlab.seeding.populator import PopulationTargets, Populator
from tests.fakes import InMemoryOrderStore

FIXED_NOW = datetime(2025, 6, 1, 12, 0, 0)

# Large enough that the hot customer needs clones beyond the 1,000 seeded rows.
SMALL_TARGETS = PopulationTargets(hot_customer=1_200, hot_phone=25, date_range=40)


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def memory_store() -> InMemoryOrderStore:
    return InMemoryOrderStore()


@pytest.fixture
def small_targets() -> PopulationTargets:
    return SMALL_TARGETS


@pytest.fixture
def populator(memory_store: InMemoryOrderStore, small_targets: PopulationTargets) -> Populator:
    return Populator(
        memory_store,
        batch_size=250,
        targets=small_targets,
        rng=random.Random(7),
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "slowuser"),
        db_password=os.getenv("DB_PASSWORD", "slowpass"),
        db_name=os.getenv("DB_NAME", "slowlab"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide an autocommit connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn, autocommit=True)
    try:
        yield conn
    finally:
        conn.close()
