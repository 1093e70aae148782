"""
Database connection factory utilities for the Slow Query Lab.

The lab is single-threaded and issues no concurrent writers, so it works on
one dedicated autocommit connection for the whole run. Writes that need to be
atomic (one insert batch) open their own transaction block.

Connection failures are not retried: an unreachable database is a fatal setup
error for the run.
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import quote

import psycopg
from psycopg import Connection

from slowlab.config import Settings, get_settings
from slowlab.utils.logging import get_logger

log = get_logger(__name__)


def build_dsn(settings: Optional[Settings] = None) -> str:
    """
    Compose a libpq URI from settings.

    ``db_options`` is appended verbatim as the query string, e.g.
    ``application_name=slowlab&sslmode=disable``.
    """
    settings = settings or get_settings()
    dsn = (
        f"postgresql://{quote(settings.db_user, safe='')}:{quote(settings.db_password, safe='')}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )
    if settings.db_options:
        dsn = f"{dsn}?{settings.db_options.lstrip('?')}"
    return dsn


def apply_statement_timeout(conn: Connection, timeout_ms: int) -> None:
    """Set a session-wide statement timeout; ``0`` leaves the server default."""
    if timeout_ms <= 0:
        return
    with conn.cursor() as cur:
        cur.execute(f"SET statement_timeout = {int(timeout_ms)}")


def get_sync_connection(dsn_override: Optional[str] = None) -> Connection:
    """
    Open a dedicated autocommit connection.

    Parameters
    ----------
    dsn_override : str, optional
        Connect here instead of the DSN built from settings (used by tests).

    Raises
    ------
    psycopg.OperationalError
        If the server cannot be reached or rejects the credentials.
    """
    settings = get_settings()
    conn = psycopg.connect(dsn_override or build_dsn(settings), autocommit=True)
    apply_statement_timeout(conn, settings.db_statement_timeout_ms)
    log.debug(
        "Connected to PostgreSQL",
        extra={"host": settings.db_host, "port": settings.db_port, "db": settings.db_name},
    )
    return conn


__all__ = [
    "apply_statement_timeout",
    "build_dsn",
    "get_sync_connection",
]
