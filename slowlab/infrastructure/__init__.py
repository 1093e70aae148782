"""
Infrastructure package for the Slow Query Lab.

Centralizes database connectivity and the `orders` storage boundary. Keep this
layer focused on I/O, decoupled from seeding and scenario logic.
"""

from slowlab.infrastructure.db_factory import build_dsn, get_sync_connection
from slowlab.infrastructure.order_store import OrderStore, PlanRow, PostgresOrderStore

__all__ = [
    "OrderStore",
    "PlanRow",
    "PostgresOrderStore",
    "build_dsn",
    "get_sync_connection",
]
