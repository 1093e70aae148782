"""
Storage boundary for the `orders` table.

`OrderStore` is the narrow interface the populator and the scenario runner
depend on; `PostgresOrderStore` implements it on a psycopg connection.
Unit tests substitute an in-memory implementation.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from psycopg import Connection
from psycopg.rows import dict_row

from slowlab.domain.models import ORDER_COLUMNS, Order, OrderFilter

# A query-plan row: ordered (column, value) pairs. The column set depends on
# the engine and its version, so it is not modelled as a fixed record.
PlanRow = tuple[tuple[str, Any], ...]

SCHEMA_DDL: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS orders (
        id               BIGSERIAL PRIMARY KEY,
        customer_id      BIGINT        NOT NULL,
        customer_name    VARCHAR(64)   NOT NULL,
        phone            VARCHAR(32)   NOT NULL,
        status           VARCHAR(32)   NOT NULL,
        product_category VARCHAR(32)   NOT NULL,
        region           VARCHAR(32)   NOT NULL,
        total_amount     NUMERIC(12, 2) NOT NULL,
        discount_code    VARCHAR(32)   NOT NULL,
        note             VARCHAR(255)  NOT NULL,
        created_at       TIMESTAMP     NOT NULL,
        updated_at       TIMESTAMP     NOT NULL,
        shipped_at       TIMESTAMP
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_orders_customer_id ON orders (customer_id)",
    "CREATE INDEX IF NOT EXISTS idx_orders_customer_name ON orders (customer_name)",
    "CREATE INDEX IF NOT EXISTS idx_orders_phone ON orders (phone)",
    "CREATE INDEX IF NOT EXISTS idx_orders_status ON orders (status)",
    "CREATE INDEX IF NOT EXISTS idx_orders_product_category ON orders (product_category)",
    "CREATE INDEX IF NOT EXISTS idx_orders_region ON orders (region)",
    "CREATE INDEX IF NOT EXISTS idx_orders_created_at ON orders (created_at)",
    "CREATE INDEX IF NOT EXISTS idx_orders_updated_at ON orders (updated_at)",
    "CREATE INDEX IF NOT EXISTS idx_orders_shipped_at ON orders (shipped_at)",
)


@runtime_checkable
class OrderStore(Protocol):
    """
    Operations the lab needs from the relational store.

    Implementations raise their driver's exceptions unchanged; callers decide
    which failures are fatal.
    """

    def ensure_schema(self) -> None:
        """Create the `orders` table and its indexes if missing."""
        ...

    def count(self, flt: OrderFilter) -> int:
        """Number of rows matching ``flt``."""
        ...

    def first(self, flt: OrderFilter) -> Optional[Order]:
        """The matching row with the lowest id, or None."""
        ...

    def insert_many(self, orders: Sequence[Order]) -> None:
        """Insert one batch atomically; ids are assigned by the store."""
        ...

    def drain(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Execute a read query, consume every row, return the row count."""
        ...

    def explain(self, sql: str, params: Sequence[Any] = ()) -> list[PlanRow]:
        """Execute a plan statement and return its rows as key/value pairs."""
        ...

    def close(self) -> None:
        ...


class PostgresOrderStore:
    """
    `OrderStore` over a single autocommit psycopg connection.

    Batches are loaded with ``COPY ... FROM STDIN`` inside a transaction, so a
    failed batch leaves no partial rows while earlier batches stay committed.
    """

    def __init__(self, conn: Connection, fetch_size: int = 10_000) -> None:
        self._conn = conn
        self.fetch_size = fetch_size

    def ensure_schema(self) -> None:
        with self._conn.transaction():
            with self._conn.cursor() as cur:
                for statement in SCHEMA_DDL:
                    cur.execute(statement)

    def count(self, flt: OrderFilter) -> int:
        where, params = flt.to_sql()
        with self._conn.cursor() as cur:
            cur.execute(f"SELECT COUNT(*) FROM orders WHERE {where}", params)
            row = cur.fetchone()
        return int(row[0]) if row else 0

    def first(self, flt: OrderFilter) -> Optional[Order]:
        where, params = flt.to_sql()
        columns = ", ".join(("id",) + ORDER_COLUMNS)
        with self._conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                f"SELECT {columns} FROM orders WHERE {where} ORDER BY id ASC LIMIT 1",
                params,
            )
            row = cur.fetchone()
        return Order.model_validate(row) if row else None

    def insert_many(self, orders: Sequence[Order]) -> None:
        if not orders:
            return
        copy_sql = f"COPY orders ({', '.join(ORDER_COLUMNS)}) FROM STDIN"
        with self._conn.transaction():
            with self._conn.cursor() as cur:
                with cur.copy(copy_sql) as copy:
                    for order in orders:
                        copy.write_row(order.as_row())

    def drain(self, sql: str, params: Sequence[Any] = ()) -> int:
        rows = 0
        # Server-side cursor keeps a million-row result out of client memory.
        with self._conn.transaction():
            with self._conn.cursor(name="slowlab_drain") as cur:
                cur.execute(sql, params or None)
                while True:
                    batch = cur.fetchmany(self.fetch_size)
                    if not batch:
                        break
                    rows += len(batch)
        return rows

    def explain(self, sql: str, params: Sequence[Any] = ()) -> list[PlanRow]:
        with self._conn.cursor() as cur:
            cur.execute(sql, params or None)
            if cur.description is None:
                return []
            names = [column.name for column in cur.description]
            return [tuple(zip(names, row)) for row in cur.fetchall()]

    def close(self) -> None:
        self._conn.close()


__all__ = ["OrderStore", "PlanRow", "PostgresOrderStore", "SCHEMA_DDL"]
