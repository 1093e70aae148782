"""
Domain models for the Slow Query Lab.

Defines the `orders` row schema (aligned with the DDL in
`slowlab.infrastructure.order_store`) and the small filter predicate the
populator uses to count and locate rows.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, model_validator

ORDER_COLUMNS: tuple[str, ...] = (
    "customer_id",
    "customer_name",
    "phone",
    "status",
    "product_category",
    "region",
    "total_amount",
    "discount_code",
    "note",
    "created_at",
    "updated_at",
    "shipped_at",
)


class Order(BaseModel):
    """
    Representation of a single row in the `orders` table.

    `phone` is text even though it looks numeric; the type-mismatch scenarios
    depend on the column staying a string.
    """

    id: Optional[int] = Field(None, description="Primary key (BIGSERIAL), set by the store.")
    customer_id: int = Field(..., ge=1, description="Owning customer.")
    customer_name: str = Field(..., max_length=64)
    phone: str = Field(..., max_length=32, pattern=r"^\d+$")
    status: str = Field(..., max_length=32)
    product_category: str = Field(..., max_length=32)
    region: str = Field(..., max_length=32)
    total_amount: Decimal = Field(..., decimal_places=2)
    discount_code: str = Field(..., max_length=32)
    note: str = Field(..., max_length=255)
    created_at: datetime
    updated_at: datetime
    shipped_at: Optional[datetime] = None

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "strict": False,
    }

    @model_validator(mode="after")
    def _shipped_after_created(self) -> "Order":
        if self.shipped_at is not None and self.shipped_at < self.created_at:
            raise ValueError("shipped_at must not precede created_at")
        return self

    def as_row(self) -> tuple:
        """Column values in `ORDER_COLUMNS` order, ready for COPY."""
        return tuple(getattr(self, column) for column in ORDER_COLUMNS)


class OrderFilter(BaseModel):
    """
    Conjunctive equality/range predicate over `orders`.

    Unset fields do not constrain; an empty filter matches every row.
    """

    customer_id: Optional[int] = None
    phone: Optional[str] = None
    created_from: Optional[datetime] = Field(None, description="Inclusive lower bound.")
    created_to: Optional[datetime] = Field(None, description="Exclusive upper bound.")

    model_config = {"frozen": True}

    def matches(self, order: Order) -> bool:
        if self.customer_id is not None and order.customer_id != self.customer_id:
            return False
        if self.phone is not None and order.phone != self.phone:
            return False
        if self.created_from is not None and order.created_at < self.created_from:
            return False
        if self.created_to is not None and order.created_at >= self.created_to:
            return False
        return True

    def to_sql(self) -> tuple[str, list]:
        """Render as a `WHERE` clause body plus positional params."""
        clauses: list[str] = []
        params: list = []
        if self.customer_id is not None:
            clauses.append("customer_id = %s")
            params.append(self.customer_id)
        if self.phone is not None:
            clauses.append("phone = %s")
            params.append(self.phone)
        if self.created_from is not None:
            clauses.append("created_at >= %s")
            params.append(self.created_from)
        if self.created_to is not None:
            clauses.append("created_at < %s")
            params.append(self.created_to)
        return (" AND ".join(clauses) or "TRUE"), params


__all__ = ["ORDER_COLUMNS", "Order", "OrderFilter"]
