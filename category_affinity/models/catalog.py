"""
Reference and transactional input records: categories, customers, orders.

These are the only records the pipeline consumes. They are validated on
construction and frozen afterwards — the pipeline never mutates its input.

``Category`` order matters: the list of categories handed to the matrix
builder defines the fixed row/column index space of every matrix.

JSON field names follow the exported data files (``customerId``,
``createdAt``, ``categoryId``); the snake_case attribute names are accepted
too, so records can be built directly in code and tests.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Category(BaseModel):
    """A product category.

    Attributes:
        id:         Unique category identifier, e.g. ``"skincare"``.
        name:       Human-readable label.
        popularity: Base popularity weight. Only meaningful to dataset
                    generators; the scoring pipeline ignores it.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    popularity: float = 0.0

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Category id must be a non-empty string.")
        return v


class Customer(BaseModel):
    """A customer. Only ``id`` is used by the pipeline."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str = ""
    email: str = ""
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")


class OrderItem(BaseModel):
    """One line of an order.

    Several items in the same order may share a category; co-occurrence and
    purchase frequency only look at the distinct categories of an order.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    category_id: str = Field(alias="categoryId")
    quantity: int = 1
    price: float = 0.0

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"quantity must be >= 1, got {v}.")
        return v

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"price must be >= 0, got {v}.")
        return v


class Order(BaseModel):
    """A customer order.

    Attributes:
        id:          Order identifier.
        customer_id: Owning customer.
        created_at:  Order timestamp. Naive datetimes are taken to be UTC.
        items:       Ordered list of line items.
        total:       Order value; computed from the items when omitted.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    customer_id: str = Field(alias="customerId")
    created_at: datetime = Field(alias="createdAt")
    items: list[OrderItem] = Field(default_factory=list)
    total: Optional[float] = None

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode="after")
    def fill_total(self) -> "Order":
        if self.total is None:
            computed = round(sum(i.quantity * i.price for i in self.items), 2)
            object.__setattr__(self, "total", computed)
        return self

    @property
    def category_ids(self) -> list[str]:
        """Distinct category ids of this order, in first-seen item order."""
        return list(dict.fromkeys(item.category_id for item in self.items))
