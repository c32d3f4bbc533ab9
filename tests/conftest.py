"""
Shared pytest fixtures for the Category Affinity test suite.

Provides:
  - ``categories`` / ``category_ids``: a five-category catalog whose order
    defines the matrix index space.
  - ``sample_orders`` / ``sample_customers``: a small order history that
    exercises every batch outcome for goal ``skincare`` at ``REFERENCE_DATE``:
        cust-1  scored      (electronics, books, toys; last order 5 days ago)
        cust-2  skipped     already bought skincare
        cust-3  skipped     last order 150 days ago
        cust-4  skipped     already bought skincare
        cust-5  scored      (books, garden; last order 1 day ago)
        cust-6  skipped     already bought skincare
        cust-7  skipped     no orders
  - ``data_dir``: the same records written as JSON input files.
  - ``app_config``: an ``AppConfig`` whose directories all live under ``tmp_path``.
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from category_affinity.config import AppConfig, DataConfig, LoggingConfig
from category_affinity.models.catalog import Category, Customer, Order, OrderItem

REFERENCE_DATE = datetime(2024, 6, 30, 23, 59, 59, tzinfo=timezone.utc)

CATEGORY_IDS = ["electronics", "books", "toys", "garden", "skincare"]

# (order_id, customer_id, days before REFERENCE_DATE, category ids)
_ORDER_ROWS = [
    ("o-01", "cust-1",   5, ["electronics", "books"]),
    ("o-02", "cust-1",  40, ["electronics", "toys"]),
    ("o-03", "cust-2",  10, ["books", "garden"]),
    ("o-04", "cust-2", 200, ["books", "skincare"]),
    ("o-05", "cust-3", 150, ["electronics", "books"]),
    ("o-06", "cust-4",   2, ["toys", "garden", "skincare"]),
    ("o-07", "cust-5",  20, ["garden", "books"]),
    ("o-08", "cust-5",   1, ["garden"]),
    ("o-09", "cust-6",   3, ["skincare", "electronics"]),
    ("o-10", "cust-1",  60, ["electronics"]),
]


# ── Catalog ───────────────────────────────────────────────────────────────────

@pytest.fixture
def category_ids() -> list[str]:
    return list(CATEGORY_IDS)


@pytest.fixture
def categories() -> list[Category]:
    return [
        Category(id=cat, name=cat.title(), popularity=1.0)
        for cat in CATEGORY_IDS
    ]


@pytest.fixture
def reference_date() -> datetime:
    return REFERENCE_DATE


@pytest.fixture
def sample_orders() -> list[Order]:
    """Ten orders; see the module docstring for the per-customer outcome."""
    return [
        Order(
            id=order_id,
            customer_id=customer_id,
            created_at=REFERENCE_DATE - timedelta(days=days_ago),
            items=[OrderItem(category_id=cat, quantity=1, price=10.0) for cat in cats],
        )
        for order_id, customer_id, days_ago, cats in _ORDER_ROWS
    ]


@pytest.fixture
def sample_customers() -> list[Customer]:
    return [
        Customer(id=f"cust-{n}", name=f"Customer {n}", email=f"c{n}@example.com")
        for n in range(1, 8)
    ]


# ── Filesystem ────────────────────────────────────────────────────────────────

@pytest.fixture
def data_dir(
    tmp_path: Path,
    categories: list[Category],
    sample_customers: list[Customer],
    sample_orders: list[Order],
) -> Path:
    """Directory with categories.json, customers.json and orders.json."""
    target = tmp_path / "data"
    target.mkdir()
    for name, records in (
        ("categories.json", categories),
        ("customers.json", sample_customers),
        ("orders.json", sample_orders),
    ):
        payload = [r.model_dump(mode="json", by_alias=True) for r in records]
        (target / name).write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return target


@pytest.fixture
def app_config(tmp_path: Path, data_dir: Path) -> AppConfig:
    """Config pointing every directory into ``tmp_path``; console logging only."""
    return AppConfig(
        data=DataConfig(
            data_dir=str(data_dir),
            matrix_dir=str(tmp_path / "matrix"),
            output_dir=str(tmp_path / "affinity"),
        ),
        logging=LoggingConfig(level="WARNING", log_file=""),
    )
