"""
JSON loaders for the pipeline's input records.

Each record file holds a JSON array. Every element is validated into its
pydantic model before anything is returned; if **any** element fails, a
single ``ValueError`` lists the first 10 failures. A missing file raises
``FileNotFoundError`` naming the path.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Any, NamedTuple, TypeVar

from pydantic import BaseModel, ValidationError

from category_affinity.models.catalog import Category, Customer, Order
from category_affinity.models.matrix import CoAffinityMatrix, MatrixStats

logger = logging.getLogger(__name__)

CATEGORIES_FILE = "categories.json"
CUSTOMERS_FILE = "customers.json"
ORDERS_FILE = "orders.json"
COAFFINITY_FILE = "coaffinity-matrix.json"
MATRIX_STATS_FILE = "matrix-stats.json"

_MAX_ERRORS_SHOWN = 10

ModelT = TypeVar("ModelT", bound=BaseModel)


class LoadedData(NamedTuple):
    """All three input record sets of a data directory."""

    categories: list[Category]
    customers:  list[Customer]
    orders:     list[Order]


def load_categories(data_dir: Path) -> list[Category]:
    """Load ``categories.json``; duplicate ids are rejected."""
    categories = _load_records(Path(data_dir) / CATEGORIES_FILE, Category)
    counts = Counter(c.id for c in categories)
    dupes = sorted(cat for cat, n in counts.items() if n > 1)
    if dupes:
        raise ValueError(f"Duplicate category id(s) in {CATEGORIES_FILE}: {dupes}")
    return categories


def load_customers(data_dir: Path) -> list[Customer]:
    return _load_records(Path(data_dir) / CUSTOMERS_FILE, Customer)


def load_orders(data_dir: Path) -> list[Order]:
    return _load_records(Path(data_dir) / ORDERS_FILE, Order)


def load_all_data(data_dir: Path) -> LoadedData:
    """Load categories, customers and orders from one directory."""
    return LoadedData(
        categories=load_categories(data_dir),
        customers=load_customers(data_dir),
        orders=load_orders(data_dir),
    )


def load_coaffinity_matrix(matrix_dir: Path) -> CoAffinityMatrix:
    """Load ``coaffinity-matrix.json`` written by the matrix build."""
    data = _read_json(Path(matrix_dir) / COAFFINITY_FILE)
    try:
        return CoAffinityMatrix.from_dict(data)
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Malformed {COAFFINITY_FILE}: {exc}") from exc


def load_matrix_stats(matrix_dir: Path) -> MatrixStats:
    """Load ``matrix-stats.json`` written by the matrix build."""
    data = _read_json(Path(matrix_dir) / MATRIX_STATS_FILE)
    try:
        return MatrixStats.from_dict(data)
    except (KeyError, TypeError, AttributeError) as exc:
        raise ValueError(f"Malformed {MATRIX_STATS_FILE}: {exc}") from exc


# ── Private helpers ────────────────────────────────────────────────────────────

def _read_json(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    with open(path, encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in {path}: {exc}") from exc


def _load_records(path: Path, model: type[ModelT]) -> list[ModelT]:
    """Validate every element of a JSON array file into ``model``."""
    raw = _read_json(path)
    if not isinstance(raw, list):
        raise ValueError(f"{path.name} must contain a JSON array.")

    records: list[ModelT] = []
    errors: list[tuple[int, str]] = []

    for i, item in enumerate(raw):
        try:
            records.append(model.model_validate(item))
        except ValidationError as exc:
            errors.append((i, str(exc)))

    if errors:
        detail = "\n".join(
            f"  Record #{idx}: {msg}" for idx, msg in errors[:_MAX_ERRORS_SHOWN]
        )
        suffix = (
            f"\n  ... and {len(errors) - _MAX_ERRORS_SHOWN} more"
            if len(errors) > _MAX_ERRORS_SHOWN else ""
        )
        raise ValueError(
            f"{len(errors)} record(s) failed validation in {path.name}:\n{detail}{suffix}"
        )

    logger.info("Loaded %d %s record(s) from %s", len(records), model.__name__, path)
    return records
