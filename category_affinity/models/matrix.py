"""
Category-by-category matrix result types.

Every matrix carries the ordered list of category ids that defines its
index space; ``matrix[i][j]`` always refers to ``categories[i]`` and
``categories[j]``. All matrices produced by the pipeline are symmetric with a
zero diagonal.

Matrices are plain ``list[list[float]]`` so they serialize to JSON as-is.
They are built once per dataset and then shared read-only by every
per-customer computation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def zeros(n: int) -> list[list[float]]:
    """Return an ``n`` x ``n`` matrix of zeros."""
    return [[0.0] * n for _ in range(n)]


def index_map(categories: list[str]) -> dict[str, int]:
    """Map category id → row/column index."""
    return {cat: idx for idx, cat in enumerate(categories)}


@dataclass(frozen=True)
class CoOccurrenceMatrix:
    """Pairwise co-order counts.

    Attributes:
        categories:   Category ids in index order.
        matrix:       ``matrix[i][j]`` = number of orders containing both
                      categories at least once. Diagonal unused (0).
        total_orders: Number of orders scanned.
        order_counts: Category id → number of orders containing it.
    """

    categories:   list[str]
    matrix:       list[list[float]]
    total_orders: int
    order_counts: dict[str, int]

    def to_dict(self) -> dict[str, Any]:
        return {
            "categories":  self.categories,
            "matrix":      self.matrix,
            "totalOrders": self.total_orders,
            "orderCounts": dict(self.order_counts),
        }


@dataclass(frozen=True)
class LiftMatrix:
    """Pairwise lift ratios (observed / expected co-occurrence)."""

    categories: list[str]
    matrix:     list[list[float]]

    def to_dict(self) -> dict[str, Any]:
        return {"categories": self.categories, "matrix": self.matrix}


@dataclass(frozen=True)
class NormalizedMatrix:
    """A matrix rescaled into [0, 1] using P5/P95 clipping.

    Attributes:
        categories: Category ids in index order.
        matrix:     Off-diagonal values in [0, 1]; diagonal 0.
        p5:         Lower bound used (maps to 0).
        p95:        Upper bound used (maps to 1).
    """

    categories: list[str]
    matrix:     list[list[float]]
    p5:         float
    p95:        float

    def to_dict(self) -> dict[str, Any]:
        return {
            "categories": self.categories,
            "matrix":     self.matrix,
            "p5":         self.p5,
            "p95":        self.p95,
        }


@dataclass(frozen=True)
class CoAffinityMatrix:
    """Blended category affinity in [0, 1], symmetric, zero diagonal.

    Serialized as ``{"categories": [...], "matrix": [[...], ...]}``.
    """

    categories: list[str]
    matrix:     list[list[float]]
    _index:     dict[str, int] = field(default_factory=dict, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_index", index_map(self.categories))

    def index_of(self, category_id: str) -> int | None:
        return self._index.get(category_id)

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._index

    def score(self, source: str, target: str) -> float:
        """CoAffinity between two categories; 0.0 if either is unknown."""
        i = self._index.get(source)
        j = self._index.get(target)
        if i is None or j is None:
            return 0.0
        return self.matrix[i][j]

    def to_dict(self) -> dict[str, Any]:
        return {"categories": self.categories, "matrix": self.matrix}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CoAffinityMatrix":
        """Rebuild from the ``to_dict()`` shape.

        Raises:
            ValueError: If the matrix is not square over ``categories``.
        """
        categories = [str(c) for c in data["categories"]]
        matrix = [[float(v) for v in row] for row in data["matrix"]]
        n = len(categories)
        if len(matrix) != n or any(len(row) != n for row in matrix):
            raise ValueError(
                f"CoAffinity matrix must be {n}x{n} to match its categories."
            )
        return cls(categories=categories, matrix=matrix)


@dataclass(frozen=True)
class MatrixStats:
    """Bounds and counts recorded alongside a built CoAffinity matrix."""

    lift_p5:               float
    lift_p95:              float
    co_orders_p5:          float
    co_orders_p95:         float
    total_orders:          int
    category_order_counts: dict[str, int]

    def to_dict(self) -> dict[str, Any]:
        return {
            "liftP5":              self.lift_p5,
            "liftP95":             self.lift_p95,
            "coOrdersP5":          self.co_orders_p5,
            "coOrdersP95":         self.co_orders_p95,
            "totalOrders":         self.total_orders,
            "categoryOrderCounts": dict(self.category_order_counts),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MatrixStats":
        return cls(
            lift_p5=float(data["liftP5"]),
            lift_p95=float(data["liftP95"]),
            co_orders_p5=float(data["coOrdersP5"]),
            co_orders_p95=float(data["coOrdersP95"]),
            total_orders=int(data["totalOrders"]),
            category_order_counts={
                str(k): int(v) for k, v in data["categoryOrderCounts"].items()
            },
        )


@dataclass(frozen=True)
class MatrixBuildResult:
    """Everything produced by one run of the merchant-level matrix pipeline."""

    co_orders:            CoOccurrenceMatrix
    lift:                 LiftMatrix
    normalized_lift:      NormalizedMatrix
    normalized_co_orders: NormalizedMatrix
    coaffinity:           CoAffinityMatrix
    stats:                MatrixStats
