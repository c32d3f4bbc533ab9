"""
CoAffinity composition and the end-to-end matrix builder.

    coaffinity[i][j] = lift_weight * normalized_lift[i][j]
                     + co_orders_weight * normalized_co_orders[i][j]   (i != j)
    coaffinity[i][i] = 0

Lift captures association strength independent of volume; raw co-orders
keep very popular pairs from being drowned out by rare-but-lucky ones. The
default 0.7 / 0.3 split comes from ``CoAffinityWeights`` in config.

Both inputs must share the same category ordering. A mismatch raises
``MatrixAlignmentError`` instead of silently mixing up rows.

Build pipeline (``build_coaffinity_from_orders``)
-------------------------------------------------
  1. Co-order counts          (matrix.co_orders)
  2. Lift                     (matrix.lift)
  3. P5/P95 bounds for both   (matrix.normalize)
  4. Normalize both into [0, 1]
  5. Blend into CoAffinity
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from category_affinity.config import CoAffinityWeights
from category_affinity.errors import MatrixAlignmentError
from category_affinity.matrix.co_orders import build_co_order_matrix
from category_affinity.matrix.lift import build_lift_matrix
from category_affinity.matrix.normalize import compute_bounds, normalize_matrix
from category_affinity.models.catalog import Category, Order
from category_affinity.models.matrix import (
    CoAffinityMatrix,
    MatrixBuildResult,
    MatrixStats,
    NormalizedMatrix,
    zeros,
)

logger = logging.getLogger(__name__)


def compose_coaffinity(
    normalized_lift: NormalizedMatrix,
    normalized_co_orders: NormalizedMatrix,
    weights: Optional[CoAffinityWeights] = None,
) -> CoAffinityMatrix:
    """Blend normalized lift and normalized co-orders into CoAffinity.

    Args:
        normalized_lift:      Normalized lift matrix.
        normalized_co_orders: Normalized co-order matrix, same ordering.
        weights:              Blend weights; defaults to 0.7 / 0.3.

    Returns:
        Symmetric ``CoAffinityMatrix`` with zero diagonal.

    Raises:
        MatrixAlignmentError: If the category orderings differ.
    """
    if normalized_lift.categories != normalized_co_orders.categories:
        raise MatrixAlignmentError(
            normalized_lift.categories, normalized_co_orders.categories
        )

    weights = weights or CoAffinityWeights()
    n = len(normalized_lift.categories)
    matrix = zeros(n)

    for i in range(n):
        for j in range(n):
            if i == j:
                continue
            matrix[i][j] = (
                weights.lift_weight * normalized_lift.matrix[i][j]
                + weights.co_orders_weight * normalized_co_orders.matrix[i][j]
            )

    return CoAffinityMatrix(categories=list(normalized_lift.categories), matrix=matrix)


def coaffinity_score(matrix: CoAffinityMatrix, source: str, target: str) -> float:
    """CoAffinity between two categories; 0.0 if either is not in the matrix."""
    return matrix.score(source, target)


def top_pairs(
    categories: list[str],
    matrix: list[list[float]],
    n: int = 10,
    ascending: bool = False,
    positive_only: bool = False,
) -> list[tuple[str, str, float]]:
    """List upper-triangle category pairs ordered by value.

    Args:
        categories:    Category ids in index order.
        matrix:        Square symmetric matrix.
        n:             Maximum pairs returned.
        ascending:     ``True`` for the lowest values first.
        positive_only: Skip pairs whose value is 0 or less.

    Returns:
        ``(category_a, category_b, value)`` tuples.
    """
    pairs: list[tuple[str, str, float]] = []
    for i in range(len(categories)):
        for j in range(i + 1, len(categories)):
            value = matrix[i][j]
            if positive_only and value <= 0:
                continue
            pairs.append((categories[i], categories[j], value))

    pairs.sort(key=lambda p: p[2], reverse=not ascending)
    return pairs[:n]


def build_coaffinity_from_orders(
    orders: Iterable[Order],
    categories: list[Category],
    weights: Optional[CoAffinityWeights] = None,
) -> MatrixBuildResult:
    """Run the full merchant-level pipeline from orders to CoAffinity.

    Args:
        orders:     All orders of the dataset.
        categories: Ordered category list (matrix index space).
        weights:    Blend weights; defaults to 0.7 / 0.3.

    Returns:
        ``MatrixBuildResult`` with every intermediate matrix and the stats.
    """
    weights = weights or CoAffinityWeights()

    logger.info("Step 1: co-orders matrix")
    co_orders = build_co_order_matrix(orders, categories)

    logger.info("Step 2: lift matrix")
    lift = build_lift_matrix(co_orders)
    for a, b, value in top_pairs(lift.categories, lift.matrix, n=5, positive_only=True):
        logger.debug("  high lift %s + %s: %.3f", a, b, value)

    logger.info("Step 3: P5/P95 normalization")
    lift_p5, lift_p95 = compute_bounds(lift.matrix)
    co_p5, co_p95 = compute_bounds(co_orders.matrix)
    normalized_lift = normalize_matrix(lift.categories, lift.matrix, lift_p5, lift_p95)
    normalized_co_orders = normalize_matrix(
        co_orders.categories, co_orders.matrix, co_p5, co_p95
    )
    logger.info(
        "  lift P5=%.4f P95=%.4f | co-orders P5=%.4f P95=%.4f",
        lift_p5, lift_p95, co_p5, co_p95,
    )

    logger.info(
        "Step 4: CoAffinity (%.0f%% lift + %.0f%% co-orders)",
        weights.lift_weight * 100, weights.co_orders_weight * 100,
    )
    coaffinity = compose_coaffinity(normalized_lift, normalized_co_orders, weights)

    stats = MatrixStats(
        lift_p5=lift_p5,
        lift_p95=lift_p95,
        co_orders_p5=co_p5,
        co_orders_p95=co_p95,
        total_orders=co_orders.total_orders,
        category_order_counts=dict(co_orders.order_counts),
    )

    return MatrixBuildResult(
        co_orders=co_orders,
        lift=lift,
        normalized_lift=normalized_lift,
        normalized_co_orders=normalized_co_orders,
        coaffinity=coaffinity,
        stats=stats,
    )
