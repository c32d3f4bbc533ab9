"""
Co-order aggregation.

For every order the items are reduced to the *set* of distinct category ids.
Each unordered pair in that set adds 1 to both ``matrix[i][j]`` and
``matrix[j][i]``; each category in the set adds 1 to its order count. A
category bought twice in one order still counts once.

Category ids that are not in the supplied category list are ignored, both
for pair counts and for per-category order counts. They still count toward
``total_orders``, which is simply the number of orders scanned.
"""

from __future__ import annotations

import logging
from itertools import combinations
from typing import Iterable

from category_affinity.models.catalog import Category, Order
from category_affinity.models.matrix import CoOccurrenceMatrix, index_map, zeros

logger = logging.getLogger(__name__)


def distinct_categories(order: Order) -> list[str]:
    """Distinct category ids of an order; see ``Order.category_ids``."""
    return order.category_ids


def build_co_order_matrix(
    orders: Iterable[Order],
    categories: list[Category],
) -> CoOccurrenceMatrix:
    """Count co-orders for every category pair.

    Args:
        orders:     All orders of the dataset.
        categories: Ordered category list; defines the matrix index space.

    Returns:
        ``CoOccurrenceMatrix`` with symmetric counts, zero diagonal, the
        number of orders scanned and per-category order counts.
    """
    category_ids = [c.id for c in categories]
    index = index_map(category_ids)
    matrix = zeros(len(category_ids))
    order_counts: dict[str, int] = {cat: 0 for cat in category_ids}

    total_orders = 0
    unknown: set[str] = set()

    for order in orders:
        total_orders += 1
        known: list[int] = []
        for cat in distinct_categories(order):
            idx = index.get(cat)
            if idx is None:
                unknown.add(cat)
                continue
            order_counts[cat] += 1
            known.append(idx)

        for i, j in combinations(known, 2):
            matrix[i][j] += 1
            matrix[j][i] += 1

    if unknown:
        logger.warning(
            "Ignored %d unknown category id(s) in orders: %s",
            len(unknown), ", ".join(sorted(unknown)),
        )

    logger.debug(
        "Co-order matrix built | categories=%d orders=%d",
        len(category_ids), total_orders,
    )

    return CoOccurrenceMatrix(
        categories=category_ids,
        matrix=matrix,
        total_orders=total_orders,
        order_counts=order_counts,
    )
