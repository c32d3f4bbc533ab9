"""
Lift estimation.

    lift(A, B) = P(A and B) / (P(A) * P(B))
               = (co_orders(A, B) * total_orders) / (orders(A) * orders(B))

Lift > 1: A and B are bought together more often than chance would predict.
Lift < 1: less often. Lift ~ 1: independent.

If either category appears in no order the lift is defined as 0 rather than
raising a division error. The diagonal is unused and stays 0.
"""

from __future__ import annotations

from category_affinity.models.matrix import CoOccurrenceMatrix, LiftMatrix, zeros


def lift_for_pair(
    co_orders: float,
    total_orders: int,
    orders_a: int,
    orders_b: int,
) -> float:
    """Lift of one category pair; 0.0 when either order count is 0."""
    if orders_a == 0 or orders_b == 0:
        return 0.0
    return (co_orders * total_orders) / (orders_a * orders_b)


def build_lift_matrix(co_orders: CoOccurrenceMatrix) -> LiftMatrix:
    """Convert a co-order matrix into a symmetric lift matrix."""
    categories = co_orders.categories
    n = len(categories)
    matrix = zeros(n)

    for i in range(n):
        orders_a = co_orders.order_counts.get(categories[i], 0)
        for j in range(i + 1, n):
            orders_b = co_orders.order_counts.get(categories[j], 0)
            value = lift_for_pair(
                co_orders.matrix[i][j], co_orders.total_orders, orders_a, orders_b
            )
            matrix[i][j] = value
            matrix[j][i] = value

    return LiftMatrix(categories=list(categories), matrix=matrix)
