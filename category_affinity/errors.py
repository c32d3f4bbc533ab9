"""
Exception types raised by the affinity pipeline.

Only genuinely invalid input is an error here. Customers without history,
customers who already bought the goal category and inactive customers are
skips, recorded with a reason string by the batch runner. Zero order counts
and flat percentile bounds are defined numeric cases that produce 0.
"""

from __future__ import annotations


class AffinityError(Exception):
    """Base class for all category-affinity errors."""


class InvalidGoalCategoryError(AffinityError, ValueError):
    """The requested goal category is not in the CoAffinity matrix.

    Attributes:
        goal:             The category id that was requested.
        valid_categories: Category ids the matrix does contain, in index order.
    """

    def __init__(self, goal: str, valid_categories: list[str]) -> None:
        self.goal = goal
        self.valid_categories = list(valid_categories)
        super().__init__(
            f'Goal category "{goal}" not found. '
            f"Available categories: {', '.join(self.valid_categories)}"
        )


class MatrixAlignmentError(AffinityError, ValueError):
    """Two matrices that must share a category ordering do not."""

    def __init__(self, left: list[str], right: list[str]) -> None:
        self.left = list(left)
        self.right = list(right)
        super().__init__(
            "Matrices do not share the same category ordering: "
            f"{self.left} != {self.right}"
        )
