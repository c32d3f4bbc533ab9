"""
P5/P95 matrix normalization.

The strictly positive upper-triangle values of a symmetric matrix form the
sample; zero cells (pairs never seen together) are left out so they do not
drag the lower bound down. Every off-diagonal cell is then clamped to
[P5, P95] and rescaled to [0, 1]:

    normalized = (clamp(value, P5, P95) - P5) / (P95 - P5)

Values at P5 map to 0, values at P95 map to 1, outliers are compressed into
the window and ordering inside it is preserved. When P95 == P5 every cell is
0. The diagonal is forced to 0 regardless of input.

Bounds may be supplied by the caller so that bounds computed once for a
dataset can be applied consistently elsewhere.
"""

from __future__ import annotations

from typing import Optional

from category_affinity.models.matrix import NormalizedMatrix
from category_affinity.utils.stats import normalize_to_range, p5_p95_bounds


def extract_upper_positive(matrix: list[list[float]]) -> list[float]:
    """Strictly positive values above the diagonal, row by row."""
    values: list[float] = []
    for i, row in enumerate(matrix):
        for j in range(i + 1, len(row)):
            if row[j] > 0:
                values.append(row[j])
    return values


def compute_bounds(matrix: list[list[float]]) -> tuple[float, float]:
    """``(P5, P95)`` of the strictly positive upper-triangle values."""
    return p5_p95_bounds(extract_upper_positive(matrix))


def normalize_matrix(
    categories: list[str],
    matrix: list[list[float]],
    p5: Optional[float] = None,
    p95: Optional[float] = None,
) -> NormalizedMatrix:
    """Rescale ``matrix`` into [0, 1] with P5/P95 clipping.

    Args:
        categories: Category ids in index order (carried through unchanged).
        matrix:     Square symmetric matrix.
        p5:         Lower bound; computed from the matrix when ``None``.
        p95:        Upper bound; computed from the matrix when ``None``.

    Returns:
        ``NormalizedMatrix`` with the bounds actually used.
    """
    if p5 is None or p95 is None:
        computed_p5, computed_p95 = compute_bounds(matrix)
        p5 = computed_p5 if p5 is None else p5
        p95 = computed_p95 if p95 is None else p95

    normalized = [
        [0.0 if i == j else normalize_to_range(value, p5, p95) for j, value in enumerate(row)]
        for i, row in enumerate(matrix)
    ]

    return NormalizedMatrix(
        categories=list(categories),
        matrix=normalized,
        p5=p5,
        p95=p95,
    )
