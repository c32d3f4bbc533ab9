"""
Small numeric helpers shared by the matrix and affinity modules.

``percentile()`` is the estimator behind P5/P95 normalization bounds:

    idx      = (p / 100) * (n - 1)
    result   = v[floor(idx)] + (idx - floor(idx)) * (v[ceil(idx)] - v[floor(idx)])

over the ascending-sorted sample ``v``. ``p`` is not validated. For ``p``
outside [0, 100] the same straight line is continued past the first or last
pair of sorted values, so the result is an extrapolation and never an
exception. Downstream code only ever asks for P5 and P95.

All helpers return 0.0 for empty input rather than raising.
"""

from __future__ import annotations

import math
from typing import Sequence


def percentile(values: Sequence[float], p: float) -> float:
    """Return the ``p``-th percentile of ``values`` by linear interpolation.

    Args:
        values: Numeric sample (any order). Not modified.
        p:      Percentile, nominally in [0, 100].

    Returns:
        Interpolated percentile; 0.0 for an empty sample.
    """
    if not values:
        return 0.0

    ordered = sorted(values)
    n = len(ordered)
    if n == 1:
        return float(ordered[0])

    index = (p / 100.0) * (n - 1)
    # Anchor on a real segment of the sample; in range this matches
    # floor/ceil interpolation, out of range it extends the edge segment.
    lower = min(max(math.floor(index), 0), n - 2)
    fraction = index - lower
    return ordered[lower] + fraction * (ordered[lower + 1] - ordered[lower])


def p5_p95_bounds(values: Sequence[float]) -> tuple[float, float]:
    """Return ``(P5, P95)`` of ``values``."""
    return percentile(values, 5), percentile(values, 95)


def mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def median(values: Sequence[float]) -> float:
    """Median; the mean of the two middle values for an even-sized sample."""
    if not values:
        return 0.0
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2
    return ordered[mid]


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def normalize_to_range(value: float, lo: float, hi: float) -> float:
    """Clamp ``value`` into [lo, hi] and rescale it to [0, 1].

    Returns 0.0 when ``hi == lo`` (flat window).
    """
    if hi == lo:
        return 0.0
    return (clamp(value, lo, hi) - lo) / (hi - lo)


def safe_log2(n: float) -> float:
    """``log2(n)``, defined as 0.0 for ``n <= 0``."""
    if n <= 0:
        return 0.0
    return math.log2(n)
