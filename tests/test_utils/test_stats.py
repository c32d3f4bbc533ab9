"""
Tests for category_affinity/utils/stats.py.

What we test
------------
percentile():
  - Empty sample returns 0.0; single sample returns that value.
  - P0 / P100 equal the sample min / max.
  - Linear interpolation between neighbours; input order irrelevant.
  - p outside [0, 100] extrapolates along the edge segment, never raises.
normalize_to_range():
  - Clamping below / above the window; flat window maps to 0.
mean() / median() / safe_log2():
  - Empty-input and boundary conventions.
"""

from __future__ import annotations

import pytest

from category_affinity.utils.stats import (
    clamp,
    mean,
    median,
    normalize_to_range,
    p5_p95_bounds,
    percentile,
    safe_log2,
)


class TestPercentile:
    def test_empty_sample_is_zero(self):
        assert percentile([], 50) == 0.0

    def test_single_value(self):
        assert percentile([7.0], 5) == 7.0
        assert percentile([7.0], 95) == 7.0

    def test_p0_and_p100_are_min_and_max(self):
        values = [3.0, 1.0, 4.0, 1.5, 9.0]
        assert percentile(values, 0) == pytest.approx(1.0)
        assert percentile(values, 100) == pytest.approx(9.0)

    def test_median_of_odd_sample(self):
        assert percentile([1.0, 2.0, 3.0], 50) == pytest.approx(2.0)

    def test_interpolates_between_neighbours(self):
        # idx = 0.25 * 3 = 0.75 → 1 + 0.75 * (2 - 1)
        assert percentile([1.0, 2.0, 3.0, 4.0], 25) == pytest.approx(1.75)

    def test_p5_p95_of_1_to_21(self):
        values = [float(v) for v in range(1, 22)]
        p5, p95 = p5_p95_bounds(values)
        assert p5 == pytest.approx(2.0)
        assert p95 == pytest.approx(20.0)

    def test_input_not_modified(self):
        values = [3.0, 1.0, 2.0]
        percentile(values, 50)
        assert values == [3.0, 1.0, 2.0]

    def test_above_100_extrapolates(self):
        # idx = 3.0, continued along the last segment [2, 3]
        assert percentile([1.0, 2.0, 3.0], 150) == pytest.approx(4.0)

    def test_below_0_extrapolates(self):
        assert percentile([1.0, 2.0, 3.0], -50) == pytest.approx(0.0)

    def test_monotone_in_p(self):
        values = [5.0, 1.0, 8.0, 2.0, 3.0, 13.0]
        results = [percentile(values, p) for p in range(0, 101, 5)]
        assert results == sorted(results)


class TestNormalizeToRange:
    def test_inside_window(self):
        assert normalize_to_range(1.5, 1.0, 2.0) == pytest.approx(0.5)

    def test_clamped_below(self):
        assert normalize_to_range(-4.0, 1.0, 2.0) == 0.0

    def test_clamped_above(self):
        assert normalize_to_range(99.0, 1.0, 2.0) == 1.0

    def test_flat_window_is_zero(self):
        assert normalize_to_range(5.0, 2.0, 2.0) == 0.0

    def test_clamp(self):
        assert clamp(5, 0, 3) == 3
        assert clamp(-1, 0, 3) == 0


def test_mean_and_median_empty() -> None:
    assert mean([]) == 0.0
    assert median([]) == 0.0


def test_median_even_sample() -> None:
    assert median([4.0, 1.0, 3.0, 2.0]) == pytest.approx(2.5)


def test_safe_log2() -> None:
    assert safe_log2(4) == pytest.approx(2.0)
    assert safe_log2(1) == 0.0
    assert safe_log2(0) == 0.0
    assert safe_log2(-3) == 0.0
