"""
Tests for category_affinity/matrix/normalize.py.

What we test
------------
1. extract_upper_positive() skips zeros, the diagonal and the lower triangle.
2. normalize_matrix() output lies in [0, 1] with a zero diagonal.
3. Values at / below P5 map to 0, at / above P95 map to 1.
4. Flat bounds (P5 == P95) give an all-zero matrix.
5. Caller-supplied bounds are used as-is.
"""

from __future__ import annotations

import pytest

from category_affinity.matrix.normalize import (
    compute_bounds,
    extract_upper_positive,
    normalize_matrix,
)


def _sym(values: dict[tuple[int, int], float], n: int) -> list[list[float]]:
    m = [[0.0] * n for _ in range(n)]
    for (i, j), v in values.items():
        m[i][j] = v
        m[j][i] = v
    return m


def test_extract_upper_positive() -> None:
    m = [
        [9.0, 1.0, 0.0],
        [1.0, 9.0, 2.0],
        [0.0, 2.0, 9.0],
    ]
    assert extract_upper_positive(m) == [1.0, 2.0]


def test_compute_bounds_ignores_zero_cells() -> None:
    m = _sym({(0, 1): 1.0, (0, 2): 3.0, (1, 2): 0.0}, 3)
    p5, p95 = compute_bounds(m)
    assert p5 == pytest.approx(1.1)
    assert p95 == pytest.approx(2.9)


class TestNormalizeMatrix:
    def test_range_and_diagonal(self):
        m = _sym({(0, 1): 1.0, (0, 2): 2.0, (1, 2): 5.0, (2, 3): 8.0}, 4)
        m[0][0] = 100.0
        result = normalize_matrix(["a", "b", "c", "d"], m)
        for i, row in enumerate(result.matrix):
            assert row[i] == 0.0
            for v in row:
                assert 0.0 <= v <= 1.0

    def test_bounds_map_to_zero_and_one(self):
        m = _sym({(0, 1): 1.0, (0, 2): 3.0, (1, 2): 10.0}, 3)
        result = normalize_matrix(["a", "b", "c"], m, p5=1.0, p95=10.0)
        assert result.matrix[0][1] == 0.0
        assert result.matrix[1][2] == 1.0
        assert result.matrix[0][2] == pytest.approx(2.0 / 9.0)

    def test_outliers_are_clipped(self):
        m = _sym({(0, 1): 0.5, (0, 2): 50.0}, 3)
        result = normalize_matrix(["a", "b", "c"], m, p5=1.0, p95=10.0)
        assert result.matrix[0][1] == 0.0
        assert result.matrix[0][2] == 1.0

    def test_flat_bounds_give_zero_matrix(self):
        m = _sym({(0, 1): 2.0, (0, 2): 2.0, (1, 2): 2.0}, 3)
        result = normalize_matrix(["a", "b", "c"], m)
        assert result.p5 == result.p95 == pytest.approx(2.0)
        assert all(v == 0.0 for row in result.matrix for v in row)

    def test_empty_matrix(self):
        result = normalize_matrix([], [])
        assert result.matrix == []
        assert result.p5 == 0.0
        assert result.p95 == 0.0

    def test_preserves_ordering_inside_window(self):
        m = _sym({(0, 1): 2.0, (0, 2): 4.0, (1, 2): 6.0}, 3)
        result = normalize_matrix(["a", "b", "c"], m, p5=1.0, p95=10.0)
        assert result.matrix[0][1] < result.matrix[0][2] < result.matrix[1][2]

    def test_reports_bounds_used(self):
        m = _sym({(0, 1): 2.0}, 2)
        result = normalize_matrix(["a", "b"], m, p5=0.5, p95=4.0)
        assert (result.p5, result.p95) == (0.5, 4.0)
