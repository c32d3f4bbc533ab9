"""
Tests for category_affinity/affinity/batch.py.

What we test
------------
process_all_customers():
  - Invalid goal raises InvalidGoalCategoryError before any work.
  - Every customer is either scored or skipped with a reason.
  - Activity window and reference date are honoured.
  - Results are independent of customer input order.
compute_affinity_stats():
  - Mean / median / min / max and bucket boundaries; empty batch is all zero.
rank_results() / summarize_skips():
  - Descending affinity with customer-id tie break; counts per reason.
"""

from __future__ import annotations

import pytest

from category_affinity.affinity.batch import (
    compute_affinity_stats,
    process_all_customers,
    rank_results,
    summarize_skips,
    validate_goal_category,
)
from category_affinity.affinity.seed_weights import (
    REASON_ALREADY_PURCHASED,
    REASON_INACTIVE,
    REASON_NO_ORDERS,
)
from category_affinity.config import AffinityConfig
from category_affinity.errors import InvalidGoalCategoryError
from category_affinity.matrix.coaffinity import build_coaffinity_from_orders
from category_affinity.models.affinity import CustomerAffinityResult, SkippedCustomer
from category_affinity.models.matrix import CoAffinityMatrix


@pytest.fixture
def coaffinity(sample_orders, categories) -> CoAffinityMatrix:
    return build_coaffinity_from_orders(sample_orders, categories).coaffinity


def _result(customer_id: str, affinity: float) -> CustomerAffinityResult:
    return CustomerAffinityResult(
        customer_id=customer_id,
        goal_category="goal",
        seed_weights=[],
        weighted_signals=[],
        max_weighted_signal=0.0,
        affinity=affinity,
    )


# ── Goal validation ────────────────────────────────────────────────────────────

class TestGoalValidation:
    def test_unknown_goal_raises(self, coaffinity):
        with pytest.raises(InvalidGoalCategoryError) as exc_info:
            validate_goal_category("furniture", coaffinity)
        assert exc_info.value.goal == "furniture"
        assert "skincare" in exc_info.value.valid_categories
        assert 'Goal category "furniture" not found' in str(exc_info.value)

    def test_batch_fails_before_processing(self, sample_customers, sample_orders, coaffinity):
        with pytest.raises(InvalidGoalCategoryError):
            process_all_customers(sample_customers, sample_orders, coaffinity, "furniture", 90)

    def test_known_goal_passes(self, coaffinity):
        validate_goal_category("skincare", coaffinity)


# ── process_all_customers ──────────────────────────────────────────────────────

class TestProcessAllCustomers:
    def test_outcomes(self, sample_customers, sample_orders, coaffinity, reference_date):
        batch = process_all_customers(
            sample_customers, sample_orders, coaffinity, "skincare", 90, reference_date
        )
        assert [r.customer_id for r in batch.results] == ["cust-1", "cust-5"]
        reasons = {s.customer_id: s.reason for s in batch.skipped}
        assert reasons == {
            "cust-2": REASON_ALREADY_PURCHASED,
            "cust-3": REASON_INACTIVE,
            "cust-4": REASON_ALREADY_PURCHASED,
            "cust-6": REASON_ALREADY_PURCHASED,
            "cust-7": REASON_NO_ORDERS,
        }

    def test_every_customer_accounted_for(
        self, sample_customers, sample_orders, coaffinity, reference_date
    ):
        batch = process_all_customers(
            sample_customers, sample_orders, coaffinity, "skincare", 90, reference_date
        )
        assert len(batch.results) + len(batch.skipped) == len(sample_customers)

    def test_wider_window_includes_inactive(
        self, sample_customers, sample_orders, coaffinity, reference_date
    ):
        batch = process_all_customers(
            sample_customers, sample_orders, coaffinity, "skincare", 200, reference_date
        )
        assert {r.customer_id for r in batch.results} == {"cust-1", "cust-3", "cust-5"}

    def test_affinities_bounded(self, sample_customers, sample_orders, coaffinity, reference_date):
        batch = process_all_customers(
            sample_customers, sample_orders, coaffinity, "skincare", 90, reference_date
        )
        for r in batch.results:
            assert 0.0 <= r.affinity < 1.0
            assert r.goal_category == "skincare"

    def test_customer_order_does_not_change_scores(
        self, sample_customers, sample_orders, coaffinity, reference_date
    ):
        forward = process_all_customers(
            sample_customers, sample_orders, coaffinity, "skincare", 90, reference_date
        )
        backward = process_all_customers(
            list(reversed(sample_customers)), sample_orders, coaffinity, "skincare", 90,
            reference_date,
        )
        assert {r.customer_id: r.affinity for r in forward.results} == {
            r.customer_id: r.affinity for r in backward.results
        }

    def test_empty_population(self, coaffinity):
        batch = process_all_customers([], [], coaffinity, "skincare", 90)
        assert batch.results == []
        assert batch.skipped == []


# ── compute_affinity_stats ─────────────────────────────────────────────────────

class TestAffinityStats:
    def test_summary_values(self):
        results = [_result("a", 0.1), _result("b", 0.5), _result("c", 0.9)]
        stats = compute_affinity_stats(results, "goal", total_customers=5)
        assert stats.total_customers == 5
        assert stats.processed_customers == 3
        assert stats.avg_affinity == pytest.approx(0.5)
        assert stats.median_affinity == pytest.approx(0.5)
        assert stats.min_affinity == pytest.approx(0.1)
        assert stats.max_affinity == pytest.approx(0.9)
        assert (stats.distribution.low, stats.distribution.medium, stats.distribution.high) == (
            1, 1, 1,
        )

    def test_bucket_boundaries(self):
        results = [_result("a", 0.33), _result("b", 0.66), _result("c", 0.3299)]
        dist = compute_affinity_stats(results, "goal", 3).distribution
        assert dist.low == 1
        assert dist.medium == 1
        assert dist.high == 1

    def test_custom_thresholds(self):
        config = AffinityConfig(low_threshold=0.1, high_threshold=0.2)
        dist = compute_affinity_stats([_result("a", 0.15)], "goal", 1, config).distribution
        assert dist.medium == 1

    def test_empty(self):
        stats = compute_affinity_stats([], "goal", 0)
        assert stats.avg_affinity == 0.0
        assert stats.median_affinity == 0.0
        assert stats.min_affinity == 0.0
        assert stats.max_affinity == 0.0
        assert stats.distribution.low == 0

    def test_round_trip_dict(self):
        stats = compute_affinity_stats([_result("a", 0.4)], "goal", 2)
        data = stats.to_dict()
        assert data["totalEligibleCustomers"] == 2
        assert data["affinityDistribution"]["medium"] == 1
        assert type(stats).from_dict(data) == stats


# ── rank_results / summarize_skips ─────────────────────────────────────────────

def test_rank_results_ties_by_customer_id() -> None:
    ranked = rank_results([_result("b", 0.5), _result("a", 0.5), _result("c", 0.9)])
    assert [r.customer_id for r in ranked] == ["c", "a", "b"]


def test_rank_results_top_n() -> None:
    ranked = rank_results([_result("a", 0.1), _result("b", 0.2)], top_n=1)
    assert [r.customer_id for r in ranked] == ["b"]


def test_summarize_skips() -> None:
    skipped = [
        SkippedCustomer("a", REASON_NO_ORDERS),
        SkippedCustomer("b", REASON_NO_ORDERS),
        SkippedCustomer("c", REASON_INACTIVE),
    ]
    assert summarize_skips(skipped) == {REASON_NO_ORDERS: 2, REASON_INACTIVE: 1}
