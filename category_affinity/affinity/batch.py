"""
Batch affinity scoring over a customer population.

Flow per goal category
----------------------
  1. Validate the goal exists in the CoAffinity matrix — otherwise raise
     ``InvalidGoalCategoryError`` before any customer is processed.
  2. For every customer:
       a. build purchase history   → skip "No orders" if there is none
       b. check eligibility        → skip "Already purchased goal category"
                                     or "Not active in window"
       c. score via scorer.score_customer()
  3. Summarize the affinities (mean, median, min, max, low/medium/high).

Per-customer work touches only that customer's orders and the read-only
matrix; skips are local and never interrupt the rest of the batch.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Iterable, Optional

from category_affinity.affinity.history import build_purchase_history, group_orders_by_customer
from category_affinity.affinity.scorer import score_customer
from category_affinity.affinity.seed_weights import REASON_NO_ORDERS, ineligibility_reason
from category_affinity.config import AffinityConfig, SeedWeightConfig
from category_affinity.errors import InvalidGoalCategoryError
from category_affinity.models.affinity import (
    AffinityDistribution,
    AffinityStats,
    BatchResult,
    CustomerAffinityResult,
    SkippedCustomer,
)
from category_affinity.models.catalog import Customer, Order
from category_affinity.models.matrix import CoAffinityMatrix
from category_affinity.utils.stats import mean, median

logger = logging.getLogger(__name__)

_PROGRESS_EVERY = 1000


def validate_goal_category(goal_category: str, coaffinity: CoAffinityMatrix) -> None:
    """Raise ``InvalidGoalCategoryError`` if ``goal_category`` is not in the matrix."""
    if goal_category not in coaffinity:
        raise InvalidGoalCategoryError(goal_category, coaffinity.categories)


def process_all_customers(
    customers: Iterable[Customer],
    orders: Iterable[Order],
    coaffinity: CoAffinityMatrix,
    goal_category: str,
    active_days: int,
    reference_date: Optional[datetime] = None,
    seed_config: Optional[SeedWeightConfig] = None,
) -> BatchResult:
    """Score every eligible customer toward ``goal_category``.

    Args:
        customers:      Customer population.
        orders:         All orders (any customer).
        coaffinity:     Prebuilt CoAffinity matrix.
        goal_category:  Category to score.
        active_days:    Activity window in days.
        reference_date: "Today" for the activity window; UTC now when ``None``.
        seed_config:    Seed-weight constants; defaults when ``None``.

    Returns:
        ``BatchResult`` with results (input order) and skipped customers.

    Raises:
        InvalidGoalCategoryError: If the goal is not in the matrix.
    """
    validate_goal_category(goal_category, coaffinity)

    if reference_date is None:
        reference_date = datetime.now(tz=timezone.utc)
    seed_config = seed_config or SeedWeightConfig()

    customers = list(customers)
    orders_by_customer = group_orders_by_customer(orders)
    batch = BatchResult()

    logger.info(
        "Scoring %d customers | goal=%s active_days=%d reference=%s",
        len(customers), goal_category, active_days, reference_date.isoformat(),
    )

    for processed, customer in enumerate(customers, start=1):
        if processed % _PROGRESS_EVERY == 0:
            logger.info("  processed %d/%d customers", processed, len(customers))

        history = build_purchase_history(
            customer.id, orders_by_customer.get(customer.id, [])
        )
        if history is None:
            batch.skipped.append(SkippedCustomer(customer.id, REASON_NO_ORDERS))
            continue

        reason = ineligibility_reason(history, goal_category, active_days, reference_date)
        if reason is not None:
            batch.skipped.append(SkippedCustomer(customer.id, reason))
            continue

        batch.results.append(
            score_customer(history, goal_category, coaffinity, seed_config)
        )

    logger.info(
        "Scored %d customer(s), skipped %d", len(batch.results), len(batch.skipped)
    )
    return batch


def compute_affinity_stats(
    results: list[CustomerAffinityResult],
    goal_category: str,
    total_customers: int,
    config: Optional[AffinityConfig] = None,
) -> AffinityStats:
    """Summarize affinity values of a batch.

    Buckets: low < ``low_threshold`` (0.33) <= medium < ``high_threshold``
    (0.66) <= high. All summary values are 0.0 for an empty batch.
    """
    config = config or AffinityConfig()
    affinities = [r.affinity for r in results]

    low = sum(1 for a in affinities if a < config.low_threshold)
    high = sum(1 for a in affinities if a >= config.high_threshold)
    medium = len(affinities) - low - high

    return AffinityStats(
        goal_category=goal_category,
        total_customers=total_customers,
        processed_customers=len(results),
        avg_affinity=mean(affinities),
        median_affinity=median(affinities),
        min_affinity=min(affinities) if affinities else 0.0,
        max_affinity=max(affinities) if affinities else 0.0,
        distribution=AffinityDistribution(low=low, medium=medium, high=high),
    )


def summarize_skips(skipped: list[SkippedCustomer]) -> dict[str, int]:
    """Count skipped customers per reason."""
    return dict(Counter(s.reason for s in skipped))


def rank_results(
    results: list[CustomerAffinityResult],
    top_n: Optional[int] = None,
) -> list[CustomerAffinityResult]:
    """Sort by affinity descending, ties broken by customer id ascending."""
    ranked = sorted(results, key=lambda r: (-r.affinity, r.customer_id))
    return ranked if top_n is None else ranked[:top_n]
