"""
Affinity scoring for one customer and one goal category.

    signal(seed)  = coaffinity[seed][goal] * seed_weight(seed)
    raw_signal    = max(signal(seed) for seed in seeds)        (0 with no seeds)
    affinity      = 1 - exp(-raw_signal)

The raw signal is the *maximum* over seeds, not the sum: the customer's
single strongest existing interest drives the score, not the number of
categories they happen to buy. ``1 - exp(-x)`` maps [0, inf) onto [0, 1):
0 stays 0 and larger signals approach, but never reach, 1.

Seed categories missing from the matrix contribute a signal of 0.
"""

from __future__ import annotations

import math

from category_affinity.config import SeedWeightConfig
from category_affinity.models.affinity import (
    CustomerAffinityResult,
    CustomerPurchaseHistory,
    SeedWeight,
    WeightedSignal,
)
from category_affinity.models.matrix import CoAffinityMatrix
from category_affinity.affinity.seed_weights import compute_all_seed_weights


def weighted_signals(
    seed_weights: list[SeedWeight],
    goal_category: str,
    coaffinity: CoAffinityMatrix,
) -> list[WeightedSignal]:
    """One weighted signal per seed, in seed order."""
    return [
        WeightedSignal(
            category_id=sw.category_id,
            signal=coaffinity.score(sw.category_id, goal_category) * sw.seed_weight,
        )
        for sw in seed_weights
    ]


def raw_signal(signals: list[WeightedSignal]) -> float:
    """Strongest weighted signal; 0.0 when there are none."""
    if not signals:
        return 0.0
    return max(s.signal for s in signals)


def final_affinity(signal: float) -> float:
    """Saturating transform ``1 - exp(-signal)``."""
    return 1.0 - math.exp(-signal)


def score_customer(
    history: CustomerPurchaseHistory,
    goal_category: str,
    coaffinity: CoAffinityMatrix,
    seed_config: SeedWeightConfig | None = None,
) -> CustomerAffinityResult:
    """Score one customer's affinity toward ``goal_category``.

    Eligibility is not checked here; the batch runner filters first.

    Args:
        history:       The customer's purchase history.
        goal_category: Category being scored.
        coaffinity:    Shared, read-only CoAffinity matrix.
        seed_config:   Seed-weight constants; defaults when ``None``.

    Returns:
        ``CustomerAffinityResult`` with the full breakdown.
    """
    seeds = compute_all_seed_weights(history, seed_config or SeedWeightConfig())
    signals = weighted_signals(seeds, goal_category, coaffinity)
    strongest = raw_signal(signals)

    return CustomerAffinityResult(
        customer_id=history.customer_id,
        goal_category=goal_category,
        seed_weights=seeds,
        weighted_signals=signals,
        max_weighted_signal=strongest,
        affinity=final_affinity(strongest),
    )
