"""
Seed weights and customer eligibility.

Seed weight of a purchased category
-----------------------------------
    recency_boost   = 0.75 if the category was in the latest order else 0.50
    frequency_boost = min(1.6, 1.0 + 0.5 * log2(frequency))   (1.0 if frequency <= 0)
    seed_weight     = recency_boost * frequency_boost

Frequency contributes logarithmically and is capped, so a category bought
in dozens of orders cannot dominate. All constants come from
``SeedWeightConfig``.

Eligibility for a goal category
-------------------------------
A customer is eligible when both hold:
  1. the goal category was never purchased, and
  2. ``last_order_date >= reference_date - active_days`` (boundary inclusive).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from category_affinity.config import SeedWeightConfig
from category_affinity.models.affinity import (
    CategoryPurchaseInfo,
    CustomerPurchaseHistory,
    SeedWeight,
)
from category_affinity.utils.stats import safe_log2

REASON_NO_ORDERS = "No orders"
REASON_ALREADY_PURCHASED = "Already purchased goal category"
REASON_INACTIVE = "Not active in window"

_DEFAULT_SEED_CONFIG = SeedWeightConfig()


def recency_boost(is_last_order: bool, config: SeedWeightConfig = _DEFAULT_SEED_CONFIG) -> float:
    return config.recency_last_order if is_last_order else config.recency_older


def frequency_boost(frequency: int, config: SeedWeightConfig = _DEFAULT_SEED_CONFIG) -> float:
    """Capped logarithmic frequency boost; the base value for frequency <= 0."""
    if frequency <= 0:
        return config.frequency_base
    boost = config.frequency_base + config.frequency_multiplier * safe_log2(frequency)
    return min(boost, config.frequency_cap)


def compute_seed_weight(
    info: CategoryPurchaseInfo,
    config: SeedWeightConfig = _DEFAULT_SEED_CONFIG,
) -> SeedWeight:
    recency = recency_boost(info.is_last_order, config)
    frequency = frequency_boost(info.frequency, config)
    return SeedWeight(
        category_id=info.category_id,
        recency_boost=recency,
        frequency_boost=frequency,
        seed_weight=recency * frequency,
    )


def compute_all_seed_weights(
    history: CustomerPurchaseHistory,
    config: SeedWeightConfig = _DEFAULT_SEED_CONFIG,
) -> list[SeedWeight]:
    """One ``SeedWeight`` per purchased category, in history order."""
    return [compute_seed_weight(info, config) for info in history.categories.values()]


def unpurchased_categories(
    history: CustomerPurchaseHistory,
    all_categories: list[str],
) -> list[str]:
    """Categories from ``all_categories`` the customer has never bought."""
    return [cat for cat in all_categories if not history.has_purchased(cat)]


def activity_cutoff(reference_date: datetime, active_days: int) -> datetime:
    """Earliest last-order timestamp that still counts as active."""
    if reference_date.tzinfo is None:
        reference_date = reference_date.replace(tzinfo=timezone.utc)
    return reference_date - timedelta(days=active_days)


def ineligibility_reason(
    history: CustomerPurchaseHistory,
    goal_category: str,
    active_days: int,
    reference_date: Optional[datetime] = None,
) -> Optional[str]:
    """Why a customer is not eligible, or ``None`` if eligible.

    The purchased-goal check wins over the activity window.
    """
    if history.has_purchased(goal_category):
        return REASON_ALREADY_PURCHASED

    if reference_date is None:
        reference_date = datetime.now(tz=timezone.utc)
    if history.last_order_date < activity_cutoff(reference_date, active_days):
        return REASON_INACTIVE
    return None


def is_customer_eligible(
    history: CustomerPurchaseHistory,
    goal_category: str,
    active_days: int,
    reference_date: Optional[datetime] = None,
) -> bool:
    return ineligibility_reason(history, goal_category, active_days, reference_date) is None
