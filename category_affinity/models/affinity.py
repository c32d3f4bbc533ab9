"""
Per-customer result types: purchase history, seed weights, affinity results
and batch summary statistics.

A ``CustomerPurchaseHistory`` is built fresh for one customer from that
customer's orders and is never mutated afterwards; everything downstream of
it is derived per customer and discarded once the result is collected.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class CategoryPurchaseInfo:
    """What one customer did with one category.

    Attributes:
        category_id:        The category.
        frequency:          Number of the customer's orders containing it.
        last_purchase_date: Most recent order timestamp containing it.
        is_last_order:      True if it appears in the customer's most recent order.
    """

    category_id:        str
    frequency:          int
    last_purchase_date: datetime
    is_last_order:      bool


@dataclass(frozen=True)
class CustomerPurchaseHistory:
    """Summary of one customer's order history."""

    customer_id:     str
    categories:      dict[str, CategoryPurchaseInfo]
    last_order_date: datetime
    total_orders:    int

    def has_purchased(self, category_id: str) -> bool:
        return category_id in self.categories


@dataclass(frozen=True)
class SeedWeight:
    """Recency x frequency weight of one purchased category.

    ``seed_weight == recency_boost * frequency_boost``.
    """

    category_id:     str
    recency_boost:   float
    frequency_boost: float
    seed_weight:     float

    def to_dict(self) -> dict[str, Any]:
        return {
            "categoryId":     self.category_id,
            "recencyBoost":   self.recency_boost,
            "frequencyBoost": self.frequency_boost,
            "seedWeight":     self.seed_weight,
        }


@dataclass(frozen=True)
class WeightedSignal:
    """``coaffinity(seed, goal) * seed_weight`` for one seed category."""

    category_id: str
    signal:      float

    def to_dict(self) -> dict[str, Any]:
        return {"categoryId": self.category_id, "signal": self.signal}


@dataclass(frozen=True)
class CustomerAffinityResult:
    """Affinity of one eligible customer toward a goal category.

    Attributes:
        customer_id:         The customer.
        goal_category:       The category being scored.
        seed_weights:        One per category the customer has purchased.
        weighted_signals:    One per seed, same order as ``seed_weights``.
        max_weighted_signal: Strongest weighted signal (the raw signal).
        affinity:            ``1 - exp(-max_weighted_signal)``, in [0, 1).
    """

    customer_id:         str
    goal_category:       str
    seed_weights:        list[SeedWeight]
    weighted_signals:    list[WeightedSignal]
    max_weighted_signal: float
    affinity:            float

    @property
    def top_seed(self) -> Optional[WeightedSignal]:
        """The seed category with the strongest signal, or ``None``."""
        if not self.weighted_signals:
            return None
        return max(self.weighted_signals, key=lambda s: s.signal)

    def to_dict(self) -> dict[str, Any]:
        return {
            "customerId":        self.customer_id,
            "goalCategory":      self.goal_category,
            "seedWeights":       [sw.to_dict() for sw in self.seed_weights],
            "weightedSignals":   [ws.to_dict() for ws in self.weighted_signals],
            "maxWeightedSignal": self.max_weighted_signal,
            "affinity":          self.affinity,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CustomerAffinityResult":
        return cls(
            customer_id=str(data["customerId"]),
            goal_category=str(data["goalCategory"]),
            seed_weights=[
                SeedWeight(
                    category_id=str(sw["categoryId"]),
                    recency_boost=float(sw["recencyBoost"]),
                    frequency_boost=float(sw["frequencyBoost"]),
                    seed_weight=float(sw["seedWeight"]),
                )
                for sw in data.get("seedWeights", [])
            ],
            weighted_signals=[
                WeightedSignal(category_id=str(ws["categoryId"]), signal=float(ws["signal"]))
                for ws in data.get("weightedSignals", [])
            ],
            max_weighted_signal=float(data["maxWeightedSignal"]),
            affinity=float(data["affinity"]),
        )


@dataclass(frozen=True)
class SkippedCustomer:
    """A customer excluded from scoring, with the reason."""

    customer_id: str
    reason:      str


@dataclass(frozen=True)
class AffinityDistribution:
    """Bucket counts: low < 0.33 <= medium < 0.66 <= high."""

    low:    int = 0
    medium: int = 0
    high:   int = 0


@dataclass(frozen=True)
class AffinityStats:
    """Distribution summary of one batch run.

    Attributes:
        goal_category:       The goal that was scored.
        total_customers:     Customers considered (scored + skipped).
        processed_customers: Customers that produced a result.
        avg_affinity:        Mean affinity (0.0 when nothing was scored).
        median_affinity:     Median affinity.
        min_affinity:        Minimum affinity.
        max_affinity:        Maximum affinity.
        distribution:        Low / medium / high bucket counts.
    """

    goal_category:       str
    total_customers:     int
    processed_customers: int
    avg_affinity:        float
    median_affinity:     float
    min_affinity:        float
    max_affinity:        float
    distribution:        AffinityDistribution = field(default_factory=AffinityDistribution)

    def to_dict(self) -> dict[str, Any]:
        return {
            "goalCategory":           self.goal_category,
            "totalEligibleCustomers": self.total_customers,
            "processedCustomers":     self.processed_customers,
            "avgAffinity":            self.avg_affinity,
            "medianAffinity":         self.median_affinity,
            "minAffinity":            self.min_affinity,
            "maxAffinity":            self.max_affinity,
            "affinityDistribution": {
                "low":    self.distribution.low,
                "medium": self.distribution.medium,
                "high":   self.distribution.high,
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AffinityStats":
        dist = data.get("affinityDistribution", {})
        return cls(
            goal_category=str(data["goalCategory"]),
            total_customers=int(data["totalEligibleCustomers"]),
            processed_customers=int(data["processedCustomers"]),
            avg_affinity=float(data["avgAffinity"]),
            median_affinity=float(data["medianAffinity"]),
            min_affinity=float(data["minAffinity"]),
            max_affinity=float(data["maxAffinity"]),
            distribution=AffinityDistribution(
                low=int(dist.get("low", 0)),
                medium=int(dist.get("medium", 0)),
                high=int(dist.get("high", 0)),
            ),
        )


@dataclass
class BatchResult:
    """Output of ``process_all_customers()``."""

    results: list[CustomerAffinityResult] = field(default_factory=list)
    skipped: list[SkippedCustomer]        = field(default_factory=list)
