"""
Customer purchase-history summarization.

For one customer the orders are sorted newest first. The distinct
categories of the newest order form the "last order" set. Walking every
order, each distinct category accumulates:

  frequency          number of orders containing it (not item count)
  last_purchase_date most recent order timestamp containing it
  is_last_order      membership in the "last order" set

``is_last_order`` is decided once from the newest order, not per order
walked: it is a single-order recency signal, not a decay over history.

A customer with no orders has no history (``None``). That is a normal skip
condition for the batch runner, not an error.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Iterable, Optional

from category_affinity.matrix.co_orders import distinct_categories
from category_affinity.models.affinity import CategoryPurchaseInfo, CustomerPurchaseHistory
from category_affinity.models.catalog import Order


def group_orders_by_customer(orders: Iterable[Order]) -> dict[str, list[Order]]:
    """Index orders by ``customer_id``, preserving input order."""
    grouped: dict[str, list[Order]] = defaultdict(list)
    for order in orders:
        grouped[order.customer_id].append(order)
    return dict(grouped)


def build_purchase_history(
    customer_id: str,
    orders: Iterable[Order],
) -> Optional[CustomerPurchaseHistory]:
    """Summarize one customer's orders.

    Args:
        customer_id: Customer to summarize.
        orders:      Any order collection; orders of other customers are ignored.

    Returns:
        ``CustomerPurchaseHistory``, or ``None`` if the customer has no orders.
    """
    customer_orders = sorted(
        (o for o in orders if o.customer_id == customer_id),
        key=lambda o: o.created_at,
        reverse=True,
    )
    if not customer_orders:
        return None

    last_order = customer_orders[0]
    last_order_categories = set(distinct_categories(last_order))

    frequency: dict[str, int] = {}
    last_seen: dict[str, datetime] = {}

    for order in customer_orders:
        for cat in distinct_categories(order):
            frequency[cat] = frequency.get(cat, 0) + 1
            seen = last_seen.get(cat)
            if seen is None or order.created_at > seen:
                last_seen[cat] = order.created_at

    categories = {
        cat: CategoryPurchaseInfo(
            category_id=cat,
            frequency=count,
            last_purchase_date=last_seen[cat],
            is_last_order=cat in last_order_categories,
        )
        for cat, count in frequency.items()
    }

    return CustomerPurchaseHistory(
        customer_id=customer_id,
        categories=categories,
        last_order_date=last_order.created_at,
        total_orders=len(customer_orders),
    )
