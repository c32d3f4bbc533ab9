"""
Tests for category_affinity/affinity/history.py.

What we test
------------
1. No orders → None.
2. Frequency counts orders containing a category, not items.
3. last_purchase_date is the newest order containing the category.
4. is_last_order reflects only the single newest order.
5. Orders of other customers are ignored; input order does not matter.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from category_affinity.affinity.history import build_purchase_history, group_orders_by_customer
from category_affinity.models.catalog import Order, OrderItem

_BASE = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _order(order_id: str, customer: str, days_ago: int, *categories: str) -> Order:
    return Order(
        id=order_id,
        customer_id=customer,
        created_at=_BASE - timedelta(days=days_ago),
        items=[OrderItem(category_id=c, price=1.0) for c in categories],
    )


def test_no_orders_returns_none() -> None:
    assert build_purchase_history("c-1", []) is None


def test_only_other_customers_returns_none() -> None:
    assert build_purchase_history("c-1", [_order("o1", "c-2", 1, "a")]) is None


class TestBuildPurchaseHistory:
    def _orders(self) -> list[Order]:
        # intentionally not sorted by date
        return [
            _order("o2", "c-1", 10, "a", "c"),
            _order("o1", "c-1", 1, "a", "b", "b"),
            _order("o3", "c-1", 30, "a"),
            _order("x1", "c-2", 0, "z"),
        ]

    def test_frequency_counts_orders(self):
        history = build_purchase_history("c-1", self._orders())
        assert history.categories["a"].frequency == 3
        assert history.categories["b"].frequency == 1
        assert history.categories["c"].frequency == 1

    def test_last_purchase_date(self):
        history = build_purchase_history("c-1", self._orders())
        assert history.categories["a"].last_purchase_date == _BASE - timedelta(days=1)
        assert history.categories["c"].last_purchase_date == _BASE - timedelta(days=10)

    def test_is_last_order_from_newest_order_only(self):
        history = build_purchase_history("c-1", self._orders())
        assert history.categories["a"].is_last_order is True
        assert history.categories["b"].is_last_order is True
        assert history.categories["c"].is_last_order is False

    def test_totals(self):
        history = build_purchase_history("c-1", self._orders())
        assert history.customer_id == "c-1"
        assert history.total_orders == 3
        assert history.last_order_date == _BASE - timedelta(days=1)

    def test_other_customers_ignored(self):
        history = build_purchase_history("c-1", self._orders())
        assert "z" not in history.categories
        assert not history.has_purchased("z")
        assert history.has_purchased("a")


def test_group_orders_by_customer() -> None:
    orders = [_order("o1", "c-1", 1, "a"), _order("o2", "c-2", 1, "a"), _order("o3", "c-1", 2, "b")]
    grouped = group_orders_by_customer(orders)
    assert [o.id for o in grouped["c-1"]] == ["o1", "o3"]
    assert [o.id for o in grouped["c-2"]] == ["o2"]


def test_sample_customer_history(sample_orders) -> None:
    history = build_purchase_history("cust-1", sample_orders)
    assert history.total_orders == 3
    assert history.categories["electronics"].frequency == 3
    assert history.categories["electronics"].is_last_order is True
    assert history.categories["toys"].is_last_order is False
