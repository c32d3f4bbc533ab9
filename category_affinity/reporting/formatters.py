"""
ASCII terminal formatters for CLI commands.

All formatters accept in-memory result objects and return plain multi-line
strings suitable for ``typer.echo()``. Nothing here computes scores; the
numbers shown are exactly those held by the results.

No third-party dependencies (no ``rich``, no ``colorama``).
"""

from __future__ import annotations

from category_affinity.matrix.coaffinity import top_pairs
from category_affinity.models.affinity import AffinityStats, CustomerAffinityResult
from category_affinity.models.matrix import MatrixBuildResult


# ── Matrix build ──────────────────────────────────────────────────────────────


def format_matrix_summary(result: MatrixBuildResult, top_n: int = 10) -> str:
    """Bounds, order counts and strongest / weakest CoAffinity pairs."""
    stats = result.stats
    cats = result.coaffinity.categories
    lines: list[str] = []
    lines.append("")
    lines.append("=== CoAffinity Matrix Summary ===")
    lines.append(f"  Categories:    {len(cats)}")
    lines.append(f"  Total orders:  {stats.total_orders}")
    lines.append(f"  Lift P5/P95:   {stats.lift_p5:.4f} / {stats.lift_p95:.4f}")
    lines.append(f"  Co-orders P5/P95: {stats.co_orders_p5:.4f} / {stats.co_orders_p95:.4f}")

    if len(cats) < 2:
        lines.append("")
        lines.append("  (fewer than two categories — no pairs to show)")
        return "\n".join(lines)

    lines.append("")
    lines.append(f"  Top {top_n} highest CoAffinity pairs:")
    for a, b, value in top_pairs(cats, result.coaffinity.matrix, n=top_n):
        lines.append(f"    {a} + {b}: {value:.4f}")

    lines.append("")
    lines.append(f"  Top {top_n} lowest CoAffinity pairs:")
    for a, b, value in top_pairs(cats, result.coaffinity.matrix, n=top_n, ascending=True):
        lines.append(f"    {a} + {b}: {value:.4f}")

    return "\n".join(lines)


# ── Affinity stats ────────────────────────────────────────────────────────────


def _pct(count: int, total: int) -> str:
    if total <= 0:
        return "0.0%"
    return f"{count / total:.1%}"


def format_affinity_stats(stats: AffinityStats) -> str:
    """Summary statistics plus low / medium / high bucket shares."""
    dist = stats.distribution
    total = stats.processed_customers
    lines: list[str] = []
    lines.append("")
    lines.append("=== Affinity Statistics ===")
    lines.append(f"  Goal category:       {stats.goal_category}")
    lines.append(f"  Customers:           {stats.total_customers}")
    lines.append(f"  Processed customers: {total}")
    lines.append("")
    lines.append(f"  Average: {stats.avg_affinity:.4f}")
    lines.append(f"  Median:  {stats.median_affinity:.4f}")
    lines.append(f"  Min:     {stats.min_affinity:.4f}")
    lines.append(f"  Max:     {stats.max_affinity:.4f}")
    lines.append("")
    lines.append("  Buckets:")
    lines.append(f"    Low    (0-0.33):    {dist.low:>6}  ({_pct(dist.low, total)})")
    lines.append(f"    Medium (0.33-0.66): {dist.medium:>6}  ({_pct(dist.medium, total)})")
    lines.append(f"    High   (0.66-1.0):  {dist.high:>6}  ({_pct(dist.high, total)})")
    return "\n".join(lines)


def format_skip_summary(skip_counts: dict[str, int]) -> str:
    lines = ["", "  Skipped customers:"]
    if not skip_counts:
        lines.append("    (none)")
    for reason in sorted(skip_counts):
        lines.append(f"    {reason}: {skip_counts[reason]}")
    return "\n".join(lines)


# ── Customer tables ───────────────────────────────────────────────────────────


def format_top_customers(
    results: list[CustomerAffinityResult],
    goal_category: str,
    top_n: int = 10,
) -> str:
    """Top-N customers table. ``results`` must already be ranked."""
    lines: list[str] = []
    lines.append("")
    lines.append(f"=== Top {top_n} Customers for '{goal_category}' ===")

    if not results:
        lines.append("  (no scored customers — run 'calculate-affinity' first)")
        return "\n".join(lines)

    header = (
        f"  {'Rank':>4}  {'Customer':<24}  {'Affinity':>8}  "
        f"{'Signal':>8}  {'Top seed':<20}"
    )
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for rank, r in enumerate(results[:max(top_n, 0)], start=1):
        top = r.top_seed
        seed = top.category_id if top else "-"
        lines.append(
            f"  {rank:>4}  {r.customer_id[:24]:<24}  {r.affinity:>8.4f}  "
            f"{r.max_weighted_signal:>8.4f}  {seed[:20]:<20}"
        )

    if len(results) > top_n:
        lines.append(f"  ... showing {top_n} of {len(results)} customers")
    return "\n".join(lines)


def format_affinity_breakdown(result: CustomerAffinityResult) -> str:
    """Seed weights and weighted signals behind one customer's score."""
    lines: list[str] = []
    lines.append("")
    lines.append(f"=== Affinity Breakdown for {result.customer_id} ===")
    lines.append(f"  Goal category: {result.goal_category}")

    lines.append("")
    lines.append("  Seed weights (purchased categories):")
    for sw in sorted(result.seed_weights, key=lambda s: -s.seed_weight):
        lines.append(
            f"    {sw.category_id}: weight={sw.seed_weight:.4f} "
            f"(recency={sw.recency_boost:.2f}, frequency={sw.frequency_boost:.2f})"
        )

    lines.append("")
    lines.append("  Weighted signals (CoAffinity x seed weight):")
    for ws in sorted(result.weighted_signals, key=lambda s: -s.signal):
        lines.append(f"    {ws.category_id}: {ws.signal:.4f}")

    lines.append("")
    lines.append(f"  Max signal:     {result.max_weighted_signal:.4f}")
    lines.append(f"  Final affinity: {result.affinity:.4f}")
    return "\n".join(lines)
