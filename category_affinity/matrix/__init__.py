"""
Merchant-level matrix pipeline: turns the full order history into one
CoAffinity matrix shared by every per-customer computation.

Modules
-------
co_orders  : build_co_order_matrix() — distinct-category pair counts per order.
lift       : build_lift_matrix() — observed / expected co-occurrence.
normalize  : normalize_matrix() — P5/P95 clipping into [0, 1].
coaffinity : compose_coaffinity() + build_coaffinity_from_orders() — the
             weighted blend and the end-to-end builder.
"""
