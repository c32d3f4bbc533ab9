"""
Customer-level affinity scoring against a prebuilt CoAffinity matrix.

Modules
-------
history      : build_purchase_history() — one customer's category frequency,
               last purchase date and last-order membership.
seed_weights : recency / frequency boosts → per-category seed weights, plus
               the eligibility predicate used by the batch runner.
scorer       : weighted signals, max raw signal and the saturating
               ``1 - exp(-x)`` affinity — pure functions, no I/O.
batch        : process_all_customers() + compute_affinity_stats().
"""
