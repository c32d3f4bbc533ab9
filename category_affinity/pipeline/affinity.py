"""
AffinityStage — score every customer toward one goal category.

  1. Load customers and orders from ``config.data.data_dir``.
  2. Load the prebuilt CoAffinity matrix from ``config.data.matrix_dir``.
  3. ``process_all_customers()`` — goal validation, eligibility, scoring.
  4. ``compute_affinity_stats()`` over the scored customers.
  5. Write results + stats to ``config.data.output_dir``.

An unknown goal category fails the stage before any customer is scored and
before any output file is written.

Returns the number of customers scored. ``stage.batch`` and ``stage.stats``
hold the in-memory results afterwards.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from category_affinity.affinity.batch import (
    compute_affinity_stats,
    process_all_customers,
    summarize_skips,
)
from category_affinity.ingestion.loader import (
    load_coaffinity_matrix,
    load_customers,
    load_orders,
)
from category_affinity.models.affinity import AffinityStats, BatchResult
from category_affinity.models.meta import RunMetadata
from category_affinity.pipeline.base import PipelineStage
from category_affinity.reporting.export import write_affinity_outputs

logger = logging.getLogger(__name__)


class AffinityStage(PipelineStage):
    """Per-customer affinity toward a goal category."""

    stage_name = "affinity"

    batch: Optional[BatchResult] = None
    stats: Optional[AffinityStats] = None

    def _execute(
        self,
        run: RunMetadata,
        goal_category: str = "",
        active_days: Optional[int] = None,
        reference_date: Optional[datetime] = None,
        data_dir: str | Path | None = None,
        matrix_dir: str | Path | None = None,
        output_dir: str | Path | None = None,
        **kwargs,
    ) -> int:
        data_path = Path(data_dir or self.config.data.data_dir)
        matrix_path = Path(matrix_dir or self.config.data.matrix_dir)
        output_path = Path(output_dir or self.config.data.output_dir)
        window = self.config.eligibility.active_days if active_days is None else active_days

        customers = load_customers(data_path)
        orders = load_orders(data_path)
        coaffinity = load_coaffinity_matrix(matrix_path)
        logger.info(
            "Loaded %d customers, %d orders, %d-category matrix",
            len(customers), len(orders), len(coaffinity.categories),
        )

        self.batch = process_all_customers(
            customers,
            orders,
            coaffinity,
            goal_category,
            window,
            reference_date=reference_date,
            seed_config=self.config.seed_weights,
        )
        self.stats = compute_affinity_stats(
            self.batch.results, goal_category, len(customers), self.config.affinity
        )

        for reason, count in sorted(summarize_skips(self.batch.skipped).items()):
            logger.info("  skipped (%s): %d", reason, count)

        written = write_affinity_outputs(
            self.batch.results, self.stats, output_path, goal_category
        )
        run.output_files = [str(p) for p in written]

        return len(self.batch.results)
