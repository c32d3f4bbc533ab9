"""
BuildMatrixStage — build the CoAffinity matrix from the order history.

  1. Load categories and orders from ``config.data.data_dir``.
  2. Run ``build_coaffinity_from_orders()`` with ``config.coaffinity`` weights.
  3. Write every matrix and ``matrix-stats.json`` to ``config.data.matrix_dir``.

Returns the number of categories (matrix rows) built. The full
``MatrixBuildResult`` is kept on ``stage.result`` for callers that want to
display it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from category_affinity.ingestion.loader import load_categories, load_orders
from category_affinity.matrix.coaffinity import build_coaffinity_from_orders
from category_affinity.models.matrix import MatrixBuildResult
from category_affinity.models.meta import RunMetadata
from category_affinity.pipeline.base import PipelineStage
from category_affinity.reporting.export import write_matrix_outputs

logger = logging.getLogger(__name__)


class BuildMatrixStage(PipelineStage):
    """Orders → co-orders → lift → normalized → CoAffinity, written to disk."""

    stage_name = "build_matrix"

    result: Optional[MatrixBuildResult] = None

    def _execute(
        self,
        run: RunMetadata,
        data_dir: str | Path | None = None,
        output_dir: str | Path | None = None,
        **kwargs,
    ) -> int:
        data_path = Path(data_dir or self.config.data.data_dir)
        output_path = Path(output_dir or self.config.data.matrix_dir)

        categories = load_categories(data_path)
        orders = load_orders(data_path)
        logger.info(
            "Loaded %d categories and %d orders from %s",
            len(categories), len(orders), data_path,
        )

        self.result = build_coaffinity_from_orders(
            orders, categories, self.config.coaffinity
        )
        written = write_matrix_outputs(self.result, output_path)
        run.output_files = [str(p) for p in written]

        return len(self.result.coaffinity.categories)
