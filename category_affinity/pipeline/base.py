"""
Abstract base class for all pipeline stages.

Every stage follows the same contract:
  1. Receive ``AppConfig`` at construction.
  2. ``run(**kwargs)`` is the sole public API.
  3. ``run()`` creates a ``RunMetadata`` record, calls ``_execute()``,
     and writes the run manifest with final status.
  4. ``_execute()`` is the stage-specific implementation (overridden by subclasses).

Run manifests are JSON files under ``<runs_dir>/`` named
``{stage}_{run_slug}.json``. Stages never swallow exceptions: a failed run
is recorded and the original exception re-raised.

Usage::

    class MyStage(PipelineStage):
        stage_name = "build_matrix"

        def _execute(self, run: RunMetadata, **kwargs) -> int:
            return 42

    stage = MyStage(config=app_config)
    result = stage.run(data_dir="data")
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from uuid import uuid4

from category_affinity.config import AppConfig
from category_affinity.models.meta import RunMetadata
from category_affinity.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


class PipelineStage(ABC):
    """Abstract base for all pipeline stages.

    Subclasses must:
      1. Set ``stage_name`` class variable.
      2. Implement ``_execute(run, **kwargs) -> int``.

    Attributes:
        stage_name: String identifier matching a valid ``RunMetadata.pipeline_stage``.
        config:     The application configuration for this run.
        runs_dir:   Directory for run manifests (``None`` disables them).
    """

    stage_name: str

    def __init__(
        self,
        config: AppConfig,
        runs_dir: str | Path | None = None,
    ) -> None:
        self.config = config
        self.runs_dir = Path(runs_dir) if runs_dir is not None else None

    def run(self, **kwargs) -> RunMetadata:
        """Execute this pipeline stage.

        Args:
            **kwargs: Stage-specific keyword arguments passed to ``_execute()``.

        Returns:
            ``RunMetadata`` with final ``status``, ``rows_processed``,
            and ``finished_at`` set.

        Raises:
            Exception: Re-raises any exception from ``_execute()`` after
                recording ``status='failed'`` in the run record.
        """
        run = RunMetadata(
            run_slug=str(uuid4()),
            pipeline_stage=self.stage_name,
            config_snapshot=self.config.model_dump(),
            parameters={k: str(v) for k, v in kwargs.items()},
            started_at=utcnow(),
        )
        logger.info("Stage [%s] starting | run_slug=%s", self.stage_name, run.run_slug)

        try:
            rows = self._execute(run=run, **kwargs)
        except Exception as exc:
            run.status = "failed"
            run.error_message = str(exc)
            run.finished_at = utcnow()
            logger.error(
                "Stage [%s] FAILED: %s | run_slug=%s",
                self.stage_name, exc, run.run_slug,
            )
            self._persist_run(run)
            raise

        run.status = "success"
        run.rows_processed = rows
        run.finished_at = utcnow()
        logger.info(
            "Stage [%s] completed | rows=%d | run_slug=%s",
            self.stage_name, rows, run.run_slug,
        )
        self._persist_run(run)
        return run

    @abstractmethod
    def _execute(self, run: RunMetadata, **kwargs) -> int:
        """Stage-specific implementation.

        Args:
            run:      The in-progress ``RunMetadata`` record (mutable).
            **kwargs: Stage-specific parameters.

        Returns:
            Integer count of records produced.
        """
        ...

    def _persist_run(self, run: RunMetadata) -> None:
        """Write the run manifest.

        Logs rather than raises on failure — manifest persistence must not
        mask the original pipeline error.
        """
        if self.runs_dir is None:
            return
        try:
            self.runs_dir.mkdir(parents=True, exist_ok=True)
            path = self.runs_dir / f"{self.stage_name}_{run.run_slug}.json"
            path.write_text(run.model_dump_json(indent=2), encoding="utf-8")
        except OSError as exc:
            logger.error(
                "Failed to persist RunMetadata for run_slug=%s: %s",
                run.run_slug, exc,
            )
