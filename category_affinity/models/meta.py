"""
Pipeline run metadata.

``RunMetadata`` is the execution audit record of one pipeline stage. Every
run records a complete ``config_snapshot`` (full AppConfig as a dict) so the
run can be reproduced by restoring that config and re-running.

It is the only pydantic model in the package that is NOT frozen — its
``status``, ``rows_processed``, ``error_message`` and ``finished_at`` fields
are updated as the stage executes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

VALID_PIPELINE_STAGES = frozenset({"build_matrix", "affinity"})
VALID_RUN_STATUSES = frozenset({"started", "success", "failed"})


class RunMetadata(BaseModel):
    """Pipeline execution audit record.

    Attributes:
        run_slug:        UUID4 string uniquely identifying this run.
        pipeline_stage:  Which stage produced this record.
        status:          Current execution status.
        config_snapshot: Full ``AppConfig.model_dump()`` at run start.
        parameters:      Stage arguments (goal category, directories, ...).
        rows_processed:  Records produced by the stage.
        output_files:    Paths written by the stage.
        error_message:   Error description if ``status == "failed"``.
        started_at:      UTC datetime when the run began.
        finished_at:     UTC datetime when the run completed or failed.
    """

    model_config = ConfigDict(frozen=False)

    run_slug: str
    pipeline_stage: str
    status: str = "started"
    config_snapshot: dict[str, Any]
    parameters: dict[str, Any] = {}
    rows_processed: int = 0
    output_files: list[str] = []
    error_message: Optional[str] = None
    started_at: datetime
    finished_at: Optional[datetime] = None

    @field_validator("pipeline_stage")
    @classmethod
    def validate_pipeline_stage(cls, v: str) -> str:
        if v not in VALID_PIPELINE_STAGES:
            raise ValueError(
                f"Unknown pipeline_stage '{v}'. Must be one of {sorted(VALID_PIPELINE_STAGES)}."
            )
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        if v not in VALID_RUN_STATUSES:
            raise ValueError(
                f"Unknown status '{v}'. Must be one of {sorted(VALID_RUN_STATUSES)}."
            )
        return v
