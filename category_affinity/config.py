"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local overrides (gitignored)
  4. Environment variables        — ``CATEGORY_AFFINITY_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The weighting constants of the scoring pipeline (CoAffinity blend, recency
and frequency boosts) live here as named config values and are passed
explicitly into the functions that use them, so alternate weightings can be
tested without touching module-level literals.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class DataConfig(BaseModel):
    """Filesystem locations for input records, matrices and affinity outputs."""

    model_config = ConfigDict(frozen=True)

    data_dir: str = "data"
    matrix_dir: str = "output/matrix"
    output_dir: str = "output/affinity"


class CoAffinityWeights(BaseModel):
    """Blend of normalized lift and normalized co-orders.

    ``coaffinity = lift_weight * lift + co_orders_weight * co_orders``.
    0.7 / 0.3 is a tunable policy choice, not a value derived from data.
    """

    model_config = ConfigDict(frozen=True)

    lift_weight: float = 0.7
    co_orders_weight: float = 0.3

    @field_validator("lift_weight", "co_orders_weight")
    @classmethod
    def validate_unit_interval(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"CoAffinity weights must be in [0.0, 1.0], got {v}.")
        return v


class SeedWeightConfig(BaseModel):
    """Recency / frequency boost constants for per-category seed weights."""

    model_config = ConfigDict(frozen=True)

    recency_last_order: float = 0.75
    recency_older: float = 0.50
    frequency_base: float = 1.0
    frequency_multiplier: float = 0.5
    frequency_cap: float = 1.6

    @model_validator(mode="after")
    def validate_cap(self) -> "SeedWeightConfig":
        if self.frequency_cap < self.frequency_base:
            raise ValueError(
                f"frequency_cap ({self.frequency_cap}) must be >= "
                f"frequency_base ({self.frequency_base})."
            )
        return self


class EligibilityConfig(BaseModel):
    """Customer eligibility window."""

    model_config = ConfigDict(frozen=True)

    active_days: int = 90

    @field_validator("active_days")
    @classmethod
    def validate_active_days(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"active_days must be >= 0, got {v}.")
        return v


class AffinityConfig(BaseModel):
    """Affinity distribution buckets and report sizing."""

    model_config = ConfigDict(frozen=True)

    low_threshold: float = 0.33
    high_threshold: float = 0.66
    top_n: int = 10

    @model_validator(mode="after")
    def validate_thresholds(self) -> "AffinityConfig":
        if not 0.0 <= self.low_threshold <= self.high_threshold <= 1.0:
            raise ValueError(
                "Bucket thresholds must satisfy 0 <= low_threshold <= "
                f"high_threshold <= 1, got {self.low_threshold} / {self.high_threshold}."
            )
        return self


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    All pipeline stages and CLI commands receive an ``AppConfig`` instance.
    It is constructed by ``load_config()`` which merges TOML + .env.
    """

    model_config = ConfigDict(frozen=True)

    data: DataConfig = DataConfig()
    coaffinity: CoAffinityWeights = CoAffinityWeights()
    seed_weights: SeedWeightConfig = SeedWeightConfig()
    eligibility: EligibilityConfig = EligibilityConfig()
    affinity: AffinityConfig = AffinityConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    load_dotenv(dotenv_path=root / ".env", override=False)

    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config explicitly."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    raw = _apply_env_overrides(raw)

    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply CATEGORY_AFFINITY_* env vars to the raw config dict.

    Supported overrides:
      CATEGORY_AFFINITY_DATA_DIR     → raw["data"]["data_dir"]
      CATEGORY_AFFINITY_MATRIX_DIR   → raw["data"]["matrix_dir"]
      CATEGORY_AFFINITY_OUTPUT_DIR   → raw["data"]["output_dir"]
      CATEGORY_AFFINITY_ACTIVE_DAYS  → raw["eligibility"]["active_days"]
      CATEGORY_AFFINITY_LOG_LEVEL    → raw["logging"]["level"]
      CATEGORY_AFFINITY_DEBUG        → raw["debug"]
    """
    if data_dir := os.environ.get("CATEGORY_AFFINITY_DATA_DIR"):
        raw.setdefault("data", {})["data_dir"] = data_dir

    if matrix_dir := os.environ.get("CATEGORY_AFFINITY_MATRIX_DIR"):
        raw.setdefault("data", {})["matrix_dir"] = matrix_dir

    if output_dir := os.environ.get("CATEGORY_AFFINITY_OUTPUT_DIR"):
        raw.setdefault("data", {})["output_dir"] = output_dir

    if active_days := os.environ.get("CATEGORY_AFFINITY_ACTIVE_DAYS"):
        raw.setdefault("eligibility", {})["active_days"] = int(active_days)

    if log_level := os.environ.get("CATEGORY_AFFINITY_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("CATEGORY_AFFINITY_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        data=DataConfig(**raw.get("data", {})),
        coaffinity=CoAffinityWeights(**raw.get("coaffinity", {})),
        seed_weights=SeedWeightConfig(**raw.get("seed_weights", {})),
        eligibility=EligibilityConfig(**raw.get("eligibility", {})),
        affinity=AffinityConfig(**raw.get("affinity", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
