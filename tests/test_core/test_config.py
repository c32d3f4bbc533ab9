"""
Tests for category_affinity/config.py.

What we test
------------
1. The committed config/default.toml loads and matches model defaults.
2. An explicit TOML path is honoured; a missing path raises FileNotFoundError.
3. local.toml next to the config file is deep-merged on top.
4. CATEGORY_AFFINITY_* environment overrides win over TOML.
5. Field validators reject out-of-range weights, windows and thresholds.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from category_affinity.config import (
    AffinityConfig,
    AppConfig,
    CoAffinityWeights,
    EligibilityConfig,
    LoggingConfig,
    SeedWeightConfig,
    _deep_merge,
    load_config,
)

_ENV_VARS = [
    "CATEGORY_AFFINITY_DATA_DIR",
    "CATEGORY_AFFINITY_MATRIX_DIR",
    "CATEGORY_AFFINITY_OUTPUT_DIR",
    "CATEGORY_AFFINITY_ACTIVE_DAYS",
    "CATEGORY_AFFINITY_LOG_LEVEL",
    "CATEGORY_AFFINITY_DEBUG",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)


def _write_toml(path: Path, body: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body, encoding="utf-8")
    return path


class TestLoadConfig:
    def test_default_toml(self):
        config = load_config()
        assert config.coaffinity.lift_weight == pytest.approx(0.7)
        assert config.coaffinity.co_orders_weight == pytest.approx(0.3)
        assert config.seed_weights.frequency_cap == pytest.approx(1.6)
        assert config.eligibility.active_days == 90
        assert config.affinity.top_n == 10

    def test_explicit_path(self, tmp_path):
        path = _write_toml(
            tmp_path / "cfg" / "custom.toml",
            '[eligibility]\nactive_days = 30\n\n[data]\ndata_dir = "elsewhere"\n',
        )
        config = load_config(path)
        assert config.eligibility.active_days == 30
        assert config.data.data_dir == "elsewhere"
        assert config.data.matrix_dir == "output/matrix"

    def test_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.toml")

    def test_local_override(self, tmp_path):
        path = _write_toml(
            tmp_path / "default.toml",
            "[coaffinity]\nlift_weight = 0.6\nco_orders_weight = 0.4\n",
        )
        _write_toml(tmp_path / "local.toml", "[coaffinity]\nlift_weight = 0.9\n")
        config = load_config(path)
        assert config.coaffinity.lift_weight == pytest.approx(0.9)
        assert config.coaffinity.co_orders_weight == pytest.approx(0.4)

    def test_env_overrides(self, tmp_path, monkeypatch):
        path = _write_toml(tmp_path / "default.toml", "[eligibility]\nactive_days = 30\n")
        monkeypatch.setenv("CATEGORY_AFFINITY_ACTIVE_DAYS", "45")
        monkeypatch.setenv("CATEGORY_AFFINITY_OUTPUT_DIR", "out/x")
        monkeypatch.setenv("CATEGORY_AFFINITY_LOG_LEVEL", "debug")
        monkeypatch.setenv("CATEGORY_AFFINITY_DEBUG", "true")
        config = load_config(path)
        assert config.eligibility.active_days == 45
        assert config.data.output_dir == "out/x"
        assert config.logging.level == "DEBUG"
        assert config.debug is True

    def test_invalid_values_fail(self, tmp_path):
        path = _write_toml(tmp_path / "default.toml", "[coaffinity]\nlift_weight = 1.5\n")
        with pytest.raises(ValidationError):
            load_config(path)


class TestValidators:
    def test_weights_in_unit_interval(self):
        with pytest.raises(ValidationError):
            CoAffinityWeights(co_orders_weight=-0.1)

    def test_negative_active_days(self):
        with pytest.raises(ValidationError):
            EligibilityConfig(active_days=-1)

    def test_cap_below_base(self):
        with pytest.raises(ValidationError):
            SeedWeightConfig(frequency_base=2.0, frequency_cap=1.5)

    def test_threshold_order(self):
        with pytest.raises(ValidationError):
            AffinityConfig(low_threshold=0.8, high_threshold=0.5)

    def test_log_level(self):
        assert LoggingConfig(level="warning").level == "WARNING"
        with pytest.raises(ValidationError):
            LoggingConfig(level="LOUD")

    def test_app_config_frozen(self):
        config = AppConfig()
        with pytest.raises(ValidationError):
            config.debug = True  # type: ignore[misc]


def test_deep_merge() -> None:
    merged = _deep_merge({"a": {"x": 1, "y": 2}, "b": 1}, {"a": {"y": 3}, "c": 4})
    assert merged == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}
