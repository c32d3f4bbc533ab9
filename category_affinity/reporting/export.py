"""
File output for matrices and affinity results.

All writers create missing parent directories and return the written
``Path`` (or list of paths). Generic ``export_to_csv`` / ``export_to_json``
accept plain dicts; the ``write_*`` functions know the pipeline's file names.

Matrix build outputs (``<matrix_dir>/``)
----------------------------------------
  co-orders-matrix.json / .csv
  lift-matrix.json / .csv
  normalized-lift-matrix.json
  normalized-coorders-matrix.json
  coaffinity-matrix.json / .csv
  matrix-stats.json

Affinity outputs (``<output_dir>/``)
------------------------------------
  affinity-{goal}.json          full results, highest affinity first
  affinity-{goal}.csv           one flat summary row per customer
  affinity-{goal}.parquet       same summary rows, typed columns
  affinity-{goal}-stats.json    AffinityStats
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any, Callable

import pyarrow as pa
import pyarrow.parquet as pq

from category_affinity.affinity.batch import rank_results
from category_affinity.models.affinity import AffinityStats, CustomerAffinityResult
from category_affinity.models.matrix import MatrixBuildResult

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = [
    "customerId", "goalCategory", "affinity", "maxSignal",
    "numSeedCategories", "topSeedCategory", "topSeedSignal",
]

_SUMMARY_SCHEMA = pa.schema([
    ("customerId",        pa.string()),
    ("goalCategory",      pa.string()),
    ("affinity",          pa.float64()),
    ("maxSignal",         pa.float64()),
    ("numSeedCategories", pa.int64()),
    ("topSeedCategory",   pa.string()),
    ("topSeedSignal",     pa.float64()),
])


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path (parent dirs created if missing).
        fieldnames: Column order.  If None, uses the keys of the first record.

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not records:
        path.write_text("", encoding="utf-8")
        return path
    cols = fieldnames or list(records[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_to_json(data: dict | list, path: Path) -> Path:
    """Write ``data`` to a pretty-printed JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
    return path


def export_matrix_csv(
    matrix: list[list[float]],
    categories: list[str],
    path: Path,
) -> Path:
    """Write a labelled square matrix: header row of ids, one row per id.

    Values are written with 6 decimals.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["", *categories])
        for cat, row in zip(categories, matrix):
            writer.writerow([cat, *(f"{v:.6f}" for v in row)])
    return path


def write_matrix_outputs(result: MatrixBuildResult, output_dir: Path) -> list[Path]:
    """Write every matrix of a build plus its stats."""
    output_dir = Path(output_dir)
    written = [
        export_to_json(result.co_orders.to_dict(), output_dir / "co-orders-matrix.json"),
        export_to_json(result.lift.to_dict(), output_dir / "lift-matrix.json"),
        export_to_json(
            result.normalized_lift.to_dict(), output_dir / "normalized-lift-matrix.json"
        ),
        export_to_json(
            result.normalized_co_orders.to_dict(),
            output_dir / "normalized-coorders-matrix.json",
        ),
        export_to_json(result.coaffinity.to_dict(), output_dir / "coaffinity-matrix.json"),
        export_to_json(result.stats.to_dict(), output_dir / "matrix-stats.json"),
        export_matrix_csv(
            result.co_orders.matrix, result.co_orders.categories,
            output_dir / "co-orders-matrix.csv",
        ),
        export_matrix_csv(
            result.lift.matrix, result.lift.categories, output_dir / "lift-matrix.csv"
        ),
        export_matrix_csv(
            result.coaffinity.matrix, result.coaffinity.categories,
            output_dir / "coaffinity-matrix.csv",
        ),
    ]
    logger.info("Matrix outputs written to %s (%d files)", output_dir, len(written))
    return written


def summary_rows(results: list[CustomerAffinityResult]) -> list[dict]:
    """Flatten results into one row per customer, highest affinity first."""
    rows: list[dict] = []
    for r in rank_results(results):
        top = r.top_seed
        rows.append(
            {
                "customerId":        r.customer_id,
                "goalCategory":      r.goal_category,
                "affinity":          round(r.affinity, 6),
                "maxSignal":         round(r.max_weighted_signal, 6),
                "numSeedCategories": len(r.seed_weights),
                "topSeedCategory":   top.category_id if top else "",
                "topSeedSignal":     round(top.signal, 6) if top else None,
            }
        )
    return rows


def write_affinity_parquet(rows: list[dict], path: Path) -> Path:
    """Write summary rows to Parquet with a fixed schema."""
    path.parent.mkdir(parents=True, exist_ok=True)
    table = pa.Table.from_pylist(rows, schema=_SUMMARY_SCHEMA)
    pq.write_table(table, str(path))
    return path


def write_affinity_outputs(
    results: list[CustomerAffinityResult],
    stats: AffinityStats,
    output_dir: Path,
    goal_category: str,
) -> list[Path]:
    """Write full JSON, summary CSV + Parquet and stats for one goal."""
    output_dir = Path(output_dir)
    rows = summary_rows(results)

    written = [
        export_to_json(
            [r.to_dict() for r in rank_results(results)],
            output_dir / f"affinity-{goal_category}.json",
        ),
        export_to_csv(rows, output_dir / f"affinity-{goal_category}.csv", SUMMARY_COLUMNS),
        write_affinity_parquet(rows, output_dir / f"affinity-{goal_category}.parquet"),
        export_to_json(stats.to_dict(), output_dir / f"affinity-{goal_category}-stats.json"),
    ]
    logger.info(
        "Affinity outputs written to %s (%d results)", output_dir, len(results)
    )
    return written


def _read_saved(path: Path, parse: Callable[[Any], Any]) -> Any:
    """Parse a previously written JSON output; ``None`` if it does not exist.

    Raises:
        ValueError: The file is not valid JSON or lacks expected fields.
    """
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    try:
        return parse(data)
    except (KeyError, TypeError, AttributeError) as exc:
        raise ValueError(f"Malformed {path.name}: {exc!r}") from exc


def read_affinity_results(output_dir: Path, goal_category: str) -> list[CustomerAffinityResult] | None:
    """Load ``affinity-{goal}.json``; ``None`` if it has not been written yet."""
    return _read_saved(
        Path(output_dir) / f"affinity-{goal_category}.json",
        lambda data: [CustomerAffinityResult.from_dict(item) for item in data],
    )


def read_affinity_stats(output_dir: Path, goal_category: str) -> AffinityStats | None:
    """Load ``affinity-{goal}-stats.json``; ``None`` if missing."""
    return _read_saved(
        Path(output_dir) / f"affinity-{goal_category}-stats.json",
        AffinityStats.from_dict,
    )
