"""
Category Affinity Engine — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Execute action (matrix build, affinity batch, report).
  5. Report result to stdout.

Install and run::

    pip install -e .
    category-affinity --help
    category-affinity validate-config
    category-affinity build-matrix
    category-affinity calculate-affinity --goal skincare
    category-affinity report --goal skincare --top 20
    category-affinity explain --goal skincare --customer cust-0042
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="category-affinity",
    help="Category affinity scoring — CoAffinity matrix and per-customer affinity.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from category_affinity.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from category_affinity.utils.logging import configure_logging
    configure_logging(config.logging)


def _parse_reference_date_or_exit(value: Optional[str]):
    from category_affinity.utils.time_utils import parse_reference_date

    try:
        return parse_reference_date(value)
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Data dir:         {config.data.data_dir}")
    typer.echo(f"  Matrix dir:       {config.data.matrix_dir}")
    typer.echo(f"  Output dir:       {config.data.output_dir}")
    typer.echo(
        f"  CoAffinity blend: {config.coaffinity.lift_weight} lift / "
        f"{config.coaffinity.co_orders_weight} co-orders"
    )
    typer.echo(f"  Active days:      {config.eligibility.active_days}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("build-matrix")
def build_matrix(
    data_dir: Optional[str] = typer.Option(
        None,
        "--data-dir",
        help="Directory holding categories.json and orders.json.",
    ),
    output_dir: Optional[str] = typer.Option(
        None,
        "--output-dir",
        help="Where matrix files are written. Defaults to config.data.matrix_dir.",
    ),
    top_n: int = typer.Option(
        10,
        "--top",
        help="Number of highest / lowest pairs to print.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Build co-orders, lift and CoAffinity matrices from the order history."""
    from category_affinity.pipeline.build_matrix import BuildMatrixStage
    from category_affinity.reporting.formatters import format_matrix_summary

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    target_dir = Path(output_dir or config.data.matrix_dir)
    stage = BuildMatrixStage(config=config, runs_dir=target_dir / "runs")

    try:
        run = stage.run(data_dir=data_dir, output_dir=target_dir)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(format_matrix_summary(stage.result, top_n=top_n))
    typer.echo("")
    typer.echo(f"  Files written: {len(run.output_files)} → {target_dir}")
    typer.echo("[OK] CoAffinity matrix built.")


@app.command("calculate-affinity")
def calculate_affinity(
    goal: str = typer.Option(
        ...,
        "--goal",
        "-g",
        help="Goal category id to score customers against.",
    ),
    active_days: Optional[int] = typer.Option(
        None,
        "--active-days",
        help="Activity window in days. Uses config default if omitted.",
    ),
    reference_date: Optional[str] = typer.Option(
        None,
        "--reference-date",
        help="'Today' for the activity window (YYYY-MM-DD). Defaults to now.",
    ),
    data_dir: Optional[str] = typer.Option(
        None,
        "--data-dir",
        help="Directory holding customers.json and orders.json.",
    ),
    matrix_dir: Optional[str] = typer.Option(
        None,
        "--matrix-dir",
        help="Directory holding coaffinity-matrix.json.",
    ),
    output_dir: Optional[str] = typer.Option(
        None,
        "--output-dir",
        help="Where affinity results are written. Defaults to config.data.output_dir.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Score every eligible customer's affinity toward a goal category.

    Requires a CoAffinity matrix from ``build-matrix``.
    """
    from category_affinity.affinity.batch import rank_results, summarize_skips
    from category_affinity.pipeline.affinity import AffinityStage
    from category_affinity.reporting.formatters import (
        format_affinity_stats,
        format_skip_summary,
        format_top_customers,
    )

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    if active_days is not None and active_days < 0:
        typer.echo("[ERROR] --active-days must be >= 0.", err=True)
        raise typer.Exit(code=1)

    ref = _parse_reference_date_or_exit(reference_date)
    target_dir = Path(output_dir or config.data.output_dir)
    stage = AffinityStage(config=config, runs_dir=target_dir / "runs")

    try:
        run = stage.run(
            goal_category=goal,
            active_days=active_days,
            reference_date=ref,
            data_dir=data_dir,
            matrix_dir=matrix_dir,
            output_dir=target_dir,
        )
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    top_n = config.affinity.top_n
    typer.echo(format_affinity_stats(stage.stats))
    typer.echo(format_skip_summary(summarize_skips(stage.batch.skipped)))
    typer.echo(format_top_customers(rank_results(stage.batch.results), goal, top_n))
    typer.echo("")
    typer.echo(f"  Files written: {len(run.output_files)} → {target_dir}")
    typer.echo(f"[OK] Affinity calculated for '{goal}'.")


@app.command("report")
def report(
    goal: str = typer.Option(
        ...,
        "--goal",
        "-g",
        help="Goal category id of a previous calculate-affinity run.",
    ),
    top_n: Optional[int] = typer.Option(
        None,
        "--top",
        help="Number of customers to show. Uses config default if omitted.",
    ),
    output_dir: Optional[str] = typer.Option(
        None,
        "--output-dir",
        help="Directory holding affinity results. Defaults to config.data.output_dir.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Print stats and the top customers from previously written results."""
    from category_affinity.affinity.batch import rank_results
    from category_affinity.reporting.export import read_affinity_results, read_affinity_stats
    from category_affinity.reporting.formatters import format_affinity_stats, format_top_customers

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    if top_n is not None and top_n < 0:
        typer.echo("[ERROR] --top must be >= 0.", err=True)
        raise typer.Exit(code=1)

    target_dir = Path(output_dir or config.data.output_dir)
    try:
        results = read_affinity_results(target_dir, goal)
        stats = read_affinity_stats(target_dir, goal)
    except ValueError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    if results is None or stats is None:
        typer.echo(
            f"[ERROR] No affinity results for '{goal}' in {target_dir}. "
            "Run 'calculate-affinity' first.",
            err=True,
        )
        raise typer.Exit(code=1)

    n = config.affinity.top_n if top_n is None else top_n
    typer.echo(format_affinity_stats(stats))
    typer.echo(format_top_customers(rank_results(results), goal, n))


@app.command("explain")
def explain(
    goal: str = typer.Option(
        ...,
        "--goal",
        "-g",
        help="Goal category id.",
    ),
    customer: str = typer.Option(
        ...,
        "--customer",
        "-c",
        help="Customer id to explain.",
    ),
    active_days: Optional[int] = typer.Option(
        None,
        "--active-days",
        help="Activity window in days. Uses config default if omitted.",
    ),
    reference_date: Optional[str] = typer.Option(
        None,
        "--reference-date",
        help="'Today' for the activity window (YYYY-MM-DD). Defaults to now.",
    ),
    data_dir: Optional[str] = typer.Option(
        None,
        "--data-dir",
        help="Directory holding orders.json.",
    ),
    matrix_dir: Optional[str] = typer.Option(
        None,
        "--matrix-dir",
        help="Directory holding coaffinity-matrix.json.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Show the seed weights and signals behind one customer's affinity.

    The breakdown is printed even for customers the batch would skip; the
    skip reason is shown first.
    """
    from category_affinity.affinity.batch import validate_goal_category
    from category_affinity.affinity.history import build_purchase_history
    from category_affinity.affinity.scorer import score_customer
    from category_affinity.affinity.seed_weights import ineligibility_reason
    from category_affinity.ingestion.loader import load_coaffinity_matrix, load_orders
    from category_affinity.reporting.formatters import format_affinity_breakdown

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    ref = _parse_reference_date_or_exit(reference_date)
    window = config.eligibility.active_days if active_days is None else active_days

    try:
        coaffinity = load_coaffinity_matrix(Path(matrix_dir or config.data.matrix_dir))
        validate_goal_category(goal, coaffinity)
        orders = load_orders(Path(data_dir or config.data.data_dir))
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    history = build_purchase_history(customer, orders)
    if history is None:
        typer.echo(f"[ERROR] Customer '{customer}' has no orders.", err=True)
        raise typer.Exit(code=1)

    reason = ineligibility_reason(history, goal, window, ref)
    if reason is not None:
        typer.echo(f"[WARN] Customer would be skipped by the batch: {reason}")

    result = score_customer(history, goal, coaffinity, config.seed_weights)
    typer.echo(format_affinity_breakdown(result))


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
