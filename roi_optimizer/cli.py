"""
Sales Automation ROI Optimizer CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load and validate inputs.
  4. Run the ROI / recommendation engines.
  5. Report result to stdout (and optionally to files).

Install and run::

    pip install -e .
    roi-optimizer --help
    roi-optimizer validate-config
    roi-optimizer analyze data/sample.json
    roi-optimizer analyze data/sample.json --output-dir data/outputs --record
    roi-optimizer history --limit 10
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from pathlib import Path
from typing import Optional

import typer

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="roi-optimizer",
    help="Sales automation ROI analysis and optimization recommendations.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from roi_optimizer.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except ValueError as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config, stream=None, run_id=None):
    """Set up logging from config; ``debug = true`` forces DEBUG level."""
    from roi_optimizer.utils.logging import configure_logging
    configure_logging(config.logging, stream=stream, run_id=run_id, debug=config.debug)


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
        help="Print full config including all thresholds.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Trend window:      {config.trend.window}")
    typer.echo(f"  Conversion scale:  {config.ingestion.conversion_scale}")
    typer.echo(f"  History limit:     {config.history.max_entries}")
    typer.echo(f"  Output dir:        {config.output.output_dir}")
    typer.echo(f"  Log level:         {config.logging.level}")
    typer.echo(f"  Debug mode:        {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))


@app.command("analyze")
def analyze_cmd(
    data_file: Path = typer.Argument(..., help="JSON file with investments and sales_data."),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
    conversion_scale: Optional[str] = typer.Option(
        None,
        "--conversion-scale",
        help="Override ingestion.conversion_scale: 'percent' (0-100) or 'fraction' (0-1).",
    ),
    output_dir: Optional[str] = typer.Option(
        None,
        "--output-dir",
        help="Write analysis JSON plus monthly/recommendation CSVs here (implies --export).",
    ),
    export: bool = typer.Option(
        False,
        "--export",
        help="Write output files to config output.output_dir.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print machine-readable JSON instead of text.",
    ),
    record: bool = typer.Option(
        False,
        "--record",
        help="Append each analysis to the history file.",
    ),
) -> None:
    """Compute ROI reports and prioritized recommendations for every investment.

    Investments without any sales data are skipped.
    """
    from roi_optimizer.analysis.calculator import analyze, summarize_sales
    from roi_optimizer.errors import InvalidInputError
    from roi_optimizer.history import AnalysisHistory
    from roi_optimizer.ingestion.records import load_dataset
    from roi_optimizer.recommendations.engine import recommend
    from roi_optimizer.recommendations.prioritizer import count_by_priority
    from roi_optimizer.reporting.export import (
        analysis_to_dict,
        export_to_csv,
        export_to_json,
        flatten_monthly_for_export,
        flatten_recommendations_for_export,
    )
    from roi_optimizer.reporting.formatters import (
        format_recommendations,
        format_report,
        format_sales_summary,
    )

    config = _load_config_or_exit(config_path)
    run_id = uuid.uuid4().hex[:8]
    _configure_logging(config, stream=sys.stderr if as_json else None, run_id=run_id)
    logger.info("analyze run %s: %s", run_id, data_file)

    scale = conversion_scale or config.ingestion.conversion_scale
    try:
        dataset = load_dataset(data_file, conversion_scale=scale)
        reports = analyze(dataset.investments, dataset.sales_points)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except InvalidInputError as exc:
        typer.echo(f"[ERROR] Invalid input: {exc}", err=True)
        raise typer.Exit(code=1)

    investments = {inv.id: inv for inv in dataset.investments}
    results = []
    for report in reports:
        investment = investments[report.investment_id]
        recs = recommend(
            report,
            investment,
            dataset.sales_points,
            thresholds=config.thresholds,
            window=config.trend.window,
        )
        results.append((report, investment, recs))

    if as_json:
        payload = [analysis_to_dict(report, recs) for report, _, recs in results]
        typer.echo(json.dumps(payload, indent=2))
    else:
        if not results:
            typer.echo("No sales data available for the provided investments.")
        for report, investment, recs in results:
            related = [p for p in dataset.sales_points if p.investment_id == report.investment_id]
            counts = count_by_priority(recs)
            typer.echo(format_report(report, investment))
            typer.echo(format_sales_summary(summarize_sales(related)))
            typer.echo("")
            typer.echo(
                f"Recommendations ({counts['high']} high, {counts['medium']} medium, "
                f"{counts['low']} low):"
            )
            typer.echo(format_recommendations(recs))
            typer.echo("")

    if output_dir or export:
        out = Path(output_dir or config.output.output_dir)
        export_to_json(
            [analysis_to_dict(report, recs) for report, _, recs in results],
            out / "analysis.json",
        )
        export_to_csv(flatten_monthly_for_export(r for r, _, _ in results), out / "monthly_roi.csv")
        rec_rows: list[dict] = []
        for report, _, recs in results:
            rec_rows.extend(flatten_recommendations_for_export(report.investment_id, recs))
        export_to_csv(rec_rows, out / "recommendations.csv")
        if not as_json:
            typer.echo(f"[OK] Outputs written to {out}")

    if record and results:
        history_path = Path(config.history.history_file)
        try:
            history = AnalysisHistory.load(history_path, config.history.max_entries)
        except InvalidInputError as exc:
            typer.echo(f"[ERROR] {exc}", err=True)
            raise typer.Exit(code=1)
        for report, _, recs in results:
            previous = history.latest(report.investment_id)
            if previous is not None and not as_json:
                delta = report.roi_percentage - previous.report.roi_percentage
                typer.echo(
                    f"[INFO] {report.investment_id}: ROI {delta:+.2f} pts since last recorded analysis"
                )
            history.record(report, recs)
        history.save(history_path)


@app.command("history")
def history_cmd(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
    limit: int = typer.Option(20, "--limit", min=1, help="Max analyses to show."),
    offset: int = typer.Option(0, "--offset", min=0, help="Skip this many newest analyses."),
    investment_id: Optional[str] = typer.Option(
        None,
        "--investment",
        help="Only show analyses for this investment id.",
    ),
) -> None:
    """Show recorded analyses (newest first) with aggregate statistics."""
    from roi_optimizer.errors import InvalidInputError
    from roi_optimizer.history import AnalysisHistory
    from roi_optimizer.reporting.formatters import format_history

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        history = AnalysisHistory.load(
            Path(config.history.history_file), config.history.max_entries
        )
    except InvalidInputError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    typer.echo(format_history(history.page(limit, offset, investment_id), history.summary()))


if __name__ == "__main__":
    app()
