"""
Export helpers for spreadsheets and downstream tooling.

All writer functions write to disk and return the written ``Path``.
Flatten helpers turn nested report / recommendation models into flat
``list[dict]`` rows so CSV output loads directly in Excel or pandas.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Iterable

from roi_optimizer.models.recommendation import Recommendation
from roi_optimizer.models.report import ROIReport


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


def export_to_json(
    data: dict | list,
    path: Path,
) -> Path:
    """Write ``data`` to a pretty-printed JSON file.

    Args:
        data: Dict or list to serialise.
        path: Destination file path (parent dirs created if missing).

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
    return path


def analysis_to_dict(
    report: ROIReport,
    recommendations: Iterable[Recommendation],
) -> dict:
    """JSON-ready dict of one report plus its prioritized recommendations."""
    return {
        "report": report.model_dump(mode="json"),
        "recommendations": [r.model_dump(mode="json") for r in recommendations],
    }


def flatten_monthly_for_export(reports: Iterable[ROIReport]) -> list[dict]:
    """One row per (investment, month) from the monthly ROI series.

    Columns: investment_id, month, revenue, cost, roi.
    """
    rows: list[dict] = []
    for report in reports:
        for point in report.monthly_roi:
            rows.append(
                {
                    "investment_id": report.investment_id,
                    "month":         point.month,
                    "revenue":       point.revenue,
                    "cost":          point.cost,
                    "roi":           point.roi,
                }
            )
    return rows


def flatten_recommendations_for_export(
    investment_id: str,
    recommendations: Iterable[Recommendation],
) -> list[dict]:
    """One row per recommendation, ranked 1..n in the given order.

    ``action_items`` are joined with ``" | "`` so each row stays a single CSV line.
    """
    rows: list[dict] = []
    for rank, rec in enumerate(recommendations, start=1):
        rows.append(
            {
                "investment_id":          investment_id,
                "rank":                   rank,
                "priority":               rec.priority.value,
                "category":               rec.category.value,
                "title":                  rec.title,
                "estimated_roi_increase": rec.estimated_roi_increase,
                "implementation_effort":  rec.implementation_effort.value,
                "potential_impact":       rec.potential_impact,
                "action_items":           " | ".join(rec.action_items),
                "rule":                   rec.rule,
            }
        )
    return rows
