"""
Tests for roi_optimizer/reporting/export.py.

What we test
------------
export_to_csv(): header from first record, explicit fieldnames, empty input.
export_to_json(): parent directories created; round-trips through json.
analysis_to_dict(): JSON-safe report + recommendations.
flatten_monthly_for_export(): one row per (investment, month).
flatten_recommendations_for_export(): ranks start at 1; action items joined.
"""

from __future__ import annotations

import csv
import json

from roi_optimizer.recommendations.engine import recommend
from roi_optimizer.reporting.export import (
    analysis_to_dict,
    export_to_csv,
    export_to_json,
    flatten_monthly_for_export,
    flatten_recommendations_for_export,
)


def test_export_to_csv(tmp_path) -> None:
    path = export_to_csv([{"a": 1, "b": 2}, {"a": 3, "b": 4}], tmp_path / "out" / "x.csv")
    with path.open(encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert rows == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]


def test_export_to_csv_fieldnames(tmp_path) -> None:
    path = export_to_csv([{"a": 1, "b": 2}], tmp_path / "x.csv", fieldnames=["b"])
    assert path.read_text(encoding="utf-8").splitlines() == ["b", "2"]


def test_export_to_csv_empty(tmp_path) -> None:
    path = export_to_csv([], tmp_path / "empty.csv")
    assert path.read_text(encoding="utf-8") == ""


def test_export_to_json(tmp_path) -> None:
    path = export_to_json({"k": [1, 2]}, tmp_path / "deep" / "x.json")
    assert json.loads(path.read_text(encoding="utf-8")) == {"k": [1, 2]}


def test_analysis_to_dict(sample_report, sample_investment, sample_points) -> None:
    recs = recommend(sample_report, sample_investment, sample_points)
    payload = analysis_to_dict(sample_report, recs)
    assert payload["report"]["roi_percentage"] == 10.0
    assert payload["report"]["payback_status"] == "reached"
    assert payload["report"]["monthly_roi"][0]["month"] == "Jan 2024"
    assert len(payload["recommendations"]) == len(recs)
    json.dumps(payload)


def test_flatten_monthly(sample_report) -> None:
    rows = flatten_monthly_for_export([sample_report])
    assert len(rows) == 3
    assert rows[1] == {
        "investment_id": "inv-1",
        "month": "Feb 2024",
        "revenue": 4000.0,
        "cost": 3333.33,
        "roi": 20.0,
    }


def test_flatten_recommendations(sample_report, sample_investment, sample_points) -> None:
    recs = recommend(sample_report, sample_investment, sample_points)
    rows = flatten_recommendations_for_export("inv-1", recs)
    assert [r["rank"] for r in rows] == list(range(1, len(recs) + 1))
    assert rows[0]["title"] == "Low Conversion Rate: Optimize Sales Funnel"
    assert rows[0]["priority"] == "high"
    assert rows[0]["action_items"].count(" | ") == len(recs[0].action_items) - 1
