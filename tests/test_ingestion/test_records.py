"""
Tests for roi_optimizer/ingestion/records.py.

What we test
------------
to_snake_case() / normalize_keys(): camelCase → snake_case, idempotent.
parse_investments() / parse_sales_points():
  - camelCase and snake_case records both validate.
  - conversion_scale="fraction" multiplies by 100; "percent" leaves as-is.
  - Unknown scale raises InvalidInputError.
  - Any invalid record raises one InvalidInputError naming the row.
load_dataset():
  - Missing file → FileNotFoundError.
  - Malformed JSON / wrong top-level shape → InvalidInputError.
  - Accepts "sales_data" and "salesData".
  - Orphan sales records log a warning but load.
"""

from __future__ import annotations

import json
import logging
from datetime import date

import pytest

from roi_optimizer.errors import InvalidInputError
from roi_optimizer.ingestion.records import (
    load_dataset,
    normalize_keys,
    parse_investments,
    parse_sales_points,
    to_snake_case,
)
from roi_optimizer.taxonomy import InvestmentCategory

_INVESTMENT = {
    "id": "inv-1",
    "toolName": "Pipeline CRM",
    "cost": 10000,
    "implementationDate": "2024-01-01",
    "category": "crm",
    "status": "active",
    "createdAt": "2024-01-01T09:00:00Z",
}

_SALE = {
    "id": "s-1",
    "investmentId": "inv-1",
    "date": "2024-02-01",
    "revenue": 4000,
    "dealsClosed": 5,
    "timeSaved": 12.5,
    "conversionRate": 18,
}


# ── Key normalisation ─────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "key,expected",
    [
        ("implementationDate", "implementation_date"),
        ("toolName", "tool_name"),
        ("tool_name", "tool_name"),
        ("id", "id"),
    ],
)
def test_to_snake_case(key, expected) -> None:
    assert to_snake_case(key) == expected


def test_normalize_keys() -> None:
    assert normalize_keys({"dealsClosed": 3, "revenue": 1}) == {"deals_closed": 3, "revenue": 1}


# ── Record parsing ────────────────────────────────────────────────────────────

class TestParseRecords:
    def test_camel_case_investment(self):
        [inv] = parse_investments([_INVESTMENT])
        assert inv.tool_name == "Pipeline CRM"
        assert inv.implementation_date == date(2024, 1, 1)
        assert inv.category == InvestmentCategory.CRM

    def test_percent_scale_unchanged(self):
        [point] = parse_sales_points([_SALE])
        assert point.conversion_rate == 18.0
        assert point.deals_closed == 5

    def test_fraction_scale_converted(self):
        [point] = parse_sales_points([{**_SALE, "conversionRate": 0.12}], "fraction")
        assert point.conversion_rate == pytest.approx(12.0)

    def test_percent_value_rejected_under_fraction_scale(self):
        with pytest.raises(InvalidInputError):
            parse_sales_points([{**_SALE, "conversionRate": 18}], "fraction")

    def test_unknown_scale(self):
        with pytest.raises(InvalidInputError, match="conversion_scale"):
            parse_sales_points([_SALE], "ratio")

    def test_reports_failing_row(self):
        bad = {**_SALE, "revenue": -10}
        with pytest.raises(InvalidInputError, match=r"sales\[1\]"):
            parse_sales_points([_SALE, bad])

    def test_non_object_record(self):
        with pytest.raises(InvalidInputError, match="not a JSON object"):
            parse_investments(["nope"])

    def test_error_list_is_truncated(self):
        bad = [{**_SALE, "revenue": -1}] * 12
        with pytest.raises(InvalidInputError, match="and 2 more"):
            parse_sales_points(bad)


# ── load_dataset ──────────────────────────────────────────────────────────────

class TestLoadDataset:
    def _write(self, tmp_path, payload) -> object:
        path = tmp_path / "data.json"
        path.write_text(
            payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8"
        )
        return path

    def test_loads_snake_key(self, tmp_path):
        path = self._write(tmp_path, {"investments": [_INVESTMENT], "sales_data": [_SALE]})
        dataset = load_dataset(path)
        assert len(dataset.investments) == 1
        assert len(dataset.sales_points) == 1

    def test_loads_camel_key(self, tmp_path):
        path = self._write(tmp_path, {"investments": [_INVESTMENT], "salesData": [_SALE]})
        assert len(load_dataset(path).sales_points) == 1

    def test_missing_sections_default_empty(self, tmp_path):
        dataset = load_dataset(self._write(tmp_path, {}))
        assert dataset.investments == []
        assert dataset.sales_points == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_dataset(tmp_path / "absent.json")

    def test_malformed_json(self, tmp_path):
        with pytest.raises(InvalidInputError, match="not valid JSON"):
            load_dataset(self._write(tmp_path, "{not json"))

    def test_top_level_must_be_object(self, tmp_path):
        with pytest.raises(InvalidInputError, match="JSON object"):
            load_dataset(self._write(tmp_path, "[]"))

    def test_sections_must_be_arrays(self, tmp_path):
        with pytest.raises(InvalidInputError, match="JSON arrays"):
            load_dataset(self._write(tmp_path, {"investments": {}}))

    def test_orphans_warn(self, tmp_path, caplog):
        orphan = {**_SALE, "investmentId": "ghost"}
        path = self._write(tmp_path, {"investments": [_INVESTMENT], "sales_data": [orphan]})
        with caplog.at_level(logging.WARNING, logger="roi_optimizer.ingestion.records"):
            dataset = load_dataset(path)
        assert len(dataset.sales_points) == 1
        assert "unknown investments" in caplog.text
