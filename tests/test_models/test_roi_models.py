"""
Tests for roi_optimizer/models/ and roi_optimizer/taxonomy.py.

What we test
------------
Investment:
  - Valid construction; strips id / tool_name.
  - Rejects negative, NaN and infinite cost; blank id.
  - Frozen (immutable).
SalesDataPoint:
  - Defaults; conversion_rate bounded to [0, 100]; negative figures rejected.
  - Requires investment_id.
Recommendation:
  - Fresh UUID per instance; empty title rejected; negative impact rejected.
ROIReport:
  - has_monthly_data reflects the series.
Priority.rank ordering.
"""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from roi_optimizer.models.investment import Investment, SalesDataPoint
from roi_optimizer.models.recommendation import Recommendation
from roi_optimizer.models.report import MonthlyPoint, ROIReport
from roi_optimizer.taxonomy import (
    ImplementationEffort,
    InvestmentCategory,
    InvestmentStatus,
    PaybackStatus,
    Priority,
    RecommendationCategory,
)


# ── Investment ────────────────────────────────────────────────────────────────

class TestInvestment:
    def test_valid(self):
        inv = Investment(
            id="  inv-1 ",
            tool_name=" HubSpot ",
            cost=500.0,
            implementation_date="2024-01-15",
            category="crm",
        )
        assert inv.id == "inv-1"
        assert inv.tool_name == "HubSpot"
        assert inv.implementation_date == date(2024, 1, 15)
        assert inv.category == InvestmentCategory.CRM
        assert inv.status == InvestmentStatus.ACTIVE
        assert inv.expected_benefits is None

    @pytest.mark.parametrize("cost", [-1.0, float("nan"), float("inf")])
    def test_invalid_cost(self, cost):
        with pytest.raises(ValidationError):
            Investment(id="x", tool_name="t", cost=cost, implementation_date=date(2024, 1, 1))

    def test_blank_id(self):
        with pytest.raises(ValidationError):
            Investment(id="  ", tool_name="t", cost=1.0, implementation_date=date(2024, 1, 1))

    def test_unknown_category(self):
        with pytest.raises(ValidationError):
            Investment(
                id="x", tool_name="t", cost=1.0,
                implementation_date=date(2024, 1, 1), category="fax",
            )

    def test_frozen(self, sample_investment):
        with pytest.raises(ValidationError):
            sample_investment.cost = 1.0


# ── SalesDataPoint ────────────────────────────────────────────────────────────

class TestSalesDataPoint:
    def test_defaults(self):
        p = SalesDataPoint(id="s", investment_id="inv", date=date(2024, 1, 1))
        assert (p.revenue, p.deals_closed, p.time_saved, p.conversion_rate) == (0.0, 0, 0.0, 0.0)

    @pytest.mark.parametrize("rate", [0.0, 100.0])
    def test_conversion_bounds_inclusive(self, rate):
        p = SalesDataPoint(id="s", investment_id="inv", date=date(2024, 1, 1), conversion_rate=rate)
        assert p.conversion_rate == rate

    @pytest.mark.parametrize(
        "field,value",
        [
            ("conversion_rate", 100.5),
            ("conversion_rate", -1.0),
            ("revenue", -0.01),
            ("deals_closed", -1),
            ("time_saved", float("nan")),
        ],
    )
    def test_rejects_invalid_figures(self, field, value):
        with pytest.raises(ValidationError):
            SalesDataPoint(id="s", investment_id="inv", date=date(2024, 1, 1), **{field: value})

    def test_requires_investment_id(self):
        with pytest.raises(ValidationError):
            SalesDataPoint(id="s", investment_id="", date=date(2024, 1, 1))


# ── Recommendation ────────────────────────────────────────────────────────────

def _rec(**overrides) -> Recommendation:
    fields = dict(
        title="Title",
        description="Description",
        priority=Priority.HIGH,
        category=RecommendationCategory.EFFICIENCY,
        potential_impact="Impact",
        action_items=["do it"],
        estimated_roi_increase=10.0,
        implementation_effort=ImplementationEffort.LOW,
    )
    fields.update(overrides)
    return Recommendation(**fields)


class TestRecommendation:
    def test_unique_ids(self):
        assert _rec().id != _rec().id

    def test_empty_title(self):
        with pytest.raises(ValidationError):
            _rec(title="   ")

    def test_negative_impact(self):
        with pytest.raises(ValidationError):
            _rec(estimated_roi_increase=-1.0)

    def test_json_dump_uses_enum_values(self):
        dumped = _rec().model_dump(mode="json")
        assert dumped["priority"] == "high"
        assert dumped["category"] == "efficiency"


# ── ROIReport / taxonomy ──────────────────────────────────────────────────────

def test_report_has_monthly_data() -> None:
    empty = ROIReport(
        investment_id="i", total_investment=0, total_revenue=0, net_profit=0, roi_percentage=0
    )
    assert not empty.has_monthly_data
    assert empty.payback_status == PaybackStatus.NOT_REACHED
    full = empty.model_copy(
        update={"monthly_roi": [MonthlyPoint(month="Jan 2024", roi=0, revenue=0, cost=0)]}
    )
    assert full.has_monthly_data


def test_priority_rank() -> None:
    assert Priority.HIGH.rank > Priority.MEDIUM.rank > Priority.LOW.rank
