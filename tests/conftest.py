"""
Shared pytest fixtures for the ROI optimizer test suite.

Provides:
  - ``sample_investment``: the 10 000 / 2024-01-01 reference investment (category "other").
  - ``sample_points``: two sales points that pay it back in month 2.
  - ``sample_report``: the report computed from the two fixtures above.
  - ``fixed_now``: a fixed UTC timestamp for deterministic generation.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from roi_optimizer.analysis.calculator import compute_report
from roi_optimizer.models.investment import Investment, SalesDataPoint
from roi_optimizer.models.report import ROIReport
from roi_optimizer.taxonomy import InvestmentCategory, InvestmentStatus


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_investment() -> Investment:
    """A valid ``Investment`` costing 10 000, live since 2024-01-01."""
    return Investment(
        id="inv-1",
        tool_name="Pipeline CRM",
        cost=10_000.0,
        implementation_date=date(2024, 1, 1),
        category=InvestmentCategory.OTHER,
        status=InvestmentStatus.ACTIVE,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def sample_points() -> list[SalesDataPoint]:
    """Revenue 4000 in Feb and 7000 in Mar 2024; low conversion and deal volume."""
    return [
        SalesDataPoint(
            id="s-1",
            investment_id="inv-1",
            date=date(2024, 2, 1),
            revenue=4_000.0,
            deals_closed=5,
            time_saved=10.0,
            conversion_rate=10.0,
        ),
        SalesDataPoint(
            id="s-2",
            investment_id="inv-1",
            date=date(2024, 3, 1),
            revenue=7_000.0,
            deals_closed=5,
            time_saved=10.0,
            conversion_rate=10.0,
        ),
    ]


@pytest.fixture
def sample_report(sample_investment, sample_points, fixed_now) -> ROIReport:
    return compute_report(sample_investment, sample_points, generated_at=fixed_now)
