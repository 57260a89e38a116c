"""
Tests for roi_optimizer/analysis/bucketing.py.

What we test
------------
bucket_by_month():
  - Empty input → [].
  - Contiguous months from the start month through the latest point's month,
    including months with no points.
  - Year boundaries are crossed correctly.
  - Points inside a bucket stay in date order; revenue sums per month.
  - Latest point before the start month → single start-month bucket.
"""

from __future__ import annotations

from datetime import date

from roi_optimizer.analysis.bucketing import MonthBucket, bucket_by_month
from roi_optimizer.models.investment import SalesDataPoint


def _pt(d: date, revenue: float = 100.0) -> SalesDataPoint:
    return SalesDataPoint(id=d.isoformat(), investment_id="inv", date=d, revenue=revenue)


def test_empty_points() -> None:
    assert bucket_by_month(date(2024, 1, 1), []) == []


def test_contiguous_months_with_gap() -> None:
    buckets = bucket_by_month(
        date(2024, 1, 10),
        [_pt(date(2024, 3, 5)), _pt(date(2024, 1, 20))],
    )
    assert [b.month for b in buckets] == [date(2024, 1, 1), date(2024, 2, 1), date(2024, 3, 1)]
    assert [len(b.points) for b in buckets] == [1, 0, 1]


def test_crosses_year_boundary() -> None:
    buckets = bucket_by_month(date(2023, 12, 31), [_pt(date(2024, 2, 1))])
    assert [b.label for b in buckets] == ["Dec 2023", "Jan 2024", "Feb 2024"]


def test_points_sorted_and_revenue_summed() -> None:
    buckets = bucket_by_month(
        date(2024, 1, 1),
        [_pt(date(2024, 1, 25), 50.0), _pt(date(2024, 1, 3), 25.5)],
    )
    assert len(buckets) == 1
    assert [p.date.day for p in buckets[0].points] == [3, 25]
    assert buckets[0].revenue == 75.5


def test_latest_before_start_yields_single_bucket() -> None:
    buckets = bucket_by_month(date(2024, 5, 1), [_pt(date(2024, 2, 1))])
    assert len(buckets) == 1
    assert buckets[0].month == date(2024, 5, 1)
    assert buckets[0].points == ()


def test_empty_bucket_revenue_is_zero() -> None:
    assert MonthBucket(month=date(2024, 1, 1)).revenue == 0.0
