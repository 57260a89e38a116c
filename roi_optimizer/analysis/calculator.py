"""
ROI calculation: turns one investment and its sales records into an ROIReport.

Report fields
-------------
total_investment = investment.cost
total_revenue    = Σ revenue over sales points whose investment_id matches
net_profit       = total_revenue − total_investment
roi_percentage   = net_profit / total_investment × 100     (0 when cost is 0)

Payback period
--------------
Walk the matching points in ascending date order, accumulating revenue.
The first point at which cumulative revenue >= cost fixes the payback date;
the period is the number of whole months from ``implementation_date`` to
that date (never negative). If revenue never catches up the period is 0
and ``payback_status`` is ``not_reached``; a zero-cost investment reports
``no_cost``.

Monthly series
--------------
Buckets come from ``bucket_by_month()``. The cost is amortized straight-line:
``cost / number_of_months``. Monthly ROI = (revenue − amortized) / amortized
× 100, 0 when the amortized cost is 0.

Rounding
--------
Sums are accumulated unrounded with ``math.fsum`` and rounded to 2 decimals
exactly once when the report is assembled.

All functions are pure: no I/O, no shared state.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Sequence

from roi_optimizer.analysis.bucketing import bucket_by_month
from roi_optimizer.analysis.trend import chronological
from roi_optimizer.errors import InvalidInputError
from roi_optimizer.models.investment import Investment, SalesDataPoint
from roi_optimizer.models.report import MonthlyPoint, ROIReport
from roi_optimizer.taxonomy import PaybackStatus
from roi_optimizer.utils.time_utils import utcnow, whole_months_between

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SalesSummary:
    """Aggregate sales metrics over a set of sales points.

    Attributes:
        record_count:             Number of sales points.
        total_revenue:            Σ revenue.
        total_deals_closed:       Σ deals_closed.
        total_time_saved:         Σ time_saved (hours).
        average_conversion_rate:  Mean conversion rate (0–100); 0 when empty.
        average_revenue_per_deal: total_revenue / total_deals; 0 when no deals.
    """

    record_count: int
    total_revenue: float
    total_deals_closed: int
    total_time_saved: float
    average_conversion_rate: float
    average_revenue_per_deal: float


def compute_report(
    investment: Investment,
    sales_points: Iterable[SalesDataPoint],
    generated_at: Optional[datetime] = None,
) -> ROIReport:
    """Compute the full ROI report for one investment.

    Sales points belonging to other investments are dropped silently.

    Args:
        investment:   The investment to evaluate.
        sales_points: Sales points; may contain other investments' records.
        generated_at: Timestamp to stamp on the report. Defaults to now (UTC).

    Returns:
        A well-formed ``ROIReport``; ``monthly_roi`` is empty when there are
        no matching points.

    Raises:
        InvalidInputError: If cost or any sales figure is negative or non-finite.
    """
    _check_investment(investment)
    points = chronological(p for p in sales_points if p.investment_id == investment.id)
    for point in points:
        _check_sales_point(point)

    cost = investment.cost
    total_revenue = math.fsum(p.revenue for p in points)
    net_profit = total_revenue - cost
    roi_percentage = net_profit / cost * 100.0 if cost > 0 else 0.0

    payback_period, payback_status = compute_payback(investment, points)
    monthly = compute_monthly_roi(investment, points)

    report = ROIReport(
        investment_id=investment.id,
        total_investment=round(cost, 2),
        total_revenue=round(total_revenue, 2),
        net_profit=round(net_profit, 2),
        roi_percentage=round(roi_percentage, 2),
        payback_period=payback_period,
        payback_status=payback_status,
        monthly_roi=monthly,
        generated_at=generated_at or utcnow(),
    )
    logger.debug(
        "ROI report for %s: revenue=%.2f roi=%.2f%% payback=%d (%s) months=%d",
        investment.id,
        report.total_revenue,
        report.roi_percentage,
        report.payback_period,
        report.payback_status,
        len(monthly),
        extra={"investment_id": investment.id},
    )
    return report


def compute_payback(
    investment: Investment,
    sales_points: Sequence[SalesDataPoint],
) -> tuple[int, PaybackStatus]:
    """Return ``(whole_months, status)`` for the cumulative-revenue payback walk.

    Args:
        investment:   Investment whose cost must be recovered.
        sales_points: Matching points; sorted by date inside this function.

    Returns:
        ``(n, REACHED)`` when cumulative revenue met the cost at a point dated
        n whole months after implementation; ``(0, NOT_REACHED)`` when it never
        did; ``(0, NO_COST)`` for zero-cost investments.
    """
    cost = investment.cost
    if cost <= 0:
        return 0, PaybackStatus.NO_COST

    cumulative = 0.0
    for point in chronological(sales_points):
        cumulative += point.revenue
        if cumulative >= cost:
            months = whole_months_between(investment.implementation_date, point.date)
            return max(0, months), PaybackStatus.REACHED

    return 0, PaybackStatus.NOT_REACHED


def compute_monthly_roi(
    investment: Investment,
    sales_points: Sequence[SalesDataPoint],
) -> list[MonthlyPoint]:
    """Build the amortized monthly ROI series.

    Args:
        investment:   Investment providing cost and the start month.
        sales_points: Matching points.

    Returns:
        One ``MonthlyPoint`` per month from the implementation month through
        the latest sales month; ``[]`` when there are no points.
    """
    buckets = bucket_by_month(investment.implementation_date, sales_points)
    if not buckets:
        return []

    amortized = investment.cost / len(buckets)

    series: list[MonthlyPoint] = []
    for bucket in buckets:
        revenue = bucket.revenue
        roi = (revenue - amortized) / amortized * 100.0 if amortized > 0 else 0.0
        series.append(
            MonthlyPoint(
                month=bucket.label,
                roi=round(roi, 2),
                revenue=round(revenue, 2),
                cost=round(amortized, 2),
            )
        )
    return series


def analyze(
    investments: Iterable[Investment],
    sales_points: Iterable[SalesDataPoint],
) -> list[ROIReport]:
    """Compute one report per investment that has at least one sales point.

    Investments with no matching sales points are skipped (not an error) and
    left out of the result. Output order follows the input order.

    Args:
        investments:  Investments to analyse.
        sales_points: Shared pool of sales points for all investments.

    Returns:
        List of ``ROIReport``; empty when nothing has data.
    """
    pool = list(sales_points)
    by_investment: dict[str, list[SalesDataPoint]] = {}
    for point in pool:
        by_investment.setdefault(point.investment_id, []).append(point)

    reports: list[ROIReport] = []
    skipped = 0
    for investment in investments:
        related = by_investment.get(investment.id)
        if not related:
            skipped += 1
            continue
        reports.append(compute_report(investment, related))

    logger.info(
        "Analyzed %d investment(s); %d skipped with no sales data.",
        len(reports),
        skipped,
    )
    return reports


def summarize_sales(sales_points: Iterable[SalesDataPoint]) -> SalesSummary:
    """Aggregate conversion, time-saved, deal and revenue totals.

    Args:
        sales_points: Points to aggregate (not filtered by investment).

    Returns:
        SalesSummary; every average is 0 when its denominator is 0.
    """
    points = list(sales_points)
    n = len(points)
    total_revenue = math.fsum(p.revenue for p in points)
    total_deals = sum(p.deals_closed for p in points)

    return SalesSummary(
        record_count=n,
        total_revenue=round(total_revenue, 2),
        total_deals_closed=total_deals,
        total_time_saved=round(math.fsum(p.time_saved for p in points), 2),
        average_conversion_rate=(
            round(math.fsum(p.conversion_rate for p in points) / n, 2) if n else 0.0
        ),
        average_revenue_per_deal=(
            round(total_revenue / total_deals, 2) if total_deals else 0.0
        ),
    )


# ── Input guards ──────────────────────────────────────────────────────────────

def _check_investment(investment: Investment) -> None:
    if not math.isfinite(investment.cost) or investment.cost < 0:
        raise InvalidInputError(
            f"Investment {investment.id!r} has invalid cost {investment.cost!r}; "
            "expected a finite non-negative number."
        )


def _check_sales_point(point: SalesDataPoint) -> None:
    for name in ("revenue", "time_saved", "conversion_rate"):
        value = getattr(point, name)
        if not math.isfinite(value) or value < 0:
            raise InvalidInputError(
                f"Sales point {point.id!r} has invalid {name} {value!r}; "
                "expected a finite non-negative number."
            )
    if point.deals_closed < 0:
        raise InvalidInputError(
            f"Sales point {point.id!r} has negative deals_closed {point.deals_closed}."
        )
