"""
ASCII terminal formatters for CLI output.

All formatters accept models and return plain multi-line strings suitable
for ``typer.echo()``. No third-party dependencies (no ``rich``, no ``colorama``).
"""

from __future__ import annotations

from roi_optimizer.analysis.calculator import SalesSummary
from roi_optimizer.history import HistoryPage, HistorySummary
from roi_optimizer.models.investment import Investment
from roi_optimizer.models.recommendation import Recommendation
from roi_optimizer.models.report import ROIReport
from roi_optimizer.taxonomy import PaybackStatus

_PRIORITY_TAG = {"high": "[HIGH]", "medium": "[MED] ", "low": "[LOW] "}


def format_payback(report: ROIReport) -> str:
    """``"2 months"``, ``"not yet reached"`` or ``"n/a (no cost)"``."""
    if report.payback_status == PaybackStatus.REACHED:
        unit = "month" if report.payback_period == 1 else "months"
        return f"{report.payback_period} {unit}"
    if report.payback_status == PaybackStatus.NO_COST:
        return "n/a (no cost)"
    return "not yet reached"


def format_report(report: ROIReport, investment: Investment | None = None) -> str:
    """Summary block plus the monthly series as an ASCII table::

        Month        Revenue        Cost       ROI
        ------------------------------------------
        Jan 2024        0.00     3333.33   -100.0%
    """
    name = f"{investment.tool_name} ({report.investment_id})" if investment else report.investment_id
    lines = [
        f"ROI report: {name}",
        f"  Total investment: {report.total_investment:>12.2f}",
        f"  Total revenue:    {report.total_revenue:>12.2f}",
        f"  Net profit:       {report.net_profit:>12.2f}",
        f"  ROI:              {report.roi_percentage:>11.2f}%",
        f"  Payback period:   {format_payback(report)}",
    ]

    if not report.has_monthly_data:
        lines.append("  (insufficient data for a monthly series)")
        return "\n".join(lines)

    header = f"  {'Month':<10} {'Revenue':>12} {'Cost':>12} {'ROI':>9}"
    lines += ["", header, "  " + "-" * (len(header) - 2)]
    for point in report.monthly_roi:
        lines.append(
            f"  {point.month:<10} {point.revenue:>12.2f} {point.cost:>12.2f} {point.roi:>8.1f}%"
        )
    return "\n".join(lines)


def format_sales_summary(summary: SalesSummary) -> str:
    """One-line sales aggregate for the report block."""
    return (
        f"  Sales records: {summary.record_count}, "
        f"deals: {summary.total_deals_closed}, "
        f"avg conversion: {summary.average_conversion_rate:.1f}%, "
        f"time saved: {summary.total_time_saved:.1f}h, "
        f"revenue/deal: {summary.average_revenue_per_deal:.2f}"
    )


def format_recommendations(recommendations: list[Recommendation]) -> str:
    """Numbered list of recommendations with priority tags and action items."""
    if not recommendations:
        return "  No recommendations; all metrics are within target ranges."

    lines: list[str] = []
    for i, rec in enumerate(recommendations, start=1):
        tag = _PRIORITY_TAG.get(rec.priority.value, "")
        lines.append(
            f"  {i:>2}. {tag} {rec.title}  "
            f"(+{rec.estimated_roi_increase:.0f} pts, {rec.implementation_effort.value} effort)"
        )
        lines.append(f"      {rec.description}")
        for item in rec.action_items:
            lines.append(f"        - {item}")
    return "\n".join(lines)


def format_history(page: HistoryPage, summary: HistorySummary) -> str:
    """Summary header followed by one line per snapshot (newest first)."""
    lines = [
        f"Analyses retained:      {summary.total_analyses}",
        f"Average ROI:            {summary.average_roi_percentage:.2f}%",
        f"Average payback:        {summary.average_payback_period:.2f} months",
        f"Total revenue:          {summary.total_revenue:.2f}",
        f"Total net profit:       {summary.total_net_profit:.2f}",
        f"High-priority recs:     {summary.high_priority_recommendations}",
        "",
    ]
    if not page.items:
        lines.append("  (no analyses recorded)")
        return "\n".join(lines)

    for snap in page.items:
        lines.append(
            f"  {snap.created_at:%Y-%m-%d %H:%M}  {snap.investment_id:<20} "
            f"ROI {snap.report.roi_percentage:>8.2f}%  "
            f"recs {len(snap.recommendations):>2} ({snap.high_priority_count} high)"
        )
    if page.has_more:
        lines.append(f"  … {page.total - page.offset - len(page.items)} more (use --offset)")
    return "\n".join(lines)
