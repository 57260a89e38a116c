"""
Calendar-month helpers for the ROI time series.

Key concepts:
  - Month anchors: every month is represented by its first day
    (``date(2024, 3, 1)`` stands for March 2024).
  - Whole-month differences: payback is counted in complete months, so
    Jan 15 → Mar 14 is 1 month and Jan 15 → Mar 15 is 2.
  - Month labels: ``"Mar 2024"`` is the display label used in reports.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timezone

_MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def month_start(d: date) -> date:
    """Return the first day of ``d``'s calendar month."""
    return date(d.year, d.month, 1)


def add_months(d: date, months: int) -> date:
    """Return the month anchor ``months`` calendar months after ``d``'s month.

    Args:
        d: Any date; only its year and month are used.
        months: Number of months to add (may be negative).

    Returns:
        First day of the resulting month.
    """
    index = d.year * 12 + (d.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def month_range(start: date, end: date) -> list[date]:
    """Generate month anchors from ``start``'s month to ``end``'s month (inclusive).

    Args:
        start: Date inside the first month.
        end: Date inside the last month.

    Returns:
        List of first-of-month dates. Empty if ``end`` falls in an earlier
        month than ``start``.
    """
    first = month_start(start)
    last = month_start(end)
    result: list[date] = []
    current = first
    while current <= last:
        result.append(current)
        current = add_months(current, 1)
    return result


def _is_month_end(d: date) -> bool:
    return d.day == calendar.monthrange(d.year, d.month)[1]


def whole_months_between(start: date, end: date) -> int:
    """Return the number of complete calendar months from ``start`` to ``end``.

    A month counts once the day-of-month of ``start`` has been reached again,
    or once the last day of a shorter month is reached (Jan 31 → Feb 29 is one
    month, Jan 31 → Apr 30 is three). Negative when ``end`` is before
    ``start``; the partial month is truncated toward zero in both directions.

    Args:
        start: Earlier date (e.g. implementation date).
        end: Later date (e.g. the payback sales record date).

    Returns:
        Signed whole-month count.
    """
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if months > 0 and end.day < start.day and not _is_month_end(end):
        months -= 1
    elif months < 0 and end.day > start.day and not _is_month_end(start):
        months += 1
    return months


def month_label(d: date) -> str:
    """Format a month anchor as ``"Jan 2024"`` (locale-independent)."""
    return f"{_MONTH_ABBR[d.month - 1]} {d.year}"


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)
