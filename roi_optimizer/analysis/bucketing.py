"""
Calendar-month bucketing of sales records.

The monthly ROI series spans from the investment's implementation month to
the month of the chronologically last sales record, inclusive. Months with
no sales still get a bucket (with no points) so the amortized cost is spread
over every elapsed month, not just the active ones.

Edge cases
----------
- No points → ``[]``. Callers treat an empty series as "insufficient data".
- Latest point earlier than the start month → a single bucket for the start
  month, so the series is never empty once any data exists.
- Points dated before the start month fall outside every bucket.
"""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from roi_optimizer.models.investment import SalesDataPoint
from roi_optimizer.utils.time_utils import month_label, month_range, month_start


@dataclass(frozen=True)
class MonthBucket:
    """Sales points dated within one calendar month.

    Attributes:
        month:  First day of the month.
        points: Points in this month, in ascending date order.
    """

    month: date
    points: tuple[SalesDataPoint, ...] = field(default_factory=tuple)

    @property
    def label(self) -> str:
        return month_label(self.month)

    @property
    def revenue(self) -> float:
        return math.fsum(p.revenue for p in self.points)


def bucket_by_month(
    start: date,
    points: Iterable[SalesDataPoint],
) -> list[MonthBucket]:
    """Partition ``points`` into consecutive calendar-month buckets.

    Args:
        start:  Any date in the first month of the series (implementation date).
        points: Sales points; order does not matter.

    Returns:
        One ``MonthBucket`` per month from ``start``'s month through the latest
        point's month (inclusive), or ``[]`` when ``points`` is empty.
    """
    ordered = sorted(points, key=lambda p: p.date)
    if not ordered:
        return []

    first = month_start(start)
    last = max(first, month_start(ordered[-1].date))

    by_month: dict[date, list[SalesDataPoint]] = defaultdict(list)
    for point in ordered:
        by_month[month_start(point.date)].append(point)

    return [
        MonthBucket(month=m, points=tuple(by_month.get(m, ())))
        for m in month_range(first, last)
    ]
