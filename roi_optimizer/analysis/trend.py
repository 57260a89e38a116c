"""
Recent-vs-older window trend signals.

Given a chronologically sorted series of n values and a window size k
(default 3):

    recent_avg = mean(values[-k:])
    older_avg  = mean(values[:min(k, n - k)])   when n > k
               = recent_avg                     otherwise
    growth     = (recent_avg - older_avg) / older_avg   when older_avg > 0
               = 0.0                                    otherwise

The older window never overlaps the recent one: with fewer than 2k values
it shrinks to the n - k values before the recent window. A series of k
values or fewer has nothing to compare against and is flat (growth 0).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from roi_optimizer.models.investment import SalesDataPoint

DEFAULT_WINDOW = 3


@dataclass(frozen=True)
class TrendSignal:
    """Recent vs. older window averages for one metric series.

    Attributes:
        recent_avg:   Mean of the last ``window`` values.
        older_avg:    Mean of up to ``window`` values preceding the recent
                      window (``recent_avg`` when there are none).
        growth_ratio: ``(recent - older) / older``; 0 when ``older <= 0``.
        sample_size:  Length of the input series.
    """

    recent_avg: float
    older_avg: float
    growth_ratio: float
    sample_size: int

    def is_growing(self, threshold: float) -> bool:
        """True when growth exceeds ``threshold``."""
        return self.growth_ratio > threshold

    def is_declining(self, ratio: float) -> bool:
        """True when the recent average is below ``ratio`` times the older one."""
        return self.recent_avg < self.older_avg * ratio


def compute_trend(values: Sequence[float], window: int = DEFAULT_WINDOW) -> TrendSignal:
    """Compare the most recent ``window`` values with the earliest ones.

    Args:
        values: Chronologically sorted metric values (revenue, conversion
                rate, deal count, ...).
        window: Window size k; must be >= 1.

    Returns:
        TrendSignal. An empty series yields all-zero averages and growth.

    Raises:
        ValueError: If ``window < 1``.
    """
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}.")

    n = len(values)
    if n == 0:
        return TrendSignal(recent_avg=0.0, older_avg=0.0, growth_ratio=0.0, sample_size=0)

    recent = values[-window:]
    recent_avg = sum(recent) / len(recent)

    if n > window:
        older = values[:min(window, n - window)]
        older_avg = sum(older) / len(older)
    else:
        older_avg = recent_avg

    growth = (recent_avg - older_avg) / older_avg if older_avg > 0 else 0.0

    return TrendSignal(
        recent_avg=recent_avg,
        older_avg=older_avg,
        growth_ratio=growth,
        sample_size=n,
    )


def chronological(points: Iterable[SalesDataPoint]) -> list[SalesDataPoint]:
    """Return ``points`` sorted by date; equal dates keep their input order."""
    return sorted(points, key=lambda p: p.date)
