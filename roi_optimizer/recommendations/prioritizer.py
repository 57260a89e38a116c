"""
Deterministic ordering of recommendations.

Sort keys
---------
1. priority descending (high > medium > low)
2. estimated_roi_increase descending

Python's sort is stable, so anything still tied keeps the order the rule
battery produced it in. The same input list always yields the same output.
"""

from __future__ import annotations

from typing import Iterable

from roi_optimizer.models.recommendation import Recommendation


def prioritize(recommendations: Iterable[Recommendation]) -> list[Recommendation]:
    """Return a new list ordered by priority, then estimated ROI increase.

    Args:
        recommendations: Recommendations in rule-evaluation order.

    Returns:
        Sorted copy; the input is not modified.
    """
    return sorted(
        recommendations,
        key=lambda r: (-r.priority.rank, -r.estimated_roi_increase),
    )


def count_by_priority(recommendations: Iterable[Recommendation]) -> dict[str, int]:
    """Count recommendations per priority level (all levels present, zero-filled)."""
    counts = {"high": 0, "medium": 0, "low": 0}
    for rec in recommendations:
        counts[rec.priority.value] += 1
    return counts
