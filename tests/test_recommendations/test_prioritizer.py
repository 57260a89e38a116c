"""Tests for roi_optimizer.recommendations.prioritizer."""

from __future__ import annotations

from roi_optimizer.models.recommendation import Recommendation
from roi_optimizer.recommendations.prioritizer import count_by_priority, prioritize
from roi_optimizer.taxonomy import ImplementationEffort, Priority, RecommendationCategory


def _rec(title: str, priority: Priority, impact: float) -> Recommendation:
    return Recommendation(
        title=title,
        description="d",
        priority=priority,
        category=RecommendationCategory.EFFICIENCY,
        potential_impact="p",
        estimated_roi_increase=impact,
        implementation_effort=ImplementationEffort.LOW,
    )


def test_priority_dominates_impact() -> None:
    recs = [
        _rec("low-big", Priority.LOW, 90.0),
        _rec("high-small", Priority.HIGH, 1.0),
        _rec("med", Priority.MEDIUM, 50.0),
    ]
    assert [r.title for r in prioritize(recs)] == ["high-small", "med", "low-big"]


def test_impact_breaks_priority_ties() -> None:
    recs = [_rec("a", Priority.HIGH, 10.0), _rec("b", Priority.HIGH, 30.0)]
    assert [r.title for r in prioritize(recs)] == ["b", "a"]


def test_full_ties_keep_input_order() -> None:
    recs = [_rec("first", Priority.MEDIUM, 20.0), _rec("second", Priority.MEDIUM, 20.0)]
    assert [r.title for r in prioritize(recs)] == ["first", "second"]


def test_does_not_mutate_input() -> None:
    recs = [_rec("a", Priority.LOW, 1.0), _rec("b", Priority.HIGH, 1.0)]
    prioritize(recs)
    assert [r.title for r in recs] == ["a", "b"]


def test_empty() -> None:
    assert prioritize([]) == []


def test_count_by_priority_zero_filled() -> None:
    recs = [_rec("a", Priority.HIGH, 1.0), _rec("b", Priority.HIGH, 2.0)]
    assert count_by_priority(recs) == {"high": 2, "medium": 0, "low": 0}
