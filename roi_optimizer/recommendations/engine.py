"""
Recommendation engine entry points.

``generate()`` evaluates every rule in ``RULES`` against one immutable
``RuleContext`` and concatenates their output in battery order.
``recommend()`` is the public operation: ``prioritize(generate(...))``.

A fresh context is built per call, so concurrent calls for different
investments share nothing.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from roi_optimizer.analysis.trend import DEFAULT_WINDOW, chronological
from roi_optimizer.config import RecommendationThresholds
from roi_optimizer.models.investment import Investment, SalesDataPoint
from roi_optimizer.models.recommendation import Recommendation
from roi_optimizer.models.report import ROIReport
from roi_optimizer.recommendations.prioritizer import prioritize
from roi_optimizer.recommendations.rules import RULES, Rule, RuleContext
from roi_optimizer.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


def build_context(
    report: ROIReport,
    investment: Investment,
    sales_points: Iterable[SalesDataPoint],
    thresholds: Optional[RecommendationThresholds] = None,
    window: int = DEFAULT_WINDOW,
    generated_at: Optional[datetime] = None,
) -> RuleContext:
    """Freeze the rule inputs: matching points only, in ascending date order."""
    points = chronological(p for p in sales_points if p.investment_id == investment.id)
    return RuleContext(
        report=report,
        investment=investment,
        points=tuple(points),
        thresholds=thresholds or RecommendationThresholds(),
        window=window,
        generated_at=generated_at or utcnow(),
    )


def generate(
    report: ROIReport,
    investment: Investment,
    sales_points: Iterable[SalesDataPoint],
    thresholds: Optional[RecommendationThresholds] = None,
    window: int = DEFAULT_WINDOW,
    rules: Iterable[Rule] = RULES,
    generated_at: Optional[datetime] = None,
) -> list[Recommendation]:
    """Run the rule battery and return recommendations in evaluation order.

    Args:
        report:       ROI report for ``investment``.
        investment:   Investment being evaluated.
        sales_points: Its sales points (others are ignored).
        thresholds:   Rule thresholds; defaults to the standard set.
        window:       Trend window size.
        rules:        Rule functions to run, in order. Defaults to ``RULES``.
        generated_at: Timestamp for every recommendation. Defaults to now.

    Returns:
        Unsorted recommendations; empty when no rule fires.
    """
    ctx = build_context(report, investment, sales_points, thresholds, window, generated_at)

    recommendations: list[Recommendation] = []
    for rule in rules:
        produced = rule(ctx)
        if produced:
            logger.debug(
                "Rule %s produced %d recommendation(s)",
                getattr(rule, "__name__", repr(rule)),
                len(produced),
                extra={"investment_id": investment.id},
            )
        recommendations.extend(produced)
    return recommendations


def recommend(
    report: ROIReport,
    investment: Investment,
    sales_points: Iterable[SalesDataPoint],
    thresholds: Optional[RecommendationThresholds] = None,
    window: int = DEFAULT_WINDOW,
) -> list[Recommendation]:
    """Generate and prioritize recommendations for one investment.

    Returns:
        Recommendations ordered by priority, then estimated ROI increase,
        then rule-evaluation order.
    """
    ranked = prioritize(generate(report, investment, sales_points, thresholds, window))
    logger.info(
        "Generated %d recommendation(s) for investment %s (%d high priority)",
        len(ranked),
        investment.id,
        sum(1 for r in ranked if r.priority == "high"),
        extra={"investment_id": investment.id},
    )
    return ranked
