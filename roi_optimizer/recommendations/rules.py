"""
Recommendation rule battery.

Every rule is a pure function ``(RuleContext) -> list[Recommendation]``.
Rules never see each other's output; they all read the same frozen
context. ``RULES`` fixes the evaluation order, which is also the final
tie-break order used by the prioritizer.

Rules (evaluation order)
------------------------
1. roi_performance
     ROI < 50%                 → HIGH   efficiency        "Low ROI Alert"
     payback > 12 months       → HIGH   revenue_increase  "Extended Payback Period"
     100% < ROI < 200%         → MEDIUM revenue_increase  "Strong ROI: Scale"
2. conversion_rate            (skips with no sales points)
     avg < 15%                 → HIGH   revenue_increase  "Low Conversion Rate"
     15% <= avg < 25%          → MEDIUM efficiency        "Good Conversion Rate"
     recent < 90% of older     → HIGH   efficiency        "Declining Conversion Trend"
3. time_savings               (skips with no sales points)
     avg hours < 20            → MEDIUM automation        "Low Time Savings"
     avg hours >= 40           → LOW    efficiency        "Reinvest Saved Time"
4. cost_efficiency
     cost / revenue > 30%      → HIGH   cost_reduction    "High Cost-to-Revenue Ratio"
     crm and ROI < 80%         → MEDIUM efficiency        "CRM Data Quality"
5. revenue_growth             (skips with fewer than 2 sales points)
     growth < 10%              → HIGH   revenue_increase  "Accelerate Sales Velocity"
     growth > 30%              → LOW    efficiency        "Maintain Momentum"
     avg deals < 10            → MEDIUM revenue_increase  "Increase Pipeline Activity"

Template text, priority, category, estimated ROI increase and effort are
fixed per branch; only the description quotes the measured value.
All thresholds come from ``RecommendationThresholds``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from roi_optimizer.analysis.trend import DEFAULT_WINDOW, compute_trend
from roi_optimizer.config import RecommendationThresholds
from roi_optimizer.models.investment import Investment, SalesDataPoint
from roi_optimizer.models.recommendation import Recommendation
from roi_optimizer.models.report import ROIReport
from roi_optimizer.taxonomy import (
    ImplementationEffort,
    InvestmentCategory,
    Priority,
    RecommendationCategory,
)
from roi_optimizer.utils.time_utils import utcnow


@dataclass(frozen=True)
class RuleContext:
    """Immutable inputs shared by every rule in one evaluation run.

    Attributes:
        report:       ROI report for the investment.
        investment:   The investment being evaluated.
        points:       Matching sales points in ascending date order.
        thresholds:   Rule trigger thresholds.
        window:       Trend window size.
        generated_at: Timestamp stamped on every recommendation of the run.
    """

    report: ROIReport
    investment: Investment
    points: tuple[SalesDataPoint, ...]
    thresholds: RecommendationThresholds = field(default_factory=RecommendationThresholds)
    window: int = DEFAULT_WINDOW
    generated_at: datetime = field(default_factory=utcnow)


Rule = Callable[[RuleContext], list[Recommendation]]


@dataclass(frozen=True)
class _Template:
    title: str
    description: str
    priority: Priority
    category: RecommendationCategory
    potential_impact: str
    action_items: tuple[str, ...]
    estimated_roi_increase: float
    effort: ImplementationEffort


def _emit(template: _Template, rule: str, ctx: RuleContext, **values: object) -> Recommendation:
    """Instantiate a template; ``values`` fill the description placeholders."""
    return Recommendation(
        title=template.title,
        description=template.description.format(**values),
        priority=template.priority,
        category=template.category,
        potential_impact=template.potential_impact,
        action_items=list(template.action_items),
        estimated_roi_increase=template.estimated_roi_increase,
        implementation_effort=template.effort,
        rule=rule,
        created_at=ctx.generated_at,
    )


def _mean(values: list[float]) -> float:
    return math.fsum(values) / len(values) if values else 0.0


# ── 1. ROI performance ────────────────────────────────────────────────────────

LOW_ROI = _Template(
    title="Low ROI Alert: Optimize Tool Usage",
    description=(
        "Your {tool} is showing ROI of {roi:.1f}%, which is below the {limit:.0f}% "
        "threshold. Consider reviewing implementation strategy and team training."
    ),
    priority=Priority.HIGH,
    category=RecommendationCategory.EFFICIENCY,
    potential_impact="Potential to increase ROI by 30-50% through better utilization",
    action_items=(
        "Conduct team training session on advanced features",
        "Review current workflows and identify bottlenecks",
        "Set up automation rules to maximize efficiency",
        "Benchmark against industry best practices",
    ),
    estimated_roi_increase=35.0,
    effort=ImplementationEffort.MEDIUM,
)

LONG_PAYBACK = _Template(
    title="Extended Payback Period: Accelerate Returns",
    description=(
        "Payback period of {months} months is longer than optimal. "
        "Focus on quick wins to accelerate ROI."
    ),
    priority=Priority.HIGH,
    category=RecommendationCategory.REVENUE_INCREASE,
    potential_impact="Reduce payback period by 3-6 months",
    action_items=(
        "Identify high-value use cases for immediate implementation",
        "Focus on features with direct revenue impact",
        "Increase adoption rate across sales team",
        "Optimize pricing strategy for better margins",
    ),
    estimated_roi_increase=25.0,
    effort=ImplementationEffort.MEDIUM,
)

STRONG_ROI = _Template(
    title="Strong ROI: Scale Your Success",
    description=(
        "With {roi:.1f}% ROI, you're seeing good returns. "
        "Consider scaling to maximize impact."
    ),
    priority=Priority.MEDIUM,
    category=RecommendationCategory.REVENUE_INCREASE,
    potential_impact="Potential to double current returns through scaling",
    action_items=(
        "Expand tool usage to additional team members",
        "Explore advanced features and integrations",
        "Document and share best practices across organization",
        "Consider upgrading to premium tier for enhanced capabilities",
    ),
    estimated_roi_increase=40.0,
    effort=ImplementationEffort.LOW,
)


def roi_performance(ctx: RuleContext) -> list[Recommendation]:
    """Flag low ROI, slow payback, and strong-but-unsaturated ROI."""
    t = ctx.thresholds
    roi = ctx.report.roi_percentage
    recs: list[Recommendation] = []

    if roi < t.low_roi_pct:
        recs.append(
            _emit(LOW_ROI, "roi_performance", ctx,
                  tool=ctx.investment.tool_name, roi=roi, limit=t.low_roi_pct)
        )
    if ctx.report.payback_period > t.long_payback_months:
        recs.append(
            _emit(LONG_PAYBACK, "roi_performance", ctx, months=ctx.report.payback_period)
        )
    if t.strong_roi_min_pct < roi < t.strong_roi_max_pct:
        recs.append(_emit(STRONG_ROI, "roi_performance", ctx, roi=roi))
    return recs


# ── 2. Conversion rate ────────────────────────────────────────────────────────

LOW_CONVERSION = _Template(
    title="Low Conversion Rate: Optimize Sales Funnel",
    description=(
        "Average conversion rate of {rate:.1f}% is below industry standard. "
        "Focus on lead qualification and nurturing."
    ),
    priority=Priority.HIGH,
    category=RecommendationCategory.REVENUE_INCREASE,
    potential_impact="Increase conversion rate by 5-10 percentage points",
    action_items=(
        "Implement lead scoring to prioritize high-quality prospects",
        "Set up automated nurture campaigns",
        "Analyze lost deals to identify common objections",
        "Create targeted content for different buyer personas",
    ),
    estimated_roi_increase=45.0,
    effort=ImplementationEffort.HIGH,
)

GOOD_CONVERSION = _Template(
    title="Good Conversion Rate: Fine-tune for Excellence",
    description=(
        "Your {rate:.1f}% conversion rate is solid. "
        "Small optimizations can push you to top-tier performance."
    ),
    priority=Priority.MEDIUM,
    category=RecommendationCategory.EFFICIENCY,
    potential_impact="Achieve 25%+ conversion rate through targeted improvements",
    action_items=(
        "A/B test email templates and call scripts",
        "Implement real-time lead alerts for hot prospects",
        "Optimize follow-up timing and frequency",
        "Leverage AI insights for personalized outreach",
    ),
    estimated_roi_increase=20.0,
    effort=ImplementationEffort.MEDIUM,
)

DECLINING_CONVERSION = _Template(
    title="Declining Conversion Trend: Immediate Action Required",
    description=(
        "Conversion rate has dropped from {older:.1f}% to {recent:.1f}%. "
        "Investigate and address root causes."
    ),
    priority=Priority.HIGH,
    category=RecommendationCategory.EFFICIENCY,
    potential_impact="Recover lost conversion rate and prevent further decline",
    action_items=(
        "Review recent changes to sales process or messaging",
        "Analyze competitor activities and market conditions",
        "Conduct team feedback session to identify challenges",
        "Refresh training on objection handling",
    ),
    estimated_roi_increase=30.0,
    effort=ImplementationEffort.MEDIUM,
)


def conversion_rate(ctx: RuleContext) -> list[Recommendation]:
    """Flag weak average conversion and a recent decline in conversion."""
    if not ctx.points:
        return []

    t = ctx.thresholds
    rates = [p.conversion_rate for p in ctx.points]
    avg = _mean(rates)
    recs: list[Recommendation] = []

    if avg < t.low_conversion_pct:
        recs.append(_emit(LOW_CONVERSION, "conversion_rate", ctx, rate=avg))
    elif avg < t.good_conversion_pct:
        recs.append(_emit(GOOD_CONVERSION, "conversion_rate", ctx, rate=avg))

    trend = compute_trend(rates, ctx.window)
    if trend.is_declining(t.conversion_decline_ratio):
        recs.append(
            _emit(DECLINING_CONVERSION, "conversion_rate", ctx,
                  older=trend.older_avg, recent=trend.recent_avg)
        )
    return recs


# ── 3. Time savings ───────────────────────────────────────────────────────────

LOW_TIME_SAVINGS = _Template(
    title="Low Time Savings: Maximize Automation",
    description=(
        "Only {hours:.1f} hours saved per month. "
        "Your {tool} has untapped automation potential."
    ),
    priority=Priority.MEDIUM,
    category=RecommendationCategory.AUTOMATION,
    potential_impact="Save an additional 15-25 hours per month through automation",
    action_items=(
        "Audit manual tasks that can be automated",
        "Set up workflow automation for repetitive processes",
        "Enable email templates and sequences",
        "Integrate with other tools to eliminate data entry",
    ),
    estimated_roi_increase=28.0,
    effort=ImplementationEffort.MEDIUM,
)

HIGH_TIME_SAVINGS = _Template(
    title="Excellent Time Savings: Reinvest in Growth",
    description=(
        "You're saving {hours:.1f} hours per month. "
        "Reinvest this time into high-value activities."
    ),
    priority=Priority.LOW,
    category=RecommendationCategory.EFFICIENCY,
    potential_impact="Convert saved time into additional revenue opportunities",
    action_items=(
        "Allocate saved time to strategic account planning",
        "Increase focus on relationship building with key accounts",
        "Invest time in professional development and skill building",
        "Explore new market segments or product lines",
    ),
    estimated_roi_increase=15.0,
    effort=ImplementationEffort.LOW,
)


def time_savings(ctx: RuleContext) -> list[Recommendation]:
    """Flag too little automation, or plenty of saved time to reinvest."""
    if not ctx.points:
        return []

    t = ctx.thresholds
    # One sales record covers one reporting month.
    hours = _mean([p.time_saved for p in ctx.points])

    if hours < t.low_time_saved_hours:
        return [_emit(LOW_TIME_SAVINGS, "time_savings", ctx,
                      hours=hours, tool=ctx.investment.tool_name)]
    if hours >= t.high_time_saved_hours:
        return [_emit(HIGH_TIME_SAVINGS, "time_savings", ctx, hours=hours)]
    return []


# ── 4. Cost efficiency ────────────────────────────────────────────────────────

HIGH_COST_RATIO = _Template(
    title="High Cost-to-Revenue Ratio: Optimize Spending",
    description=(
        "Your cost represents {ratio:.1f}% of revenue. "
        "Look for ways to reduce costs or increase revenue efficiency."
    ),
    priority=Priority.HIGH,
    category=RecommendationCategory.COST_REDUCTION,
    potential_impact="Reduce cost-to-revenue ratio by 10-15 percentage points",
    action_items=(
        "Review subscription tier and downgrade if features are unused",
        "Negotiate better pricing with vendor based on usage",
        "Consolidate tools to eliminate redundant subscriptions",
        "Optimize user licenses and remove inactive accounts",
    ),
    estimated_roi_increase=22.0,
    effort=ImplementationEffort.LOW,
)

CRM_DATA_QUALITY = _Template(
    title="CRM Optimization: Enhance Data Quality",
    description=(
        "CRM systems typically deliver 100%+ ROI; yours is at {roi:.1f}%. "
        "Focus on data quality and adoption to maximize value."
    ),
    priority=Priority.MEDIUM,
    category=RecommendationCategory.EFFICIENCY,
    potential_impact="Improve ROI by 25-40% through better CRM utilization",
    action_items=(
        "Implement data hygiene protocols and regular cleanup",
        "Set up mandatory field requirements for deal stages",
        "Create custom dashboards for sales team visibility",
        "Integrate with marketing automation for lead tracking",
    ),
    estimated_roi_increase=32.0,
    effort=ImplementationEffort.MEDIUM,
)


def cost_to_revenue_pct(report: ROIReport) -> float:
    """Cost as a percentage of revenue.

    0 when there is no cost; 100 when there is cost but no revenue.
    """
    if report.total_investment <= 0:
        return 0.0
    if report.total_revenue <= 0:
        return 100.0
    return report.total_investment / report.total_revenue * 100.0


def cost_efficiency(ctx: RuleContext) -> list[Recommendation]:
    """Flag expensive tools relative to revenue, and under-performing CRMs."""
    t = ctx.thresholds
    recs: list[Recommendation] = []

    ratio = cost_to_revenue_pct(ctx.report)
    if ratio > t.max_cost_to_revenue_pct:
        recs.append(_emit(HIGH_COST_RATIO, "cost_efficiency", ctx, ratio=ratio))

    if (
        ctx.investment.category == InvestmentCategory.CRM
        and ctx.report.roi_percentage < t.crm_min_roi_pct
    ):
        recs.append(
            _emit(CRM_DATA_QUALITY, "cost_efficiency", ctx, roi=ctx.report.roi_percentage)
        )
    return recs


# ── 5. Revenue growth ─────────────────────────────────────────────────────────

STAGNANT_GROWTH = _Template(
    title="Stagnant Revenue Growth: Accelerate Sales Velocity",
    description=(
        "Revenue growth of {growth:.1f}% is below target. "
        "Focus on increasing deal size and velocity."
    ),
    priority=Priority.HIGH,
    category=RecommendationCategory.REVENUE_INCREASE,
    potential_impact="Achieve 20%+ monthly revenue growth",
    action_items=(
        "Implement upselling and cross-selling strategies",
        "Shorten sales cycle through better qualification",
        "Expand into new market segments",
        "Launch targeted campaigns for high-value accounts",
    ),
    estimated_roi_increase=38.0,
    effort=ImplementationEffort.HIGH,
)

STRONG_GROWTH = _Template(
    title="Strong Growth: Maintain Momentum",
    description=(
        "Excellent {growth:.1f}% revenue growth. "
        "Document what's working and scale successful strategies."
    ),
    priority=Priority.LOW,
    category=RecommendationCategory.EFFICIENCY,
    potential_impact="Sustain high growth rate and prevent plateau",
    action_items=(
        "Document winning strategies and create playbooks",
        "Share best practices across entire sales team",
        "Invest in tools and resources that support growth",
        "Monitor key metrics to catch early warning signs",
    ),
    estimated_roi_increase=12.0,
    effort=ImplementationEffort.LOW,
)

LOW_DEAL_VOLUME = _Template(
    title="Low Deal Volume: Increase Pipeline Activity",
    description=(
        "Average of {deals:.1f} deals per month. "
        "Focus on top-of-funnel activities to increase volume."
    ),
    priority=Priority.MEDIUM,
    category=RecommendationCategory.REVENUE_INCREASE,
    potential_impact="Double deal volume through increased prospecting",
    action_items=(
        "Increase daily prospecting activities",
        "Leverage AI tools for lead generation",
        "Expand outreach channels (email, social, phone)",
        "Partner with marketing for lead generation campaigns",
    ),
    estimated_roi_increase=35.0,
    effort=ImplementationEffort.MEDIUM,
)

_MIN_POINTS_FOR_GROWTH = 2


def revenue_growth(ctx: RuleContext) -> list[Recommendation]:
    """Flag stagnant or strong revenue growth, and thin deal flow."""
    if len(ctx.points) < _MIN_POINTS_FOR_GROWTH:
        return []

    t = ctx.thresholds
    trend = compute_trend([p.revenue for p in ctx.points], ctx.window)
    growth_pct = trend.growth_ratio * 100.0
    recs: list[Recommendation] = []

    if trend.growth_ratio < t.stagnant_growth_ratio:
        recs.append(_emit(STAGNANT_GROWTH, "revenue_growth", ctx, growth=growth_pct))
    elif trend.is_growing(t.strong_growth_ratio):
        recs.append(_emit(STRONG_GROWTH, "revenue_growth", ctx, growth=growth_pct))

    deals = _mean([float(p.deals_closed) for p in ctx.points])
    if deals < t.low_deal_volume:
        recs.append(_emit(LOW_DEAL_VOLUME, "revenue_growth", ctx, deals=deals))
    return recs


# ── Battery ───────────────────────────────────────────────────────────────────

RULES: tuple[Rule, ...] = (
    roi_performance,
    conversion_rate,
    time_savings,
    cost_efficiency,
    revenue_growth,
)
