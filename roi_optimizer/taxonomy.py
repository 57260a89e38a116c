"""
Enumerations shared by the investment, report, and recommendation models.

Two groups:
  - Investment descriptors: ``InvestmentCategory``, ``InvestmentStatus``.
  - Recommendation descriptors: ``Priority``, ``RecommendationCategory``,
    ``ImplementationEffort``.

``PaybackStatus`` is the tri-state outcome of the payback walk; it sits
next to the integer ``payback_period`` on every ``ROIReport``.

This module has NO imports from any other ``roi_optimizer`` package.
"""

from enum import StrEnum


class InvestmentCategory(StrEnum):
    """Kind of sales-automation tool the money was spent on."""

    CRM = "crm"
    EMAIL = "email"
    ANALYTICS = "analytics"
    CHATBOT = "chatbot"
    OTHER = "other"


class InvestmentStatus(StrEnum):
    """Lifecycle state of an investment."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


class Priority(StrEnum):
    """Urgency of a recommendation."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort weight: high=3, medium=2, low=1."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK: dict[str, int] = {"high": 3, "medium": 2, "low": 1}


class RecommendationCategory(StrEnum):
    """Which lever a recommendation pulls."""

    COST_REDUCTION = "cost_reduction"
    REVENUE_INCREASE = "revenue_increase"
    EFFICIENCY = "efficiency"
    AUTOMATION = "automation"


class ImplementationEffort(StrEnum):
    """Rough effort to act on a recommendation."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PaybackStatus(StrEnum):
    """Outcome of the cumulative-revenue payback walk."""

    REACHED = "reached"
    """Cumulative revenue met the cost; ``payback_period`` holds the month count."""

    NOT_REACHED = "not_reached"
    """Cumulative revenue is still below the cost; ``payback_period`` is 0."""

    NO_COST = "no_cost"
    """Zero-cost investment; payback is undefined and ``payback_period`` is 0."""
