"""
Input records: investments in sales-automation tools and their sales data.

``Investment`` is what was bought and when; ``SalesDataPoint`` is one
periodic measurement of the sales results attributed to that tool.

Both models are frozen (immutable) after construction. A report computed
against an investment is a snapshot: editing the investment later means
building a new ``Investment`` and recomputing, never mutating in place.

Conversion rate convention
--------------------------
``SalesDataPoint.conversion_rate`` is stored on a **0–100 percentage** scale.
Records using the fractional 0–1 convention must be converted at the
ingestion boundary (see ``roi_optimizer.ingestion.records``); nothing inside
the engines ever guesses the scale.
"""

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from roi_optimizer.taxonomy import InvestmentCategory, InvestmentStatus
from roi_optimizer.utils.time_utils import utcnow


class Investment(BaseModel):
    """Money spent on one sales-automation tool.

    Attributes:
        id: Caller-assigned identifier; referenced by ``SalesDataPoint.investment_id``.
        tool_name: Display name of the tool, e.g. ``"HubSpot Sales Hub"``.
        cost: Total spend in currency units. Non-negative and finite.
        implementation_date: Date the tool went live; anchors payback and the
            monthly series.
        category: Tool category (crm, email, analytics, chatbot, other).
        status: Lifecycle state (active, inactive, pending).
        expected_benefits: Optional free-text note captured at entry time.
        created_at: UTC timestamp of record creation.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    id: str
    tool_name: str
    cost: float = Field(ge=0.0)
    implementation_date: dt.date
    category: InvestmentCategory = InvestmentCategory.OTHER
    status: InvestmentStatus = InvestmentStatus.ACTIVE
    expected_benefits: Optional[str] = None
    created_at: dt.datetime = Field(default_factory=utcnow)

    @field_validator("id", "tool_name")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty.")
        return v.strip()


class SalesDataPoint(BaseModel):
    """One dated measurement of sales results attributed to an investment.

    Attributes:
        id: Record identifier.
        investment_id: FK to ``Investment.id`` (required).
        date: Date the measurement covers.
        revenue: Revenue in currency units (>= 0).
        deals_closed: Deals closed in the period (>= 0).
        time_saved: Hours of manual work saved in the period (>= 0).
        conversion_rate: Lead-to-deal conversion on a 0–100 scale.
        created_at: UTC timestamp of record creation.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    id: str
    investment_id: str
    date: dt.date
    revenue: float = Field(default=0.0, ge=0.0)
    deals_closed: int = Field(default=0, ge=0)
    time_saved: float = Field(default=0.0, ge=0.0)
    conversion_rate: float = Field(default=0.0, ge=0.0, le=100.0)
    created_at: dt.datetime = Field(default_factory=utcnow)

    @field_validator("investment_id")
    @classmethod
    def validate_investment_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("investment_id is required.")
        return v.strip()
