"""
ROI report models.

``ROIReport`` is derived data: it is recomputed on demand from one
``Investment`` and its current ``SalesDataPoint`` list and never mutated.
All monetary and percentage fields are already rounded to 2 decimals.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from roi_optimizer.taxonomy import PaybackStatus
from roi_optimizer.utils.time_utils import utcnow


class MonthlyPoint(BaseModel):
    """One calendar month of the amortized ROI series.

    Attributes:
        month: Label such as ``"Jan 2024"``.
        roi: Monthly ROI % against the amortized cost.
        revenue: Revenue dated in this month.
        cost: Straight-line amortized cost (total investment / months in series).
    """

    model_config = ConfigDict(frozen=True)

    month: str
    roi: float
    revenue: float
    cost: float


class ROIReport(BaseModel):
    """Point-in-time ROI snapshot for a single investment.

    Attributes:
        investment_id: The investment this report was computed for.
        total_investment: The investment's cost at analysis time.
        total_revenue: Sum of revenue over the matching sales points.
        net_profit: ``total_revenue - total_investment``.
        roi_percentage: ``net_profit / total_investment * 100``; 0 when cost is 0.
        payback_period: Whole months from implementation until cumulative
            revenue first met the cost. 0 when not reached or no cost; read
            ``payback_status`` to tell these apart.
        payback_status: Tri-state payback outcome.
        monthly_roi: One point per month from implementation month through the
            latest sales month. Empty when there is no sales data.
        generated_at: UTC timestamp of report generation.
    """

    model_config = ConfigDict(frozen=True)

    investment_id: str
    total_investment: float
    total_revenue: float
    net_profit: float
    roi_percentage: float
    payback_period: int = 0
    payback_status: PaybackStatus = PaybackStatus.NOT_REACHED
    monthly_roi: list[MonthlyPoint] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=utcnow)

    @property
    def has_monthly_data(self) -> bool:
        """False means "insufficient data", not an error."""
        return bool(self.monthly_roi)
