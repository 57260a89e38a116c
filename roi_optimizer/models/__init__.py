"""Frozen pydantic models for investments, sales records, reports, and recommendations."""

from roi_optimizer.models.investment import Investment, SalesDataPoint
from roi_optimizer.models.recommendation import Recommendation
from roi_optimizer.models.report import MonthlyPoint, ROIReport

__all__ = [
    "Investment",
    "MonthlyPoint",
    "ROIReport",
    "Recommendation",
    "SalesDataPoint",
]
