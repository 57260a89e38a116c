"""
Recommendation output model.

Recommendations are regenerated on every analysis run. The ``id`` is a
fresh UUID4 each time; nothing about a recommendation's identity survives
across runs, so callers replace stored lists rather than merging them.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from roi_optimizer.taxonomy import ImplementationEffort, Priority, RecommendationCategory
from roi_optimizer.utils.time_utils import utcnow


class Recommendation(BaseModel):
    """A rule-triggered optimization suggestion.

    Attributes:
        id: UUID4 string, new per run.
        title: Short headline.
        description: One or two sentences quoting the measured value.
        priority: high / medium / low.
        category: cost_reduction / revenue_increase / efficiency / automation.
        potential_impact: Free-text impact statement.
        action_items: Ordered list of concrete steps.
        estimated_roi_increase: Heuristic ROI gain in percentage points.
        implementation_effort: low / medium / high.
        rule: Slug of the rule evaluator that produced this recommendation.
        created_at: UTC timestamp of generation.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    description: str
    priority: Priority
    category: RecommendationCategory
    potential_impact: str
    action_items: list[str] = Field(default_factory=list)
    estimated_roi_increase: float = Field(ge=0.0)
    implementation_effort: ImplementationEffort
    rule: str = ""
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("title", "description")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty.")
        return v.strip()
