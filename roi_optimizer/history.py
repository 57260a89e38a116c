"""
Bounded analysis history.

An ``AnalysisSnapshot`` pairs one ``ROIReport`` with the prioritized
recommendations produced for it. ``AnalysisHistory`` keeps at most
``max_entries`` snapshots; recording past the cap evicts the oldest first.

The ROI and recommendation engines never touch this module. It is a
caller-side store used by the CLI, with JSON save/load so a history can
survive between invocations.
"""

from __future__ import annotations

import json
import logging
import math
import uuid
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from roi_optimizer.errors import InvalidInputError
from roi_optimizer.models.recommendation import Recommendation
from roi_optimizer.models.report import ROIReport
from roi_optimizer.taxonomy import PaybackStatus, Priority
from roi_optimizer.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 50


class AnalysisSnapshot(BaseModel):
    """One recorded analysis run for a single investment."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    investment_id: str
    report: ROIReport
    recommendations: list[Recommendation] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)

    @property
    def high_priority_count(self) -> int:
        return sum(1 for r in self.recommendations if r.priority == Priority.HIGH)


@dataclass(frozen=True)
class HistorySummary:
    """Aggregates over every retained snapshot.

    ``average_payback_period`` only averages snapshots whose payback was
    actually reached; it is 0 when none were.
    """

    total_analyses: int
    average_roi_percentage: float
    average_payback_period: float
    total_revenue: float
    total_net_profit: float
    high_priority_recommendations: int


@dataclass(frozen=True)
class HistoryPage:
    """A newest-first slice of the history."""

    items: list[AnalysisSnapshot]
    total: int
    limit: int
    offset: int

    @property
    def has_more(self) -> bool:
        return self.offset + self.limit < self.total


class AnalysisHistory:
    """In-memory, capacity-bounded store of analysis snapshots."""

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}.")
        self.max_entries = max_entries
        self._entries: deque[AnalysisSnapshot] = deque(maxlen=max_entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def record(
        self,
        report: ROIReport,
        recommendations: Iterable[Recommendation] = (),
    ) -> AnalysisSnapshot:
        """Append a snapshot, evicting the oldest one when at capacity."""
        snapshot = AnalysisSnapshot(
            investment_id=report.investment_id,
            report=report,
            recommendations=list(recommendations),
        )
        if len(self._entries) == self.max_entries:
            logger.debug("History full (%d); evicting oldest snapshot", self.max_entries)
        self._entries.append(snapshot)
        return snapshot

    def latest(self, investment_id: str) -> Optional[AnalysisSnapshot]:
        """Most recently recorded snapshot for ``investment_id``, or ``None``."""
        for snapshot in reversed(self._entries):
            if snapshot.investment_id == investment_id:
                return snapshot
        return None

    def for_investment(self, investment_id: str) -> list[AnalysisSnapshot]:
        """All snapshots for ``investment_id``, newest first."""
        return [s for s in reversed(self._entries) if s.investment_id == investment_id]

    def page(
        self,
        limit: int = 50,
        offset: int = 0,
        investment_id: Optional[str] = None,
    ) -> HistoryPage:
        """Return a newest-first page of snapshots, optionally for one investment.

        Raises:
            ValueError: If ``limit < 1`` or ``offset < 0``.
        """
        if limit < 1 or offset < 0:
            raise ValueError(f"Invalid page limit={limit} offset={offset}.")
        if investment_id is not None:
            newest_first = self.for_investment(investment_id)
        else:
            newest_first = list(reversed(self._entries))
        return HistoryPage(
            items=newest_first[offset:offset + limit],
            total=len(newest_first),
            limit=limit,
            offset=offset,
        )

    def summary(self) -> HistorySummary:
        """Aggregate ROI, payback, revenue and recommendation counts."""
        entries = list(self._entries)
        n = len(entries)
        reached = [
            s.report.payback_period
            for s in entries
            if s.report.payback_status == PaybackStatus.REACHED
        ]
        return HistorySummary(
            total_analyses=n,
            average_roi_percentage=(
                round(math.fsum(s.report.roi_percentage for s in entries) / n, 2) if n else 0.0
            ),
            average_payback_period=round(sum(reached) / len(reached), 2) if reached else 0.0,
            total_revenue=round(math.fsum(s.report.total_revenue for s in entries), 2),
            total_net_profit=round(math.fsum(s.report.net_profit for s in entries), 2),
            high_priority_recommendations=sum(s.high_priority_count for s in entries),
        )

    # ── Persistence ───────────────────────────────────────────────────────────

    def save(self, path: Path) -> Path:
        """Write all snapshots (oldest first) to a JSON file and return ``path``."""
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = [s.model_dump(mode="json") for s in self._entries]
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.info("History saved: %s (%d snapshots)", path, len(payload))
        return path

    @classmethod
    def load(cls, path: Path, max_entries: int = DEFAULT_MAX_ENTRIES) -> "AnalysisHistory":
        """Load snapshots from ``path``; a missing file yields an empty history.

        When the file holds more than ``max_entries`` snapshots only the newest
        ``max_entries`` are kept.

        Raises:
            InvalidInputError: If the file is not a JSON list of valid snapshots.
        """
        history = cls(max_entries)
        if not path.exists():
            return history
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(raw, list):
                raise InvalidInputError(f"{path.name} must contain a JSON array.")
            for item in raw:
                history._entries.append(AnalysisSnapshot.model_validate(item))
        except (json.JSONDecodeError, ValidationError) as exc:
            raise InvalidInputError(f"Could not read history from {path}: {exc}") from exc
        return history
