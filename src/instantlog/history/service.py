from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Optional, Sequence

from ..core.cancellation import CancellationToken
from . import aggregator
from .deduplicator import dedupe
from .model import CanonicalDayRecord, DayCell, DerivedStats
from .normalizer import merge_payload, normalize
from .provider import HistoryProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryDashboard:
    """Everything the history screen renders for one month."""

    year: int
    month: int
    today: Optional[CanonicalDayRecord]
    yesterday: Optional[CanonicalDayRecord]
    stats: DerivedStats
    calendar: list[Optional[DayCell]]
    week_index: int
    week_count: int
    week: list[CanonicalDayRecord] = field(default_factory=list)
    week_range: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "year": self.year,
            "month": self.month,
            "today": self.today.to_dict() if self.today else {},
            "yesterday": self.yesterday.to_dict() if self.yesterday else {},
            "stats": self.stats.to_dict(),
            "calendar": [c.to_dict() if c else None for c in self.calendar],
            "weekIndex": self.week_index,
            "weekCount": self.week_count,
            "weekRange": self.week_range,
            "week": [
                {
                    **r.to_dict(),
                    "hours": round(aggregator.duration_hours(r.time_in, r.time_out), 2),
                    "duration": aggregator.format_duration(r.time_in, r.time_out),
                }
                for r in self.week
            ],
        }


class HistoryService:
    def __init__(self, provider: HistoryProvider):
        self._provider = provider

    def load_timeline(self, employee_id: Any) -> list[CanonicalDayRecord]:
        payload = self._provider.fetch_history(employee_id)
        timeline = dedupe(normalize(merge_payload(payload)))
        logger.debug("Loaded %d history days for employee %s", len(timeline), employee_id)
        return timeline

    def dashboard(
        self,
        timeline: Sequence[CanonicalDayRecord],
        *,
        year: int,
        month: int,
        today: date,
        week: int = 0,
    ) -> HistoryDashboard:
        month_recs = aggregator.month_records(timeline, year, month)
        n_weeks = aggregator.week_count(month_recs)
        week_index = min(max(int(week), 0), max(n_weeks - 1, 0))
        week_recs = aggregator.week_records(month_recs, week_index)

        return HistoryDashboard(
            year=year,
            month=month,
            today=aggregator.find_by_date(timeline, today.isoformat()),
            yesterday=aggregator.find_by_date(timeline, (today - timedelta(days=1)).isoformat()),
            stats=aggregator.stats(month_recs),
            calendar=aggregator.month_grid(timeline, year, month, today),
            week_index=week_index,
            week_count=n_weeks,
            week=week_recs,
            week_range=aggregator.week_range_label(week_recs),
        )


class HistoryView:
    """Holds one screen's timeline for as long as the screen is open.

    Each refresh runs under its own CancellationToken. Starting a new refresh
    or closing the view cancels the previous token, so a late response can
    never overwrite newer state.
    """

    def __init__(self, service: HistoryService, employee_id: Any):
        self._service = service
        self._employee_id = employee_id
        self._lock = threading.Lock()
        self._token: Optional[CancellationToken] = None
        self._timeline: list[CanonicalDayRecord] = []
        self._closed = False

    @property
    def timeline(self) -> list[CanonicalDayRecord]:
        return list(self._timeline)

    @property
    def closed(self) -> bool:
        return self._closed

    def refresh(self) -> Optional[list[CanonicalDayRecord]]:
        """Re-fetch the timeline; returns None when the result was abandoned."""

        with self._lock:
            if self._closed:
                return None
            if self._token is not None:
                self._token.cancel()
            token = CancellationToken()
            self._token = token

        timeline = self._service.load_timeline(self._employee_id)

        with self._lock:
            if token.cancelled:
                logger.debug("Dropping stale history refresh for employee %s", self._employee_id)
                return None
            self._timeline = timeline
            return list(timeline)

    def close(self) -> None:
        with self._lock:
            self._closed = True
            if self._token is not None:
                self._token.cancel()
            self._timeline = []


class HistoryViewRegistry:
    """One HistoryView per logged-in employee, closed again on logout."""

    def __init__(self, service: HistoryService):
        self._service = service
        self._lock = threading.Lock()
        self._views: dict[Any, HistoryView] = {}

    def open(self, employee_id: Any) -> HistoryView:
        with self._lock:
            view = self._views.get(employee_id)
            if view is None or view.closed:
                view = HistoryView(self._service, employee_id)
                self._views[employee_id] = view
            return view

    def timeline(self, employee_id: Any) -> list[CanonicalDayRecord]:
        """Refresh and return the employee's timeline.

        A refresh overtaken by a newer one returns whatever the newer one
        stored.
        """

        view = self.open(employee_id)
        fresh = view.refresh()
        return view.timeline if fresh is None else fresh

    def close(self, employee_id: Any) -> None:
        with self._lock:
            view = self._views.pop(employee_id, None)
        if view is not None:
            view.close()

    def __contains__(self, employee_id: Any) -> bool:
        with self._lock:
            return employee_id in self._views
