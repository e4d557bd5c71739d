from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class CanonicalDayRecord:
    """One employee's status for one calendar date.

    `leave_type` is only meaningful when `is_leave` is true. Leave records
    never carry `time_in`/`time_out`.
    """

    date: str
    is_leave: bool = False
    leave_type: str = "Full Day"
    leave_reason: str = ""
    time_in: Optional[str] = None
    time_out: Optional[str] = None
    source: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_present(self) -> bool:
        return not self.is_leave and bool(self.time_in) and bool(self.time_out)

    def to_dict(self) -> dict[str, Any]:
        """Client-compatible shape: raw fields overlaid with the canonical ones."""
        out = dict(self.source)
        out.update(
            {
                "date": self.date,
                "isLeave": self.is_leave,
                "leaveType": self.leave_type,
                "leaveReason": self.leave_reason,
                "time_in": self.time_in,
                "time_out": self.time_out,
            }
        )
        return out


@dataclass(frozen=True)
class DerivedStats:
    total_days: int = 0
    present_days: int = 0
    leave_days: int = 0
    total_hours: float = 0.0
    avg_hours: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalDays": self.total_days,
            "presentDays": self.present_days,
            "leaveDays": self.leave_days,
            "totalHours": round(self.total_hours, 2),
            "avgHours": self.avg_hours,
        }


@dataclass(frozen=True)
class DayCell:
    """Read-model for one cell of the month calendar grid."""

    date: str
    day: int
    is_today: bool
    is_yesterday: bool
    is_leave: bool
    leave_type: str
    leave_reason: str
    hours: float
    record: Optional[CanonicalDayRecord] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "day": self.day,
            "isToday": self.is_today,
            "isYesterday": self.is_yesterday,
            "isLeave": self.is_leave,
            "leaveType": self.leave_type,
            "leaveReason": self.leave_reason,
            "hours": round(self.hours, 2),
            "attendance": self.record.to_dict() if self.record else None,
        }


@dataclass(frozen=True)
class HistoryPayload:
    """Raw records as returned by the History Provider."""

    attendance: list[Mapping[str, Any]] = field(default_factory=list)
    leaves: list[Mapping[str, Any]] = field(default_factory=list)
