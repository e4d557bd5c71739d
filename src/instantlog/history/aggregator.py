"""Statistics and calendar/week windows over canonical day records.

Every function here is total: bad input degrades to zero, "—" or an empty
list so that a view can always be rendered.
"""
from __future__ import annotations

import calendar
import logging
from datetime import date, timedelta
from typing import Any, Callable, Iterable, Optional, Sequence

from ..common.datetime_utils import parse_clock_minutes, try_parse_iso_date
from ..core.constants import ABSENT_MARKER, HOURS_PER_DAY, WEEK_SIZE
from ..core.enums import LeaveType
from .model import CanonicalDayRecord, DayCell, DerivedStats

logger = logging.getLogger(__name__)

Predicate = Callable[[CanonicalDayRecord], bool]


def duration_hours(time_in: Any, time_out: Any) -> float:
    if not time_in or not time_out or ABSENT_MARKER in (time_in, time_out):
        return 0.0

    start = parse_clock_minutes(time_in)
    end = parse_clock_minutes(time_out)
    if start is None or end is None:
        return 0.0

    minutes = end - start
    if minutes < 0:
        minutes += HOURS_PER_DAY * 60
    return minutes / 60


def filter_window(records: Iterable[CanonicalDayRecord], predicate: Predicate) -> list[CanonicalDayRecord]:
    out: list[CanonicalDayRecord] = []
    for record in records or ():
        try:
            keep = predicate(record)
        except Exception:
            logger.debug("Window predicate failed for %r", record, exc_info=True)
            keep = False
        if keep:
            out.append(record)
    return out


def in_month(year: int, month: int) -> Predicate:
    def _predicate(record: CanonicalDayRecord) -> bool:
        day = try_parse_iso_date(record.date)
        return day is not None and day.year == year and day.month == month

    return _predicate


def in_range(start: date, end: date) -> Predicate:
    def _predicate(record: CanonicalDayRecord) -> bool:
        day = try_parse_iso_date(record.date)
        return day is not None and start <= day <= end

    return _predicate


def month_records(records: Iterable[CanonicalDayRecord], year: int, month: int) -> list[CanonicalDayRecord]:
    """The month's records, ordered by date."""
    return sorted(filter_window(records, in_month(year, month)), key=lambda r: r.date)


def week_count(month_recs: Sequence[CanonicalDayRecord]) -> int:
    return (len(month_recs) + WEEK_SIZE - 1) // WEEK_SIZE


def week_records(month_recs: Sequence[CanonicalDayRecord], week_index: int) -> list[CanonicalDayRecord]:
    """Fixed 7-record slice of the month, not aligned to calendar weeks."""
    if week_index < 0:
        return []
    start = week_index * WEEK_SIZE
    return list(month_recs[start:start + WEEK_SIZE])


def week_range_label(week: Sequence[CanonicalDayRecord]) -> str:
    if not week:
        return ""
    first = try_parse_iso_date(week[0].date)
    last = try_parse_iso_date(week[-1].date)
    if first is None or last is None:
        return ""
    return f"{first.strftime('%b %d')} - {last.strftime('%b %d, %Y')}"


def stats(records: Iterable[CanonicalDayRecord]) -> DerivedStats:
    recs = list(records or ())
    total_days = len(recs)
    present_days = sum(1 for r in recs if r.is_present)
    leave_days = sum(1 for r in recs if r.is_leave)
    total_hours = sum(duration_hours(r.time_in, r.time_out) for r in recs)
    avg_hours = round(total_hours / total_days, 1) if total_days > 0 else 0

    return DerivedStats(
        total_days=total_days,
        present_days=present_days,
        leave_days=leave_days,
        total_hours=total_hours,
        avg_hours=avg_hours,
    )


def find_by_date(records: Iterable[CanonicalDayRecord], day: str) -> Optional[CanonicalDayRecord]:
    for record in records or ():
        if record.date == day:
            return record
    return None


def format_time(value: Any) -> str:
    """Render a clock value as "h:mm AM"."""
    minutes = parse_clock_minutes(value) if value != ABSENT_MARKER else None
    if minutes is None:
        return ABSENT_MARKER
    hour, minute = divmod(minutes, 60)
    suffix = "AM" if hour < 12 else "PM"
    return f"{(hour % 12) or 12}:{minute:02d} {suffix}"


def format_duration(time_in: Any, time_out: Any) -> str:
    hours = duration_hours(time_in, time_out)
    if hours == 0:
        return ABSENT_MARKER
    whole = int(hours)
    minutes = round((hours - whole) * 60)
    return f"{whole}h {minutes}m"


def month_grid(
    records: Iterable[CanonicalDayRecord],
    year: int,
    month: int,
    today: date,
) -> list[Optional[DayCell]]:
    """Sunday-first month grid: leading None padding, then one cell per day."""

    if not 1 <= month <= 12 or not 1 <= year <= 9999:
        return []

    by_date = {r.date: r for r in records or ()}
    yesterday = today - timedelta(days=1)
    first_weekday, days_in_month = calendar.monthrange(year, month)

    cells: list[Optional[DayCell]] = [None] * ((first_weekday + 1) % 7)
    for day_no in range(1, days_in_month + 1):
        day = date(year, month, day_no)
        key = day.isoformat()
        record = by_date.get(key)
        is_leave = bool(record and record.is_leave)
        cells.append(
            DayCell(
                date=key,
                day=day_no,
                is_today=day == today,
                is_yesterday=day == yesterday,
                is_leave=is_leave,
                leave_type=(record.leave_type if record else None) or LeaveType.FULL_DAY.value,
                leave_reason=str(record.leave_reason or record.source.get("reason") or "") if record else "",
                hours=duration_hours(record.time_in, record.time_out) if record else 0.0,
                record=record,
            )
        )
    return cells
