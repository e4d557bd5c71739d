"""Turn heterogeneous backend records into CanonicalDayRecords.

The backend reports the same logical attribute under several aliases. Each
attribute is resolved from an ordered fallback chain of field names.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, Mapping, Optional

from ..core.constants import DEFAULT_LEAVE_REASON
from ..core.enums import LeaveType
from .model import CanonicalDayRecord, HistoryPayload

logger = logging.getLogger(__name__)

DATE_FIELDS = ("date", "from_date")
LEAVE_REASON_FIELDS = ("reason", "leave_reason", "remarks")
LEAVE_STATUSES = frozenset({"absent", "leave"})


def _first_truthy(raw: Mapping[str, Any], fields: Iterable[str]) -> Any:
    for name in fields:
        value = raw.get(name)
        if value:
            return value
    return None


def _resolve_date(raw: Mapping[str, Any]) -> Optional[str]:
    value = _first_truthy(raw, DATE_FIELDS)
    if not value:
        return None
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip() or None


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def is_leave_record(raw: Mapping[str, Any]) -> bool:
    has_times = bool(raw.get("time_in")) or bool(raw.get("time_out"))
    return (
        raw.get("absent") is True
        or _text(raw.get("status")) in LEAVE_STATUSES
        or _text(raw.get("type")) == "leave"
        or (bool(raw.get("reason")) and not has_times)
        or (bool(raw.get("from_date")) and bool(raw.get("to_date")))
        or raw.get("is_leave") is True
        or raw.get("leave") is True
    )


def _resolve_leave_type(raw: Mapping[str, Any]) -> str:
    if raw.get("leave_type"):
        value = raw["leave_type"]
        return value.value if isinstance(value, LeaveType) else str(value)
    if raw.get("half_day"):
        return LeaveType.HALF_DAY.value
    if raw.get("short_leave"):
        return LeaveType.SHORT_LEAVE.value
    return LeaveType.FULL_DAY.value


def normalize_one(raw: Mapping[str, Any]) -> Optional[CanonicalDayRecord]:
    day = _resolve_date(raw)
    if not day:
        return None

    leave = is_leave_record(raw)
    reason = ""
    if leave:
        reason = str(_first_truthy(raw, LEAVE_REASON_FIELDS) or DEFAULT_LEAVE_REASON)

    return CanonicalDayRecord(
        date=day,
        is_leave=leave,
        leave_type=_resolve_leave_type(raw),
        leave_reason=reason,
        time_in=None if leave else raw.get("time_in"),
        time_out=None if leave else raw.get("time_out"),
        source=dict(raw),
    )


def normalize(raw_records: Optional[Iterable[Any]]) -> list[CanonicalDayRecord]:
    out: list[CanonicalDayRecord] = []
    for raw in raw_records or ():
        if not isinstance(raw, Mapping):
            logger.debug("Skipping non-object history record: %r", raw)
            continue
        try:
            record = normalize_one(raw)
        except Exception:
            # a bad record never aborts the batch
            logger.debug("Skipping unreadable history record: %r", raw, exc_info=True)
            continue
        if record is None:
            logger.debug("Dropping history record without a date: %r", raw)
            continue
        out.append(record)
    return out


def merge_payload(payload: Optional[HistoryPayload]) -> list[Mapping[str, Any]]:
    """Attendance first, then leaves, the order dedupe() relies on."""
    if payload is None:
        return []
    return [*(payload.attendance or []), *(payload.leaves or [])]
