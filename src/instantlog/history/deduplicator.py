from __future__ import annotations

from typing import Iterable

from .model import CanonicalDayRecord


def dedupe(records: Iterable[CanonicalDayRecord]) -> list[CanonicalDayRecord]:
    """Collapse records to one per date, keeping first-seen order.

    Attendance beats leave for the same date: it means the employee actually
    showed up. Between records of the same kind the first one wins.
    """

    out: list[CanonicalDayRecord] = []
    index_by_date: dict[str, int] = {}

    for record in records:
        idx = index_by_date.get(record.date)
        if idx is None:
            index_by_date[record.date] = len(out)
            out.append(record)
            continue

        existing = out[idx]
        if existing.is_leave and not record.is_leave:
            out[idx] = record

    return out
