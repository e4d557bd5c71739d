from __future__ import annotations

import io
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Optional

import pandas as pd

from ..common.datetime_utils import try_parse_iso_date
from ..core.constants import ABSENT_MARKER
from ..core.enums import DayStatus, ReportKind
from ..history import aggregator
from ..history.model import CanonicalDayRecord, DerivedStats

EXCEL_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

COLUMNS = {
    "date": "Date",
    "day": "Day",
    "check_in": "Check In",
    "check_out": "Check Out",
    "status": "Status",
    "hours": "Hours",
}


@dataclass(frozen=True)
class ReportData:
    title: str
    period: str
    filename: str
    stats: DerivedStats
    rows: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "period": self.period,
            "filename": self.filename,
            "stats": self.stats.to_dict(),
            "rows": self.rows,
        }


def _safe_name(name: Optional[str]) -> str:
    return re.sub(r"\s+", "_", (name or "Employee").strip()) or "Employee"


def _status(record: CanonicalDayRecord) -> DayStatus:
    if record.is_leave:
        return DayStatus.LEAVE
    return DayStatus.PRESENT if record.time_in else DayStatus.ABSENT


def _row(record: CanonicalDayRecord) -> dict:
    day = try_parse_iso_date(record.date)
    hours = ABSENT_MARKER
    if record.is_present:
        hours = f"{aggregator.duration_hours(record.time_in, record.time_out):.1f}"
    return {
        "date": record.date,
        "day": day.strftime("%A") if day else "",
        "check_in": record.time_in or ABSENT_MARKER,
        "check_out": record.time_out or ABSENT_MARKER,
        "status": _status(record).value,
        "hours": hours,
    }


class ReportService:
    """Builds the data behind the monthly and overall attendance reports."""

    def build(
        self,
        timeline: Iterable[CanonicalDayRecord],
        *,
        kind: ReportKind,
        employee_name: Optional[str],
        today: date,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> ReportData:
        name = (employee_name or "").strip() or "Employee"
        safe = _safe_name(name)

        if kind == ReportKind.MONTHLY:
            year = year or today.year
            month = month or today.month
            records = aggregator.month_records(timeline, year, month)
            month_name = date(year, month, 1).strftime("%B")
            title = f"{month_name} {year} Attendance Report - {name}"
            period = f"{month_name} {year}"
            filename = f"{safe}_{month_name}_{year}_Report"
        else:
            records = list(timeline)
            title = f"Complete Attendance History - {name}"
            period = "All Time"
            filename = f"{safe}_Complete_History_{today.isoformat()}"

        rows = [_row(r) for r in sorted(records, key=lambda r: r.date, reverse=True)]
        return ReportData(
            title=title,
            period=period,
            filename=filename,
            stats=aggregator.stats(records),
            rows=rows,
        )

    def to_excel(self, report: ReportData) -> io.BytesIO:
        df = pd.DataFrame(report.rows, columns=list(COLUMNS)).rename(columns=COLUMNS)

        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Attendance")

        output.seek(0)
        return output
