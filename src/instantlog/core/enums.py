from __future__ import annotations

from enum import Enum


class LeaveType(str, Enum):
    """Leave granularity as reported by the backend."""

    FULL_DAY = "Full Day"
    HALF_DAY = "Half Day"
    SHORT_LEAVE = "Short Leave"


class DayStatus(str, Enum):
    """Status label used in reports."""

    PRESENT = "Present"
    LEAVE = "Leave"
    ABSENT = "Absent"


class ReportKind(str, Enum):
    MONTHLY = "monthly"
    OVERALL = "overall"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class Role(str, Enum):
    EMPLOYEE = "employee"
    ADMIN = "admin"


class ApiErrorKind(str, Enum):
    """Why a backend call did not produce usable data."""

    TRANSPORT = "TRANSPORT"
    ERROR_PAGE = "ERROR_PAGE"
    INVALID_JSON = "INVALID_JSON"
    SERVER = "SERVER"
    REJECTED = "REJECTED"
    UNEXPECTED_SHAPE = "UNEXPECTED_SHAPE"
    VALIDATION = "VALIDATION"
