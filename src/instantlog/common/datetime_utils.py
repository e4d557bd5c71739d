from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

_TWELVE_HOUR_FORMATS = ("%I:%M %p", "%I:%M:%S %p", "%I:%M%p")
_TWENTY_FOUR_HOUR_FORMATS = ("%H:%M", "%H:%M:%S")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def try_parse_iso_date(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return parse_iso_date(value.strip()[:10])
    except ValueError:
        return None


def parse_clock_minutes(value: Any) -> Optional[int]:
    """Minutes since midnight for "H:MM" (24h) or "h:mm AM/PM" strings.

    Seconds are accepted and ignored. Returns None when the value cannot be read.
    """

    if not isinstance(value, str):
        return None
    text = value.strip().upper()
    if not text:
        return None

    formats = _TWELVE_HOUR_FORMATS if ("AM" in text or "PM" in text) else _TWENTY_FOUR_HOUR_FORMATS
    for fmt in formats:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return parsed.hour * 60 + parsed.minute
    return None


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
