"""
Time and date helpers.

All ordering, overlap and duration math in the package goes through
to_minutes(). Raw 'HH:MM' strings are never compared directly, because
'9:00' vs '09:00' would sort wrongly. Dates are 'YYYY-MM-DD' strings,
where lexicographic order equals calendar order.
"""

from __future__ import annotations

import re
from datetime import datetime

from meetschedule.errors import InvalidFormat

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_MONTH_RE = re.compile(r"^\d{4}-\d{2}$")


def to_minutes(hhmm: str, field: str = "time") -> int:
    """
    Convert 'HH:MM' to minutes since midnight.
    Raises InvalidFormat for invalid formats.
    """
    if not isinstance(hhmm, str):
        raise InvalidFormat("Time must be a string", field=field, value=hhmm)

    parts = hhmm.strip().split(":")
    if len(parts) != 2 or not parts[0].isdigit() or not parts[1].isdigit():
        raise InvalidFormat(f"Invalid time format: {hhmm!r} (expected HH:MM)", field=field, value=hhmm)

    h = int(parts[0])
    m = int(parts[1])
    if not (0 <= h <= 23 and 0 <= m <= 59):
        raise InvalidFormat(f"Invalid time value: {hhmm!r}", field=field, value=hhmm)
    return h * 60 + m


def normalize_time(hhmm: str, field: str = "time") -> str:
    """
    Return the zero-padded 'HH:MM' form of a time ('9:05' -> '09:05').

    Every producer of records calls this before constructing an Event,
    so stored times always share one shape.
    """
    minutes = to_minutes(hhmm, field=field)
    return minutes_to_hhmm(minutes)


def minutes_to_hhmm(minutes: int) -> str:
    h, m = divmod(minutes, 60)
    return f"{h:02d}:{m:02d}"


def duration_minutes(start: str, end: str) -> int:
    return to_minutes(end, field="end_time") - to_minutes(start, field="start_time")


def validate_date(value: str, field: str = "date") -> str:
    """
    Check that value is a real calendar date in 'YYYY-MM-DD' form and return it.
    """
    if not isinstance(value, str) or not _DATE_RE.match(value.strip()):
        raise InvalidFormat(f"Invalid date format: {value!r} (expected YYYY-MM-DD)", field=field, value=value)
    value = value.strip()
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise InvalidFormat(f"Invalid date value: {value!r}", field=field, value=value) from None
    return value


def validate_month(value: str, field: str = "month") -> tuple[int, int]:
    """
    Parse a 'YYYY-MM' month and return (year, month).
    """
    if not isinstance(value, str) or not _MONTH_RE.match(value.strip()):
        raise InvalidFormat(f"Invalid month format: {value!r} (expected YYYY-MM)", field=field, value=value)
    year, month = (int(part) for part in value.strip().split("-"))
    if not 1 <= month <= 12:
        raise InvalidFormat(f"Invalid month value: {value!r}", field=field, value=value)
    return year, month
