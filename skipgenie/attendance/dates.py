"""
Date normalization for portal text.

The portal reports dates as free text in several shapes. Everything is
funnelled through parse_flex_date(), which tries a fixed list of formats
and returns None instead of raising.
"""

import re
from datetime import date, datetime
from typing import Any, Optional


# DD/MM/YYYY or DD-MM-YYYY (one separator throughout) with an optional
# HH:mm[:ss] part. Day first, always.
_DAY_FIRST = re.compile(
    r'^(\d{2})([/-])(\d{2})\2(\d{4})(?:[ T]+(\d{1,2}):(\d{2})(?::\d{2})?)?'
)

# YYYY/MM/DD, accepted by the generic fallback
_YEAR_FIRST_SLASH = re.compile(
    r'^(\d{4})/(\d{1,2})/(\d{1,2})(?:[ T]+(\d{1,2}):(\d{2})(?::\d{2})?)?$'
)


def _build(year: str, month: str, day: str,
           hour: Optional[str], minute: Optional[str]) -> Optional[datetime]:
    try:
        return datetime(
            int(year), int(month), int(day),
            int(hour) if hour else 0,
            int(minute) if minute else 0,
        )
    except ValueError:
        return None


def _parse_fallback(text: str) -> Optional[datetime]:
    iso_text = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        parsed = datetime.fromisoformat(iso_text)
    except ValueError:
        parsed = None

    if parsed is not None:
        if parsed.tzinfo is not None:
            # Convert to naive local time
            parsed = parsed.astimezone().replace(tzinfo=None)
        return parsed

    match = _YEAR_FIRST_SLASH.match(text)
    if match:
        year, month, day, hour, minute = match.groups()
        return _build(year, month, day, hour, minute)

    return None


def parse_flex_date(value: Any) -> Optional[datetime]:
    """
    Parse portal date text into a naive local datetime.

    Tries, in order:
    - "DD/MM/YYYY[ HH:mm]"
    - "DD-MM-YYYY[ HH:mm]"
    - ISO-8601 ("YYYY-MM-DD", "YYYY-MM-DDTHH:MM:SS[Z]") and "YYYY/MM/DD"

    Args:
        value: Date text (anything else yields None)

    Returns:
        Parsed datetime (midnight when no time is given), or None

    Examples:
        >>> parse_flex_date("05/03/2025 14:30")
        datetime.datetime(2025, 3, 5, 14, 30)
        >>> parse_flex_date("05-03-2025")
        datetime.datetime(2025, 3, 5, 0, 0)
        >>> parse_flex_date("not a date") is None
        True
    """
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    match = _DAY_FIRST.match(text)
    if match:
        day, _, month, year, hour, minute = match.groups()
        return _build(year, month, day, hour, minute)

    return _parse_fallback(text)


def to_date(value: Any) -> Optional[date]:
    """Coerce a date, datetime or date text to a calendar date (None if impossible)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parsed = parse_flex_date(value)
    return parsed.date() if parsed else None


def is_same_day(a: Optional[datetime], b: Optional[datetime]) -> bool:
    """Check whether two instants fall on the same calendar day."""
    if a is None or b is None:
        return False
    return a.date() == b.date()


def format_date(day: date) -> str:
    """Format a date as YYYY-MM-DD (the portal's query format)."""
    return day.strftime("%Y-%m-%d")
