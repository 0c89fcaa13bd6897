"""Calendar-date helpers shared by the engine and the records client."""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, tzinfo


def parse_calendar_date(value: str | date | datetime, tz: tzinfo | None = None) -> date:
    """Normalize an ISO-8601 string, datetime, or date to a calendar date.

    Timezone-aware instants are converted to ``tz`` before truncation, so
    ``2024-01-01T23:30:00-05:00`` is January 2nd in UTC.  Naive datetimes are
    taken as already local.

    Args:
        value: ``YYYY-MM-DD``, a full ISO-8601 timestamp (``Z`` allowed),
               a datetime, or a date.
        tz:    Zone the calendar is kept in.  None keeps the instant's own
               offset.

    Returns:
        The calendar date (midnight-normalized).

    Raises:
        ValueError: If the string is not ISO-8601.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return value
    else:
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        if len(text) == 10:
            return date.fromisoformat(text)
        dt = datetime.fromisoformat(text)

    if dt.tzinfo is not None and tz is not None:
        dt = dt.astimezone(tz)
    return dt.date()


def days_between(start: date, end: date) -> int:
    """Signed whole days from ``start`` to ``end``."""
    return (end - start).days


def inclusive_length(start: date, end: date) -> int:
    """Inclusive day count of a span; reversed spans count by magnitude."""
    return abs((end - start).days) + 1


def add_days(day: date, n: int) -> date:
    return day + timedelta(days=n)


def round_half_up(value: float) -> int:
    # 29.5 -> 30, where round() would give the even neighbour
    return math.floor(value + 0.5)
