"""Date manipulation utilities"""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Mapping, Optional


def to_date(value: Any) -> Optional[date]:
    """
    Coerce a stored timestamp into a calendar date.

    Accepts date/datetime objects, ISO-8601 strings, epoch seconds and
    document-store timestamp mappings ({"seconds": n, "nanoseconds": m}).
    Anything else yields None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float, Decimal)):
        return _from_epoch(float(value))
    if isinstance(value, str):
        try:
            return to_date(datetime.fromisoformat(value.replace("Z", "+00:00")))
        except ValueError:
            return None
    if isinstance(value, Mapping):
        seconds = value.get("seconds", value.get("_seconds"))
        if isinstance(seconds, (int, float)) and not isinstance(seconds, bool):
            return _from_epoch(float(seconds))
    return None


def _from_epoch(seconds: float) -> Optional[date]:
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc).date()
    except (OverflowError, OSError, ValueError):
        return None


def days_between(start: date, end: date) -> int:
    """
    Whole calendar days from start to end (negative if start is after end).

    Datetimes are reduced to their UTC date first, so date and datetime
    arguments can be mixed.
    """
    return (to_date(end) - to_date(start)).days
