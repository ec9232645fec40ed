from __future__ import annotations

import datetime as dt
import uuid
from typing import Optional, Tuple

UTC = dt.timezone.utc


def utcnow() -> dt.datetime:
    return dt.datetime.now(UTC)


def as_utc(value: dt.datetime) -> dt.datetime:
    """Attach UTC to naive values (as SQLite returns them) or convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def as_utc_optional(value: Optional[dt.datetime]) -> Optional[dt.datetime]:
    if value is None:
        return None
    return as_utc(value)


def day_key(value: dt.datetime) -> str:
    """Return the UTC calendar day of a timestamp as ``YYYY-MM-DD``."""
    return as_utc(value).date().isoformat()


def calendar_day(value: dt.date) -> dt.date:
    """Return the date of a date or, for timestamps, their UTC date."""
    if isinstance(value, dt.datetime):
        return as_utc(value).date()
    return value


def day_start(day: dt.date) -> dt.datetime:
    return dt.datetime(day.year, day.month, day.day, tzinfo=UTC)


def year_bounds(year: int) -> Tuple[dt.datetime, dt.datetime]:
    """Return the first and the last instant of ``year`` in UTC."""
    first = dt.datetime(year, 1, 1, tzinfo=UTC)
    last = dt.datetime(year, 12, 31, 23, 59, 59, 999999, tzinfo=UTC)
    return first, last


def parse_uuid(value: Optional[str]) -> Optional[str]:
    """Return the canonical form of a UUID string or None when it is not one."""
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        return str(uuid.UUID(text))
    except ValueError:
        return None
