"""
Datetime utilities for consistent time handling across the availability core.

Storage timestamps are timezone-aware (UTC); availability arithmetic runs on
naive datetimes in the salon's local wall-clock time.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """
    Get current UTC time as timezone-aware datetime.

    Returns:
        Current UTC datetime with timezone info
    """
    return datetime.now(timezone.utc)


def local_now(tz_name: Optional[str] = None) -> datetime:
    """
    Get the current naive wall-clock time in the salon timezone.

    Args:
        tz_name: IANA timezone name; defaults to settings.timezone

    Returns:
        Naive datetime in local time
    """
    if tz_name is None:
        from config import settings

        tz_name = settings.timezone
    return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)


def parse_iso_datetime(iso_string: str) -> datetime:
    """
    Parse ISO format datetime string to timezone-aware datetime.
    Handles both 'Z' suffix and '+00:00' timezone formats.

    Args:
        iso_string: ISO format datetime string

    Returns:
        Timezone-aware datetime object

    Raises:
        ValueError: If datetime string cannot be parsed
    """
    normalized = iso_string.replace("Z", "+00:00")

    try:
        dt = datetime.fromisoformat(normalized)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt
    except ValueError as e:
        raise ValueError(f"Invalid datetime string: {iso_string}") from e


def to_iso_string(dt: datetime) -> str:
    """
    Convert datetime to ISO format string.
    Naive datetimes are treated as UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    return dt.isoformat()


def to_local_naive(dt: datetime, tz_name: str) -> datetime:
    """Convert an aware datetime to naive wall-clock time in tz_name."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(ZoneInfo(tz_name)).replace(tzinfo=None)


def local_to_utc(dt: datetime, tz_name: str) -> datetime:
    """Interpret a naive local datetime in tz_name and convert it to UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=ZoneInfo(tz_name))
    return dt.astimezone(timezone.utc)


def start_of_day(day: date) -> datetime:
    """Midnight at the beginning of day."""
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    """Last representable instant of day (23:59:59.999999)."""
    return datetime.combine(day, time.max)


def add_minutes(dt: datetime, minutes: int) -> datetime:
    return dt + timedelta(minutes=minutes)


def iter_days(start: date, end: date):
    """Yield every calendar day in [start, end], inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
