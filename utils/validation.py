"""
Input validation utilities for schedule data and availability parameters.
"""

import re
from typing import NamedTuple, Optional

from utils.constants import MINUTES_IN_DAY
from utils.exceptions import InvalidDurationError, ValidationError

_TIME_OF_DAY_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


class TimeOfDayResult(NamedTuple):
    """Outcome of parsing an "HH:mm" string: either minutes or an error."""

    minutes: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_time_of_day(value: Optional[str]) -> TimeOfDayResult:
    """
    Parse an "HH:mm" string into minutes after midnight.

    Accepts hours 0-23 and minutes 0-59, plus "24:00" for end of day.
    Never raises; malformed input yields a result carrying an error message.

    Args:
        value: Time string from a schedule row

    Returns:
        TimeOfDayResult with either minutes or error set
    """
    if not isinstance(value, str):
        return TimeOfDayResult(error="expected an 'HH:mm' string")

    match = _TIME_OF_DAY_PATTERN.match(value.strip())
    if not match:
        return TimeOfDayResult(error="expected format 'HH:mm'")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes > 59:
        return TimeOfDayResult(error="minutes must be between 00 and 59")
    if hours == 24 and minutes == 0:
        return TimeOfDayResult(minutes=MINUTES_IN_DAY)
    if hours > 23:
        return TimeOfDayResult(error="hours must be between 00 and 23")

    return TimeOfDayResult(minutes=hours * 60 + minutes)


def require_positive_minutes(value: int, name: str) -> int:
    """
    Ensure a duration-like value is a positive number of minutes.

    Raises:
        InvalidDurationError: If value is not a positive integer
    """
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidDurationError(f"{name} must be a positive number of minutes, got {value!r}")
    return value


def require_non_negative_minutes(value: int, name: str) -> int:
    """
    Ensure a window/buffer value is zero or more minutes.

    Raises:
        ValidationError: If value is negative or not an integer
    """
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"{name} must be zero or more minutes, got {value!r}")
    return value
