"""
Unit tests for time-of-day parsing and minute validators.
"""

import pytest

from utils.exceptions import InvalidDurationError, ValidationError
from utils.validation import (
    parse_time_of_day,
    require_non_negative_minutes,
    require_positive_minutes,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        ("00:00", 0),
        ("09:00", 540),
        ("9:30", 570),
        ("23:59", 1439),
        ("24:00", 1440),
    ],
)
def test_parse_time_of_day_valid(value, expected):
    """Test parsing valid HH:mm strings."""
    result = parse_time_of_day(value)

    assert result.ok
    assert result.minutes == expected


@pytest.mark.parametrize("value", ["", "9", "09:60", "25:00", "24:30", "ab:cd", "09:00:00", None, 900])
def test_parse_time_of_day_invalid(value):
    """Test that malformed input yields an error instead of raising."""
    result = parse_time_of_day(value)

    assert not result.ok
    assert result.minutes is None
    assert result.error


def test_require_positive_minutes():
    """Test positive minute validation."""
    assert require_positive_minutes(30, "duration") == 30

    with pytest.raises(InvalidDurationError):
        require_positive_minutes(0, "duration")

    with pytest.raises(InvalidDurationError):
        require_positive_minutes(True, "duration")


def test_require_non_negative_minutes():
    """Test non-negative minute validation."""
    assert require_non_negative_minutes(0, "buffer") == 0

    with pytest.raises(ValidationError):
        require_non_negative_minutes(-5, "buffer")


def test_invalid_duration_is_validation_error():
    """Test exception hierarchy."""
    assert issubclass(InvalidDurationError, ValidationError)
