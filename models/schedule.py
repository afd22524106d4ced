"""Weekly schedule models for professionals."""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class DayOfWeek(str, Enum):
    """Day of week as stored in schedule rows."""

    SUNDAY = "SUNDAY"
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"

    @classmethod
    def from_index(cls, index: int) -> "DayOfWeek":
        """Map platform weekday numbering (Sunday=0 ... Saturday=6) to a member."""
        if not 0 <= index <= 6:
            raise ValueError(f"Weekday index must be between 0 and 6, got {index}")
        return _PLATFORM_ORDER[index]

    @classmethod
    def for_date(cls, day: date) -> "DayOfWeek":
        return cls.from_index(platform_weekday(day))


_PLATFORM_ORDER = (
    DayOfWeek.SUNDAY,
    DayOfWeek.MONDAY,
    DayOfWeek.TUESDAY,
    DayOfWeek.WEDNESDAY,
    DayOfWeek.THURSDAY,
    DayOfWeek.FRIDAY,
    DayOfWeek.SATURDAY,
)


def platform_weekday(day: date) -> int:
    """
    Weekday number of day using platform numbering (Sunday=0 ... Saturday=6).

    Python's date.weekday() is ISO-like (Monday=0 ... Sunday=6).
    """
    return (day.weekday() + 1) % 7


class WeekdaySchedule(BaseModel):
    """Working hours of a professional for one day of the week."""

    id: Optional[str] = None
    professional_id: Optional[str] = None
    day_of_week: DayOfWeek
    start_time: str = Field(..., description="Shift start, HH:mm")
    end_time: str = Field(..., description="Shift end, HH:mm")
    break_start: Optional[str] = Field(None, description="Break start, HH:mm")
    break_end: Optional[str] = Field(None, description="Break end, HH:mm")
    is_active: bool = True

    @property
    def has_break(self) -> bool:
        return bool(self.break_start and self.break_end)

    class Config:
        json_schema_extra = {
            "example": {
                "day_of_week": "MONDAY",
                "start_time": "09:00",
                "end_time": "18:00",
                "break_start": "12:00",
                "break_end": "13:00",
                "is_active": True,
            }
        }
