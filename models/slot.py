"""Interval and slot models produced by the availability pipeline."""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class _Interval(BaseModel):
    """Half-open [start, end) interval; start must precede end."""

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def check_start_before_end(self):
        if self.start >= self.end:
            raise ValueError(f"Interval start {self.start} must be before end {self.end}")
        return self

    def contains(self, start: datetime, end: datetime) -> bool:
        """Boundary-inclusive containment of [start, end]."""
        return self.start <= start and end <= self.end


class WorkingPeriod(_Interval):
    """One contiguous open interval of a professional on one calendar day."""


class CandidateSlot(_Interval):
    """Fixed-length hypothetical booking generated from a working period."""


class ObstructionKind(str, Enum):
    """Source of an obstruction."""

    APPOINTMENT = "APPOINTMENT"
    BLOCK = "BLOCK"


class Obstruction(_Interval):
    """Interval during which the professional cannot take a booking."""

    kind: ObstructionKind
    reason: Optional[str] = None
    appointment_id: Optional[str] = None


class AvailableSlot(BaseModel):
    """Bookable slot returned to callers."""

    start: datetime
    end: datetime
    available: bool = True
    professional_id: str
    professional_name: str = ""

    class Config:
        json_schema_extra = {
            "example": {
                "start": "2026-01-15T10:00:00",
                "end": "2026-01-15T11:00:00",
                "available": True,
                "professional_id": "uuid-here",
                "professional_name": "Jana Novakova",
            }
        }


class DayAvailability(BaseModel):
    """Day-level availability summary of a range query."""

    date: date
    available: bool
    total_slots: int = Field(..., ge=0)
    slots: Optional[List[AvailableSlot]] = None


class ProfessionalAvailability(BaseModel):
    """Availability of one professional on one day."""

    professional_id: str
    professional_name: str
    date: date
    slots: List[AvailableSlot] = Field(default_factory=list)
    is_available: bool
