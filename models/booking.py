"""Appointment and time-off models read by the availability core."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class AppointmentStatus(str, Enum):
    """Appointment status."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


# Appointments in these statuses never occupy a professional's time
NON_BLOCKING_STATUSES = frozenset({AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW})


class BookedAppointment(BaseModel):
    """An existing appointment in a professional's agenda."""

    id: Optional[str] = None
    professional_id: Optional[str] = None
    professional_name: Optional[str] = None
    client_id: Optional[str] = None
    client_name: Optional[str] = None
    start: datetime = Field(..., description="Scheduled start (local time)")
    end: datetime = Field(..., description="Computed end (local time)")
    status: AppointmentStatus = AppointmentStatus.CONFIRMED

    class Config:
        json_schema_extra = {
            "example": {
                "id": "uuid-here",
                "professional_id": "uuid-here",
                "start": "2026-01-15T10:00:00",
                "end": "2026-01-15T11:00:00",
                "status": "CONFIRMED",
            }
        }


class TimeOffBlock(BaseModel):
    """Explicit time-off of a professional (vacation, leave, personal)."""

    id: Optional[str] = None
    professional_id: Optional[str] = None
    start: datetime
    end: datetime
    reason: Optional[str] = None
