"""Models describing booking conflicts."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ConflictType(str, Enum):
    """Kind of booking conflict."""

    PROFESSIONAL_BUSY = "PROFESSIONAL_BUSY"
    CLIENT_BUSY = "CLIENT_BUSY"
    OUTSIDE_WORKING_HOURS = "OUTSIDE_WORKING_HOURS"
    BLOCKED_TIME = "BLOCKED_TIME"
    INSUFFICIENT_ADVANCE = "INSUFFICIENT_ADVANCE"
    EXCEEDS_MAX_ADVANCE = "EXCEEDS_MAX_ADVANCE"


class ConflictSeverity(str, Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"


class AppointmentConflict(BaseModel):
    """A single reason why a booking cannot (or should not) be made."""

    type: ConflictType
    severity: ConflictSeverity
    start: datetime
    end: datetime
    description: str
    appointment_id: Optional[str] = None


class ConflictCheckParams(BaseModel):
    """Booking to validate."""

    tenant_id: str
    professional_id: str
    client_id: Optional[str] = None
    start_time: datetime
    duration: int = Field(..., gt=0, description="Duration in minutes")
    exclude_appointment_id: Optional[str] = None


class ConflictCheckResult(BaseModel):
    """Outcome of a conflict check."""

    has_conflict: bool
    conflicts: List[AppointmentConflict] = Field(default_factory=list)
    can_override: bool = True
