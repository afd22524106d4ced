"""Pydantic models for data validation and serialization."""

from .availability_config import (
    AvailabilityConfig,
    ProfessionalConfigOverrides,
    TenantDefaultConfig,
)
from .booking import (
    NON_BLOCKING_STATUSES,
    AppointmentStatus,
    BookedAppointment,
    TimeOffBlock,
)
from .conflict import (
    AppointmentConflict,
    ConflictCheckParams,
    ConflictCheckResult,
    ConflictSeverity,
    ConflictType,
)
from .schedule import DayOfWeek, WeekdaySchedule, platform_weekday
from .service import Professional, Service
from .slot import (
    AvailableSlot,
    CandidateSlot,
    DayAvailability,
    Obstruction,
    ObstructionKind,
    ProfessionalAvailability,
    WorkingPeriod,
)

__all__ = [
    "AppointmentConflict",
    "AppointmentStatus",
    "AvailabilityConfig",
    "AvailableSlot",
    "BookedAppointment",
    "CandidateSlot",
    "ConflictCheckParams",
    "ConflictCheckResult",
    "ConflictSeverity",
    "ConflictType",
    "DayAvailability",
    "DayOfWeek",
    "NON_BLOCKING_STATUSES",
    "Obstruction",
    "ObstructionKind",
    "Professional",
    "ProfessionalAvailability",
    "ProfessionalConfigOverrides",
    "Service",
    "TenantDefaultConfig",
    "TimeOffBlock",
    "WeekdaySchedule",
    "WorkingPeriod",
    "platform_weekday",
]
