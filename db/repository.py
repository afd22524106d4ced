"""
Read-only persistence interface consumed by the availability core.

All datetimes crossing this interface are naive local wall-clock times of
the salon. Implementations decide how to reach storage; failures propagate
to the caller unchanged.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional

from models.availability_config import ProfessionalConfigOverrides, TenantDefaultConfig
from models.booking import BookedAppointment, TimeOffBlock
from models.schedule import DayOfWeek, WeekdaySchedule
from models.service import Professional


class AvailabilityRepository(ABC):
    """Queries the availability core needs from the persistence layer."""

    @abstractmethod
    async def get_professional_schedule_for_weekday(
        self, tenant_id: str, professional_id: str, weekday: DayOfWeek
    ) -> Optional[WeekdaySchedule]:
        """Active schedule row of the professional for weekday, or None."""

    @abstractmethod
    async def get_professional_config_overrides(
        self, tenant_id: str, professional_id: str
    ) -> ProfessionalConfigOverrides:
        """Professional-level overrides; all fields None when nothing is set."""

    @abstractmethod
    async def get_tenant_default_config(self, tenant_id: str) -> TenantDefaultConfig:
        """Tenant-level booking defaults; all fields None when nothing is set."""

    @abstractmethod
    async def get_booked_appointments(
        self,
        tenant_id: str,
        professional_id: str,
        day_start: datetime,
        day_end: datetime,
        exclude_statuses: Iterable[str],
    ) -> List[BookedAppointment]:
        """Appointments starting within [day_start, day_end] not in exclude_statuses."""

    @abstractmethod
    async def get_time_off_blocks(
        self,
        tenant_id: str,
        professional_id: str,
        day_start: datetime,
        day_end: datetime,
    ) -> List[TimeOffBlock]:
        """Time-off blocks touching [day_start, day_end] (inclusive bounds)."""

    @abstractmethod
    async def get_service_durations(self, tenant_id: str, service_ids: List[str]) -> int:
        """Total duration in minutes of the active services among service_ids."""

    @abstractmethod
    async def get_professional(
        self, tenant_id: str, professional_id: str
    ) -> Optional[Professional]:
        """Professional display metadata, or None if unknown."""

    @abstractmethod
    async def find_overlapping_appointments(
        self,
        tenant_id: str,
        start: datetime,
        end: datetime,
        *,
        professional_id: Optional[str] = None,
        client_id: Optional[str] = None,
        exclude_statuses: Iterable[str] = (),
        exclude_appointment_id: Optional[str] = None,
    ) -> List[BookedAppointment]:
        """
        Appointments with appointment.start < end and appointment.end > start.

        Filters by professional and/or client when given.
        """
