"""
Supabase implementation of the availability repository.
Reads schedules, appointments, time-off blocks and settings through PostgREST.

Expected tables (tenant-scoped through tenant_id where noted):
------------------------------------------------------------
professionals            id, tenant_id, name, slot_interval, buffer_time, active
professional_schedules   professional_id, day_of_week, start_time, end_time,
                         break_start, break_end, is_active
professional_time_blocks professional_id, start_time, end_time, reason
tenant_settings          tenant_id, min_advance_booking, max_advance_booking,
                         default_slot_interval
appointments             id, tenant_id, professional_id, client_id,
                         scheduled_at, end_time, status
services                 id, tenant_id, duration, active

Timestamps are stored as timestamptz; they are converted to naive local time
in settings.timezone before leaving this module.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from supabase import Client as SupabaseClientType
from supabase import create_client

from config import settings
from db.repository import AvailabilityRepository
from models.availability_config import ProfessionalConfigOverrides, TenantDefaultConfig
from models.booking import BookedAppointment, TimeOffBlock
from models.schedule import DayOfWeek, WeekdaySchedule
from models.service import Professional, Service, total_duration
from utils.datetime_utils import (
    local_to_utc,
    parse_iso_datetime,
    to_iso_string,
    to_local_naive,
    utc_now,
)
from utils.exceptions import DatabaseError
from utils.logging_config import get_logger

logger = get_logger(__name__)


class SupabaseAvailabilityRepository(AvailabilityRepository):
    """
    Supabase-backed availability repository.

    Uses the service_role key; tenant isolation is enforced by filtering on
    tenant_id in every tenant-scoped query.

    Includes a simple in-memory cache for configuration rows, which change
    rarely and are read once per availability pipeline.
    """

    def __init__(self, tz_name: Optional[str] = None):
        settings.validate_all_required()
        self.client: SupabaseClientType = create_client(
            settings.supabase_url, settings.supabase_key
        )
        self.tz_name = tz_name or settings.timezone

        # Format: {cache_key: (data, expiry_time)}
        self._cache: Dict[str, Tuple[Any, datetime]] = {}
        self._cache_ttl = timedelta(minutes=5)

    # ========== Cache Helpers ==========

    def _get_from_cache(self, key: str) -> Optional[Any]:
        """Get value from cache if not expired."""
        if key not in self._cache:
            return None

        data, expiry = self._cache[key]
        if utc_now() > expiry:
            del self._cache[key]
            return None

        return data

    def _set_cache(self, key: str, value: Any) -> None:
        """Set value in cache with TTL."""
        self._cache[key] = (value, utc_now() + self._cache_ttl)

    # ========== Schedule & Configuration ==========

    async def get_professional_schedule_for_weekday(
        self, tenant_id: str, professional_id: str, weekday: DayOfWeek
    ) -> Optional[WeekdaySchedule]:
        try:
            response = (
                self.client.table("professional_schedules")
                .select("*")
                .eq("professional_id", professional_id)
                .eq("day_of_week", weekday.value)
                .eq("is_active", True)
                .limit(1)
                .execute()
            )

            if response.data:
                return WeekdaySchedule(**response.data[0])
            return None
        except Exception as e:
            raise DatabaseError(f"Failed to get professional schedule: {e}") from e

    async def get_professional_config_overrides(
        self, tenant_id: str, professional_id: str
    ) -> ProfessionalConfigOverrides:
        cache_key = f"professional_config:{tenant_id}:{professional_id}"
        cached = self._get_from_cache(cache_key)
        if cached is not None:
            return cached

        try:
            response = (
                self.client.table("professionals")
                .select("id, name, slot_interval, buffer_time")
                .eq("tenant_id", tenant_id)
                .eq("id", professional_id)
                .execute()
            )

            if not response.data:
                return ProfessionalConfigOverrides()

            row = response.data[0]
            overrides = ProfessionalConfigOverrides(
                professional_name=row.get("name"),
                slot_interval=row.get("slot_interval"),
                buffer_minutes=row.get("buffer_time"),
            )
            self._set_cache(cache_key, overrides)
            return overrides
        except Exception as e:
            raise DatabaseError(f"Failed to get professional config: {e}") from e

    async def get_tenant_default_config(self, tenant_id: str) -> TenantDefaultConfig:
        cache_key = f"tenant_config:{tenant_id}"
        cached = self._get_from_cache(cache_key)
        if cached is not None:
            return cached

        try:
            response = (
                self.client.table("tenant_settings")
                .select("min_advance_booking, max_advance_booking, default_slot_interval")
                .eq("tenant_id", tenant_id)
                .execute()
            )

            if not response.data:
                return TenantDefaultConfig()

            row = response.data[0]
            defaults = TenantDefaultConfig(
                min_advance_booking_minutes=row.get("min_advance_booking"),
                max_advance_booking_minutes=row.get("max_advance_booking"),
                default_slot_interval=row.get("default_slot_interval"),
            )
            self._set_cache(cache_key, defaults)
            return defaults
        except Exception as e:
            raise DatabaseError(f"Failed to get tenant settings: {e}") from e

    async def get_professional(
        self, tenant_id: str, professional_id: str
    ) -> Optional[Professional]:
        try:
            response = (
                self.client.table("professionals")
                .select("id, name, active")
                .eq("tenant_id", tenant_id)
                .eq("id", professional_id)
                .execute()
            )

            if response.data:
                return Professional(**response.data[0])
            return None
        except Exception as e:
            raise DatabaseError(f"Failed to get professional: {e}") from e

    async def get_service_durations(self, tenant_id: str, service_ids: List[str]) -> int:
        if not service_ids:
            return 0

        try:
            response = (
                self.client.table("services")
                .select("id, duration, active")
                .eq("tenant_id", tenant_id)
                .eq("active", True)
                .in_("id", service_ids)
                .execute()
            )

            services = [
                Service(
                    id=item.get("id"),
                    duration_minutes=item["duration"],
                    active=item.get("active", True),
                )
                for item in response.data
            ]
            return total_duration(services)
        except Exception as e:
            raise DatabaseError(f"Failed to get service durations: {e}") from e

    # ========== Obstructions ==========

    async def get_booked_appointments(
        self,
        tenant_id: str,
        professional_id: str,
        day_start: datetime,
        day_end: datetime,
        exclude_statuses: Iterable[str],
    ) -> List[BookedAppointment]:
        try:
            query = (
                self.client.table("appointments")
                .select("*")
                .eq("tenant_id", tenant_id)
                .eq("professional_id", professional_id)
                .gte("scheduled_at", self._to_storage(day_start))
                .lte("scheduled_at", self._to_storage(day_end))
            )

            excluded = [_status_value(s) for s in exclude_statuses]
            if excluded:
                query = query.not_.in_("status", excluded)

            response = query.order("scheduled_at", desc=False).execute()
            return [self._parse_appointment(item) for item in response.data]
        except Exception as e:
            raise DatabaseError(f"Failed to get booked appointments: {e}") from e

    async def get_time_off_blocks(
        self,
        tenant_id: str,
        professional_id: str,
        day_start: datetime,
        day_end: datetime,
    ) -> List[TimeOffBlock]:
        try:
            # A block touches the day when it ends at/after the day start and
            # starts at/before the day end; this also covers blocks spanning it
            response = (
                self.client.table("professional_time_blocks")
                .select("*")
                .eq("professional_id", professional_id)
                .gte("end_time", self._to_storage(day_start))
                .lte("start_time", self._to_storage(day_end))
                .order("start_time", desc=False)
                .execute()
            )

            return [self._parse_block(item) for item in response.data]
        except Exception as e:
            raise DatabaseError(f"Failed to get time-off blocks: {e}") from e

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
        try:
            query = (
                self.client.table("appointments")
                .select("*")
                .eq("tenant_id", tenant_id)
                .lt("scheduled_at", self._to_storage(end))
                .gt("end_time", self._to_storage(start))
            )

            if professional_id:
                query = query.eq("professional_id", professional_id)
            if client_id:
                query = query.eq("client_id", client_id)
            if exclude_appointment_id:
                query = query.neq("id", exclude_appointment_id)

            excluded = [_status_value(s) for s in exclude_statuses]
            if excluded:
                query = query.not_.in_("status", excluded)

            response = query.order("scheduled_at", desc=False).execute()
            return [self._parse_appointment(item) for item in response.data]
        except Exception as e:
            raise DatabaseError(f"Failed to find overlapping appointments: {e}") from e

    # ========== Helper Methods ==========

    def _to_storage(self, local_dt: datetime) -> str:
        """Naive local datetime -> UTC ISO string for PostgREST filters."""
        return to_iso_string(local_to_utc(local_dt, self.tz_name))

    def _from_storage(self, value: Any) -> datetime:
        """Stored timestamp -> naive local datetime."""
        if isinstance(value, str):
            value = parse_iso_datetime(value)
        return to_local_naive(value, self.tz_name)

    def _parse_appointment(self, item: dict) -> BookedAppointment:
        """
        Parse appointment data from database response.

        Args:
            item: Raw appointment row

        Returns:
            Parsed BookedAppointment object
        """
        return BookedAppointment(
            id=item.get("id"),
            professional_id=item.get("professional_id"),
            client_id=item.get("client_id"),
            client_name=item.get("client_name"),
            start=self._from_storage(item["scheduled_at"]),
            end=self._from_storage(item["end_time"]),
            status=item["status"],
        )

    def _parse_block(self, item: dict) -> TimeOffBlock:
        return TimeOffBlock(
            id=item.get("id"),
            professional_id=item.get("professional_id"),
            start=self._from_storage(item["start_time"]),
            end=self._from_storage(item["end_time"]),
            reason=item.get("reason"),
        )


def _status_value(status: Any) -> str:
    return getattr(status, "value", status)


# Global repository instance
_db_client: Optional[SupabaseAvailabilityRepository] = None


def get_db_client() -> SupabaseAvailabilityRepository:
    """Get or create the repository instance."""
    global _db_client
    if _db_client is None:
        _db_client = SupabaseAvailabilityRepository()
    return _db_client
