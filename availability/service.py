"""
Availability service: bookable slots for professionals.

Composes the pipeline working hours + obstructions -> candidate slots ->
filtered slots, and the range / multi-professional / point queries built
on top of it.
"""

import asyncio
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional, Sequence

from availability.config_resolver import resolve_availability_config
from availability.obstructions import ObstructionCollector, block_touches_day
from availability.slots import (
    filter_available_slots,
    generate_candidate_slots,
    intervals_overlap,
)
from availability.working_hours import WorkingHoursResolver
from config import settings
from db.repository import AvailabilityRepository
from models.availability_config import AvailabilityConfig
from models.booking import NON_BLOCKING_STATUSES
from models.slot import AvailableSlot, DayAvailability, ProfessionalAvailability
from utils.constants import (
    DEFAULT_SERVICE_DURATION_MINUTES,
    NEXT_SLOTS_DEFAULT_LIMIT,
    NEXT_SLOTS_MAX_DAYS,
)
from utils.datetime_utils import end_of_day, iter_days, local_now, start_of_day
from utils.exceptions import InvalidDurationError, ValidationError
from utils.logging_config import get_logger
from utils.validation import require_positive_minutes

logger = get_logger(__name__)

Clock = Callable[[], datetime]


class AvailabilityService:
    """
    Computes availability of professionals from data read through a repository.

    The clock returns the current naive local time; inject a fixed one to
    make results reproducible.
    """

    def __init__(
        self,
        repository: Optional[AvailabilityRepository] = None,
        clock: Optional[Clock] = None,
        range_concurrency: Optional[int] = None,
    ):
        if repository is None:
            from db import get_db_client

            repository = get_db_client()

        self.repository = repository
        self.clock = clock or local_now
        self.range_concurrency = max(
            1, range_concurrency or settings.availability_range_concurrency
        )
        self.working_hours = WorkingHoursResolver(repository)
        self.obstructions = ObstructionCollector(repository)

    async def get_config(self, tenant_id: str, professional_id: str) -> AvailabilityConfig:
        """Resolve the effective availability configuration of a professional."""
        overrides, tenant_defaults = await asyncio.gather(
            self.repository.get_professional_config_overrides(tenant_id, professional_id),
            self.repository.get_tenant_default_config(tenant_id),
        )
        return resolve_availability_config(professional_id, overrides, tenant_defaults)

    async def calculate_services_duration(
        self, tenant_id: str, service_ids: Optional[Sequence[str]]
    ) -> int:
        """
        Total duration of the requested services.

        Returns the default duration when no service is named.

        Raises:
            InvalidDurationError: If none of the services is active
        """
        if not service_ids:
            return DEFAULT_SERVICE_DURATION_MINUTES

        total = await self.repository.get_service_durations(tenant_id, list(service_ids))
        if total <= 0:
            raise InvalidDurationError(
                f"Services {list(service_ids)} have no active duration for tenant {tenant_id}"
            )
        return total

    async def get_available_slots(
        self,
        tenant_id: str,
        professional_id: str,
        service_ids: Optional[Sequence[str]],
        target_date: date,
        duration: Optional[int] = None,
    ) -> List[AvailableSlot]:
        """
        Bookable slots of a professional on one day.

        Args:
            tenant_id: Tenant ID
            professional_id: Professional ID
            service_ids: Services to book; their durations are summed
            target_date: Local calendar date
            duration: Precomputed duration in minutes (skips the service lookup)

        Returns:
            Available slots ordered by start time; empty when the
            professional does not work that day
        """
        logger.debug(
            f"Calculating availability for professional {professional_id} "
            f"on {target_date.isoformat()}"
        )

        if duration is None:
            duration = await self.calculate_services_duration(tenant_id, service_ids)
        require_positive_minutes(duration, "duration")

        config, periods, obstructions = await asyncio.gather(
            self.get_config(tenant_id, professional_id),
            self.working_hours.resolve(tenant_id, professional_id, target_date),
            self.obstructions.collect(tenant_id, professional_id, target_date),
        )

        if not periods:
            logger.debug(
                f"No working hours found for professional {professional_id} "
                f"on {target_date.isoformat()}"
            )
            return []

        candidates = generate_candidate_slots(periods, duration, config.slot_interval)
        return filter_available_slots(
            candidates,
            obstructions.appointments,
            obstructions.blocks,
            config,
            self.clock(),
        )

    async def get_availability_range(
        self,
        tenant_id: str,
        professional_id: str,
        service_ids: Optional[Sequence[str]],
        start_date: date,
        end_date: date,
        include_slots: bool = False,
    ) -> List[DayAvailability]:
        """
        Day-by-day availability over [start_date, end_date], inclusive.

        Days are computed concurrently, bounded by range_concurrency; the
        result is in date order.
        """
        if start_date > end_date:
            raise ValidationError(
                f"start_date {start_date.isoformat()} is after end_date {end_date.isoformat()}"
            )

        duration = await self.calculate_services_duration(tenant_id, service_ids)
        semaphore = asyncio.Semaphore(self.range_concurrency)

        async def day_availability(day: date) -> DayAvailability:
            async with semaphore:
                slots = await self.get_available_slots(
                    tenant_id, professional_id, service_ids, day, duration=duration
                )
            return DayAvailability(
                date=day,
                available=len(slots) > 0,
                total_slots=len(slots),
                slots=slots if include_slots else None,
            )

        return list(
            await asyncio.gather(*(day_availability(day) for day in iter_days(start_date, end_date)))
        )

    async def get_professionals_availability(
        self,
        tenant_id: str,
        professional_ids: Sequence[str],
        service_ids: Optional[Sequence[str]],
        target_date: date,
    ) -> List[ProfessionalAvailability]:
        """
        Availability of several professionals on one day.

        Unknown professionals are skipped; input order is preserved.
        """
        duration = await self.calculate_services_duration(tenant_id, service_ids)
        semaphore = asyncio.Semaphore(self.range_concurrency)

        async def professional_availability(
            professional_id: str,
        ) -> Optional[ProfessionalAvailability]:
            async with semaphore:
                professional = await self.repository.get_professional(
                    tenant_id, professional_id
                )
                if professional is None:
                    logger.debug(f"Professional {professional_id} not found, skipping")
                    return None

                slots = await self.get_available_slots(
                    tenant_id, professional_id, service_ids, target_date, duration=duration
                )

            return ProfessionalAvailability(
                professional_id=professional_id,
                professional_name=professional.name,
                date=target_date,
                slots=slots,
                is_available=len(slots) > 0,
            )

        results = await asyncio.gather(
            *(professional_availability(pid) for pid in professional_ids)
        )
        return [result for result in results if result is not None]

    async def is_slot_available(
        self,
        tenant_id: str,
        professional_id: str,
        start_time: datetime,
        duration: int,
        exclude_appointment_id: Optional[str] = None,
    ) -> bool:
        """
        Check one specific slot against working hours, blocks and appointments.

        Advance-booking limits are not applied. exclude_appointment_id lets a
        reschedule ignore the appointment being moved.
        """
        require_positive_minutes(duration, "duration")
        end_time = start_time + timedelta(minutes=duration)
        target_date = start_time.date()

        periods, blocks, config = await asyncio.gather(
            self.working_hours.resolve(tenant_id, professional_id, target_date),
            self.repository.get_time_off_blocks(
                tenant_id, professional_id, start_of_day(target_date), end_of_day(target_date)
            ),
            self.get_config(tenant_id, professional_id),
        )

        if not any(period.contains(start_time, end_time) for period in periods):
            return False

        if any(
            intervals_overlap(start_time, end_time, block.start, block.end)
            for block in blocks
            if block_touches_day(block, start_of_day(target_date), end_of_day(target_date))
        ):
            return False

        buffer = timedelta(minutes=config.buffer_between_appointments_minutes)
        conflicts = await self.repository.find_overlapping_appointments(
            tenant_id,
            start_time - buffer,
            end_time + buffer,
            professional_id=professional_id,
            exclude_statuses=[status.value for status in NON_BLOCKING_STATUSES],
            exclude_appointment_id=exclude_appointment_id,
        )

        return not any(
            appointment.status not in NON_BLOCKING_STATUSES
            and (exclude_appointment_id is None or appointment.id != exclude_appointment_id)
            for appointment in conflicts
        )

    async def get_next_available_slots(
        self,
        tenant_id: str,
        professional_id: str,
        service_ids: Optional[Sequence[str]],
        limit: int = NEXT_SLOTS_DEFAULT_LIMIT,
        start_from: Optional[date] = None,
        max_days: int = NEXT_SLOTS_MAX_DAYS,
    ) -> List[AvailableSlot]:
        """
        First `limit` available slots, searching forward day by day.

        The search starts at start_from (default: today) and gives up after
        max_days days.
        """
        if limit <= 0:
            return []

        day = start_from or self.clock().date()
        duration = await self.calculate_services_duration(tenant_id, service_ids)

        found: List[AvailableSlot] = []
        for _ in range(max_days):
            slots = await self.get_available_slots(
                tenant_id, professional_id, service_ids, day, duration=duration
            )
            found.extend(slots[: limit - len(found)])
            if len(found) >= limit:
                break
            day += timedelta(days=1)

        return found
