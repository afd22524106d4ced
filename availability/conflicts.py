"""
Conflict checking for a concrete booking request.

Where is_slot_available answers yes/no, the checker explains every reason a
booking collides with the agenda, so staff can decide whether to override.
"""

import asyncio
from datetime import date, datetime, timedelta
from typing import List, Optional

from availability.config_resolver import resolve_availability_config
from availability.obstructions import block_touches_day
from availability.slots import intervals_overlap
from availability.working_hours import resolve_working_periods
from db.repository import AvailabilityRepository
from models.availability_config import AvailabilityConfig
from models.booking import NON_BLOCKING_STATUSES
from models.conflict import (
    AppointmentConflict,
    ConflictCheckParams,
    ConflictCheckResult,
    ConflictSeverity,
    ConflictType,
)
from models.schedule import DayOfWeek
from utils.constants import MINUTES_IN_DAY
from utils.datetime_utils import end_of_day, local_now, start_of_day
from utils.logging_config import get_logger

logger = get_logger(__name__)

# Conflicts of these types can never be overridden when they are errors
NON_OVERRIDABLE_TYPES = frozenset({ConflictType.PROFESSIONAL_BUSY, ConflictType.CLIENT_BUSY})

_EXCLUDED_STATUS_VALUES = [status.value for status in NON_BLOCKING_STATUSES]


def _hhmm(value: datetime) -> str:
    return value.strftime("%H:%M")


def determine_can_override(conflicts: List[AppointmentConflict]) -> bool:
    """Working-hours, block and advance conflicts may be overridden by staff."""
    return not any(
        conflict.type in NON_OVERRIDABLE_TYPES and conflict.severity == ConflictSeverity.ERROR
        for conflict in conflicts
    )


class ConflictChecker:
    """Validates a booking request against a professional's agenda."""

    def __init__(self, repository: AvailabilityRepository, clock=None):
        self.repository = repository
        self.clock = clock or local_now

    async def check_conflicts(self, params: ConflictCheckParams) -> ConflictCheckResult:
        start = params.start_time
        end = start + timedelta(minutes=params.duration)

        overrides, tenant_defaults = await asyncio.gather(
            self.repository.get_professional_config_overrides(
                params.tenant_id, params.professional_id
            ),
            self.repository.get_tenant_default_config(params.tenant_id),
        )
        config = resolve_availability_config(params.professional_id, overrides, tenant_defaults)

        checks = [
            self._professional_conflicts(params, start, end, config),
            self._blocked_time_conflicts(params, start, end),
            self._working_hours_conflicts(params, start, end),
        ]
        if params.client_id:
            checks.append(self._client_conflicts(params, start, end))

        conflicts: List[AppointmentConflict] = []
        for found in await asyncio.gather(*checks):
            conflicts.extend(found)

        advance = self._advance_conflict(start, config)
        if advance:
            conflicts.append(advance)

        if conflicts:
            logger.info(
                f"Booking for professional {params.professional_id} at {start.isoformat()} "
                f"has {len(conflicts)} conflict(s)"
            )

        return ConflictCheckResult(
            has_conflict=len(conflicts) > 0,
            conflicts=conflicts,
            can_override=determine_can_override(conflicts),
        )

    async def _professional_conflicts(
        self,
        params: ConflictCheckParams,
        start: datetime,
        end: datetime,
        config: AvailabilityConfig,
    ) -> List[AppointmentConflict]:
        buffer = timedelta(minutes=config.buffer_between_appointments_minutes)
        appointments = await self.repository.find_overlapping_appointments(
            params.tenant_id,
            start - buffer,
            end + buffer,
            professional_id=params.professional_id,
            exclude_statuses=_EXCLUDED_STATUS_VALUES,
            exclude_appointment_id=params.exclude_appointment_id,
        )

        return [
            AppointmentConflict(
                type=ConflictType.PROFESSIONAL_BUSY,
                severity=ConflictSeverity.ERROR,
                start=appointment.start,
                end=appointment.end,
                appointment_id=appointment.id,
                description=(
                    f"Professional already has an appointment"
                    f"{' with ' + appointment.client_name if appointment.client_name else ''}"
                    f" from {_hhmm(appointment.start)} to {_hhmm(appointment.end)}"
                ),
            )
            for appointment in appointments
            if appointment.status not in NON_BLOCKING_STATUSES
        ]

    async def _client_conflicts(
        self, params: ConflictCheckParams, start: datetime, end: datetime
    ) -> List[AppointmentConflict]:
        appointments = await self.repository.find_overlapping_appointments(
            params.tenant_id,
            start,
            end,
            client_id=params.client_id,
            exclude_statuses=_EXCLUDED_STATUS_VALUES,
            exclude_appointment_id=params.exclude_appointment_id,
        )

        return [
            AppointmentConflict(
                type=ConflictType.CLIENT_BUSY,
                severity=ConflictSeverity.WARNING,
                start=appointment.start,
                end=appointment.end,
                appointment_id=appointment.id,
                description=(
                    f"Client already has an appointment"
                    f"{' with ' + appointment.professional_name if appointment.professional_name else ''}"
                    f" from {_hhmm(appointment.start)} to {_hhmm(appointment.end)}"
                ),
            )
            for appointment in appointments
            if appointment.status not in NON_BLOCKING_STATUSES
        ]

    async def _blocked_time_conflicts(
        self, params: ConflictCheckParams, start: datetime, end: datetime
    ) -> List[AppointmentConflict]:
        day: date = start.date()
        blocks = await self.repository.get_time_off_blocks(
            params.tenant_id, params.professional_id, start_of_day(day), end_of_day(day)
        )

        return [
            AppointmentConflict(
                type=ConflictType.BLOCKED_TIME,
                severity=ConflictSeverity.ERROR,
                start=block.start,
                end=block.end,
                description=block.reason or "Time blocked by the professional",
            )
            for block in blocks
            if block_touches_day(block, start_of_day(day), end_of_day(day))
            and intervals_overlap(start, end, block.start, block.end)
        ]

    async def _working_hours_conflicts(
        self, params: ConflictCheckParams, start: datetime, end: datetime
    ) -> List[AppointmentConflict]:
        day = start.date()
        schedule = await self.repository.get_professional_schedule_for_weekday(
            params.tenant_id, params.professional_id, DayOfWeek.for_date(day)
        )
        periods = resolve_working_periods(schedule, day)

        if not periods:
            return [
                AppointmentConflict(
                    type=ConflictType.OUTSIDE_WORKING_HOURS,
                    severity=ConflictSeverity.ERROR,
                    start=start,
                    end=end,
                    description="Professional does not work on this day",
                )
            ]

        if any(period.contains(start, end) for period in periods):
            return []

        shift_start, shift_end = periods[0].start, periods[-1].end
        if start < shift_start or end > shift_end or len(periods) == 1:
            return [
                AppointmentConflict(
                    type=ConflictType.OUTSIDE_WORKING_HOURS,
                    severity=ConflictSeverity.ERROR,
                    start=start,
                    end=end,
                    description=(
                        f"Outside working hours ({_hhmm(shift_start)} - {_hhmm(shift_end)})"
                    ),
                )
            ]

        break_start, break_end = periods[0].end, periods[1].start
        return [
            AppointmentConflict(
                type=ConflictType.OUTSIDE_WORKING_HOURS,
                severity=ConflictSeverity.ERROR,
                start=break_start,
                end=break_end,
                description=(
                    f"Overlaps the professional's break "
                    f"({_hhmm(break_start)} - {_hhmm(break_end)})"
                ),
            )
        ]

    def _advance_conflict(
        self, start: datetime, config: AvailabilityConfig
    ) -> Optional[AppointmentConflict]:
        minutes_until = (start - self.clock()).total_seconds() / 60

        if minutes_until < config.min_advance_booking_minutes:
            return AppointmentConflict(
                type=ConflictType.INSUFFICIENT_ADVANCE,
                severity=ConflictSeverity.ERROR,
                start=start,
                end=start,
                description=(
                    f"Booking requires at least {config.min_advance_booking_minutes} "
                    f"minutes of advance notice"
                ),
            )

        if minutes_until > config.max_advance_booking_minutes:
            return AppointmentConflict(
                type=ConflictType.EXCEEDS_MAX_ADVANCE,
                severity=ConflictSeverity.ERROR,
                start=start,
                end=start,
                description=(
                    f"Booking cannot be made more than "
                    f"{config.max_advance_booking_minutes // MINUTES_IN_DAY} days in advance"
                ),
            )

        return None
