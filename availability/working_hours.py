"""
Working-hours resolution: weekly schedule template + calendar date
-> ordered open intervals for that day.
"""

from datetime import date
from typing import List, Optional

from db.repository import AvailabilityRepository
from models.schedule import DayOfWeek, WeekdaySchedule
from models.slot import WorkingPeriod
from utils.datetime_utils import add_minutes, start_of_day
from utils.exceptions import ScheduleValidationError
from utils.logging_config import get_logger
from utils.validation import parse_time_of_day

logger = get_logger(__name__)


def _minutes(schedule: WeekdaySchedule, field: str) -> int:
    value = getattr(schedule, field)
    result = parse_time_of_day(value)
    if not result.ok:
        raise ScheduleValidationError(field, value, result.error)
    return result.minutes


def resolve_working_periods(
    schedule: Optional[WeekdaySchedule], target_date: date
) -> List[WorkingPeriod]:
    """
    Build the working periods of target_date from a schedule row.

    A break splits the shift in two. Periods are clipped to the shift and
    empty ones are dropped, so a zero-length shift yields nothing and a
    break outside the shift never adds working time.

    Raises:
        ScheduleValidationError: If a time string cannot be parsed or the
            break ends before it starts
    """
    if schedule is None or not schedule.is_active:
        return []

    midnight = start_of_day(target_date)
    shift_start = _minutes(schedule, "start_time")
    shift_end = _minutes(schedule, "end_time")

    bounds = [(shift_start, shift_end)]
    if schedule.has_break:
        break_start = _minutes(schedule, "break_start")
        break_end = _minutes(schedule, "break_end")
        if break_end < break_start:
            raise ScheduleValidationError(
                "break_end", schedule.break_end, f"ends before break_start {schedule.break_start}"
            )
        bounds = [
            (shift_start, min(break_start, shift_end)),
            (max(break_end, shift_start), shift_end),
        ]

    return [
        WorkingPeriod(start=add_minutes(midnight, start), end=add_minutes(midnight, end))
        for start, end in bounds
        if start < end
    ]


class WorkingHoursResolver:
    """Looks up a professional's schedule row and resolves it for a date."""

    def __init__(self, repository: AvailabilityRepository):
        self.repository = repository

    async def resolve(
        self, tenant_id: str, professional_id: str, target_date: date
    ) -> List[WorkingPeriod]:
        weekday = DayOfWeek.for_date(target_date)
        schedule = await self.repository.get_professional_schedule_for_weekday(
            tenant_id, professional_id, weekday
        )

        if schedule is None:
            logger.debug(
                f"No schedule for professional {professional_id} on {weekday.value}"
            )
            return []

        return resolve_working_periods(schedule, target_date)
