"""
Obstruction collection: existing appointments and time-off blocks that
remove a professional's availability on a given day.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List

from db.repository import AvailabilityRepository
from models.booking import NON_BLOCKING_STATUSES, BookedAppointment, TimeOffBlock
from models.slot import Obstruction, ObstructionKind
from utils.datetime_utils import end_of_day, start_of_day
from utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ObstructionSet:
    """Appointment and block obstructions of one professional/day."""

    appointments: List[Obstruction] = field(default_factory=list)
    blocks: List[Obstruction] = field(default_factory=list)


def block_touches_day(block: TimeOffBlock, day_start: datetime, day_end: datetime) -> bool:
    """Inclusive test; also true for blocks spanning the whole day."""
    return block.end >= day_start and block.start <= day_end


def appointment_obstruction(appointment: BookedAppointment) -> Obstruction:
    return Obstruction(
        start=appointment.start,
        end=appointment.end,
        kind=ObstructionKind.APPOINTMENT,
        appointment_id=appointment.id,
    )


def block_obstruction(block: TimeOffBlock) -> Obstruction:
    return Obstruction(
        start=block.start,
        end=block.end,
        kind=ObstructionKind.BLOCK,
        reason=block.reason,
    )


class ObstructionCollector:
    """Gathers the obstructions of a professional for one day."""

    def __init__(self, repository: AvailabilityRepository):
        self.repository = repository

    async def collect(
        self, tenant_id: str, professional_id: str, target_date: date
    ) -> ObstructionSet:
        """
        Fetch booked appointments and time-off blocks concurrently.

        Cancelled and no-show appointments are excluded. A professional with
        no bookings simply yields empty lists.
        """
        day_start = start_of_day(target_date)
        day_end = end_of_day(target_date)

        appointments, blocks = await asyncio.gather(
            self.repository.get_booked_appointments(
                tenant_id,
                professional_id,
                day_start,
                day_end,
                [status.value for status in NON_BLOCKING_STATUSES],
            ),
            self.repository.get_time_off_blocks(
                tenant_id, professional_id, day_start, day_end
            ),
        )

        obstructions = ObstructionSet()

        for appointment in appointments:
            if appointment.status in NON_BLOCKING_STATUSES:
                continue
            if appointment.start >= appointment.end:
                logger.warning(
                    f"Skipping appointment {appointment.id} with non-positive duration"
                )
                continue
            obstructions.appointments.append(appointment_obstruction(appointment))

        for block in blocks:
            if not block_touches_day(block, day_start, day_end):
                continue
            if block.start >= block.end:
                logger.warning(f"Skipping time-off block {block.id} with non-positive duration")
                continue
            obstructions.blocks.append(block_obstruction(block))

        logger.debug(
            f"Collected {len(obstructions.appointments)} appointments and "
            f"{len(obstructions.blocks)} blocks for professional {professional_id} "
            f"on {target_date.isoformat()}"
        )
        return obstructions
