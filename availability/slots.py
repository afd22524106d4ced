"""
Slot generation and filtering.

Pure in-memory stage of the pipeline: steps through working periods to
produce candidate slots, then drops the ones that are too soon, too far
ahead, or that collide with an obstruction.
"""

from datetime import datetime, timedelta
from typing import Iterable, List

from models.availability_config import AvailabilityConfig
from models.slot import AvailableSlot, CandidateSlot, Obstruction, WorkingPeriod
from utils.validation import require_positive_minutes


def intervals_overlap(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    """Half-open overlap test; touching intervals do not overlap."""
    return a_start < b_end and b_start < a_end


def generate_candidate_slots(
    periods: Iterable[WorkingPeriod], duration: int, slot_interval: int
) -> List[CandidateSlot]:
    """
    Enumerate fixed-length slots inside each working period.

    A slot ending exactly at the period end is valid. Slots never span two
    periods, and periods are processed in the given order.

    Raises:
        InvalidDurationError: If duration or slot_interval is not positive
    """
    length = timedelta(minutes=require_positive_minutes(duration, "duration"))
    step = timedelta(minutes=require_positive_minutes(slot_interval, "slot_interval"))

    slots: List[CandidateSlot] = []
    for period in periods:
        cursor = period.start
        while cursor + length <= period.end:
            slots.append(CandidateSlot(start=cursor, end=cursor + length))
            cursor += step

    return slots


def _widen(obstruction: Obstruction, buffer: timedelta) -> tuple:
    return obstruction.start - buffer, obstruction.end + buffer


def filter_available_slots(
    candidates: Iterable[CandidateSlot],
    appointments: Iterable[Obstruction],
    blocks: Iterable[Obstruction],
    config: AvailabilityConfig,
    now: datetime,
) -> List[AvailableSlot]:
    """
    Keep the candidates that can still be booked.

    Rules, per slot: start not before now + min advance, start not after
    now + max advance, no overlap with an appointment widened by the buffer
    on both sides, no overlap with a time-off block.

    Returns:
        AvailableSlots in candidate order
    """
    earliest = now + timedelta(minutes=config.min_advance_booking_minutes)
    latest = now + timedelta(minutes=config.max_advance_booking_minutes)
    buffer = timedelta(minutes=config.buffer_between_appointments_minutes)

    busy = [_widen(appointment, buffer) for appointment in appointments]
    blocked = [(block.start, block.end) for block in blocks]

    available: List[AvailableSlot] = []
    for slot in candidates:
        if slot.start < earliest:
            continue

        if slot.start > latest:
            continue

        if any(intervals_overlap(slot.start, slot.end, s, e) for s, e in busy):
            continue

        if any(intervals_overlap(slot.start, slot.end, s, e) for s, e in blocked):
            continue

        available.append(
            AvailableSlot(
                start=slot.start,
                end=slot.end,
                professional_id=config.professional_id,
                professional_name=config.professional_name,
            )
        )

    return available
