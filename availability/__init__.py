"""Availability core: working hours, obstructions, slots and conflicts."""

from .config_resolver import DEFAULT_AVAILABILITY, resolve_availability_config
from .conflicts import ConflictChecker, determine_can_override
from .obstructions import ObstructionCollector, ObstructionSet
from .service import AvailabilityService
from .slots import filter_available_slots, generate_candidate_slots, intervals_overlap
from .working_hours import WorkingHoursResolver, resolve_working_periods

__all__ = [
    "AvailabilityService",
    "ConflictChecker",
    "DEFAULT_AVAILABILITY",
    "ObstructionCollector",
    "ObstructionSet",
    "WorkingHoursResolver",
    "determine_can_override",
    "filter_available_slots",
    "generate_candidate_slots",
    "intervals_overlap",
    "resolve_availability_config",
    "resolve_working_periods",
]
