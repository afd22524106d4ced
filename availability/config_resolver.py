"""
Three-tier resolution of availability settings.

Professional override wins over tenant default, which wins over the
hardcoded fallback.
"""

from typing import Optional

from models.availability_config import (
    AvailabilityConfig,
    ProfessionalConfigOverrides,
    TenantDefaultConfig,
)
from utils.constants import (
    DEFAULT_BUFFER_MINUTES,
    DEFAULT_MAX_ADVANCE_BOOKING_MINUTES,
    DEFAULT_MIN_ADVANCE_BOOKING_MINUTES,
    DEFAULT_SLOT_INTERVAL_MINUTES,
)
from utils.validation import require_non_negative_minutes, require_positive_minutes

DEFAULT_AVAILABILITY = {
    "slot_interval": DEFAULT_SLOT_INTERVAL_MINUTES,
    "min_advance_booking_minutes": DEFAULT_MIN_ADVANCE_BOOKING_MINUTES,
    "max_advance_booking_minutes": DEFAULT_MAX_ADVANCE_BOOKING_MINUTES,
    "buffer_between_appointments_minutes": DEFAULT_BUFFER_MINUTES,
}


def _first_set(*values):
    for value in values:
        if value is not None:
            return value
    return None


def resolve_availability_config(
    professional_id: str,
    overrides: Optional[ProfessionalConfigOverrides],
    tenant_defaults: Optional[TenantDefaultConfig],
    fallback: Optional[dict] = None,
) -> AvailabilityConfig:
    """
    Merge the configuration layers of one professional.

    Args:
        professional_id: Professional the config belongs to
        overrides: Professional-level values (None fields are unset)
        tenant_defaults: Tenant-level values (None fields are unset)
        fallback: Hardcoded values; defaults to DEFAULT_AVAILABILITY

    Returns:
        Effective AvailabilityConfig

    Raises:
        ValidationError: If a resolved value is out of range
    """
    overrides = overrides or ProfessionalConfigOverrides()
    tenant_defaults = tenant_defaults or TenantDefaultConfig()
    fallback = {**DEFAULT_AVAILABILITY, **(fallback or {})}

    slot_interval = _first_set(
        overrides.slot_interval,
        tenant_defaults.default_slot_interval,
        fallback["slot_interval"],
    )
    min_advance = _first_set(
        tenant_defaults.min_advance_booking_minutes,
        fallback["min_advance_booking_minutes"],
    )
    max_advance = _first_set(
        tenant_defaults.max_advance_booking_minutes,
        fallback["max_advance_booking_minutes"],
    )
    buffer = _first_set(
        overrides.buffer_minutes,
        fallback["buffer_between_appointments_minutes"],
    )

    return AvailabilityConfig(
        professional_id=professional_id,
        professional_name=overrides.professional_name or "",
        slot_interval=require_positive_minutes(slot_interval, "slot_interval"),
        min_advance_booking_minutes=require_non_negative_minutes(
            min_advance, "min_advance_booking_minutes"
        ),
        max_advance_booking_minutes=require_non_negative_minutes(
            max_advance, "max_advance_booking_minutes"
        ),
        buffer_between_appointments_minutes=require_non_negative_minutes(
            buffer, "buffer_between_appointments_minutes"
        ),
    )
