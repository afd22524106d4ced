"""Availability configuration layers (professional, tenant, resolved)."""

from typing import Optional

from pydantic import BaseModel, Field


class ProfessionalConfigOverrides(BaseModel):
    """Per-professional settings; None means "not configured"."""

    professional_name: Optional[str] = None
    slot_interval: Optional[int] = Field(None, description="Slot step in minutes")
    buffer_minutes: Optional[int] = Field(None, description="Gap between appointments")


class TenantDefaultConfig(BaseModel):
    """Tenant-wide booking settings; None means "not configured"."""

    min_advance_booking_minutes: Optional[int] = None
    max_advance_booking_minutes: Optional[int] = None
    default_slot_interval: Optional[int] = None


class AvailabilityConfig(BaseModel):
    """Effective configuration for one professional."""

    professional_id: str
    professional_name: str = ""
    slot_interval: int = Field(..., gt=0)
    min_advance_booking_minutes: int = Field(..., ge=0)
    max_advance_booking_minutes: int = Field(..., ge=0)
    buffer_between_appointments_minutes: int = Field(0, ge=0)
