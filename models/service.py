"""Salon service and professional models."""

from typing import Optional

from pydantic import BaseModel, Field


class Service(BaseModel):
    """Service offered by a tenant."""

    id: Optional[str] = None
    name: str = ""
    duration_minutes: int = Field(..., ge=0, le=1440, description="Duration in minutes")
    active: bool = True

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Classic Manicure",
                "duration_minutes": 60,
                "active": True,
            }
        }


class Professional(BaseModel):
    """Professional whose agenda is being queried."""

    id: str
    name: str = ""
    active: bool = True


def total_duration(services: list[Service]) -> int:
    """Sum the durations of the active services."""
    return sum(service.duration_minutes for service in services if service.active)
