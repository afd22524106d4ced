"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple
from unittest.mock import MagicMock, patch

import pytest

from db.repository import AvailabilityRepository
from models.availability_config import ProfessionalConfigOverrides, TenantDefaultConfig
from models.booking import BookedAppointment, TimeOffBlock
from models.schedule import DayOfWeek, WeekdaySchedule
from models.service import Professional, Service, total_duration

TENANT_ID = "tenant_1"
PROFESSIONAL_ID = "pro_1"

# Sunday morning; the following Monday is 2026-10-19
FROZEN_NOW = datetime(2026, 10, 18, 8, 0)


@pytest.fixture(autouse=True)
def mock_settings():
    """Mock settings for all tests."""
    with patch("config.settings") as mock_settings:
        mock_settings.supabase_url = "https://test.supabase.co"
        mock_settings.supabase_key = "test_key"
        mock_settings.timezone = "Europe/Prague"
        mock_settings.availability_range_concurrency = 4
        mock_settings.log_level = "INFO"
        mock_settings.log_file = None
        mock_settings.log_dir = "logs"
        yield mock_settings


@pytest.fixture
def mock_supabase_client():
    """Create a mock Supabase client."""
    mock_client = MagicMock()
    mock_table = MagicMock()
    mock_client.table.return_value = mock_table
    return mock_client, mock_table


class InMemoryRepository(AvailabilityRepository):
    """Repository backed by plain dicts and lists, mirroring the storage filters."""

    def __init__(self):
        self.schedules: Dict[Tuple[str, DayOfWeek], WeekdaySchedule] = {}
        self.overrides: Dict[str, ProfessionalConfigOverrides] = {}
        self.tenant_defaults = TenantDefaultConfig()
        self.appointments: List[BookedAppointment] = []
        self.blocks: List[TimeOffBlock] = []
        self.services: Dict[str, Service] = {}
        self.professionals: Dict[str, Professional] = {}
        self.error: Optional[Exception] = None

    def add_schedule(
        self,
        professional_id: str,
        day: DayOfWeek,
        start: str,
        end: str,
        break_start: Optional[str] = None,
        break_end: Optional[str] = None,
        is_active: bool = True,
    ) -> None:
        self.schedules[(professional_id, day)] = WeekdaySchedule(
            professional_id=professional_id,
            day_of_week=day,
            start_time=start,
            end_time=end,
            break_start=break_start,
            break_end=break_end,
            is_active=is_active,
        )

    def add_appointment(self, start: datetime, end: datetime, **fields) -> BookedAppointment:
        fields.setdefault("id", f"apt_{len(self.appointments) + 1}")
        fields.setdefault("professional_id", PROFESSIONAL_ID)
        appointment = BookedAppointment(start=start, end=end, **fields)
        self.appointments.append(appointment)
        return appointment

    def add_block(self, start: datetime, end: datetime, **fields) -> TimeOffBlock:
        fields.setdefault("id", f"block_{len(self.blocks) + 1}")
        fields.setdefault("professional_id", PROFESSIONAL_ID)
        block = TimeOffBlock(start=start, end=end, **fields)
        self.blocks.append(block)
        return block

    def _check(self):
        if self.error is not None:
            raise self.error

    async def get_professional_schedule_for_weekday(self, tenant_id, professional_id, weekday):
        self._check()
        schedule = self.schedules.get((professional_id, weekday))
        if schedule is None or not schedule.is_active:
            return None
        return schedule

    async def get_professional_config_overrides(self, tenant_id, professional_id):
        self._check()
        return self.overrides.get(professional_id, ProfessionalConfigOverrides())

    async def get_tenant_default_config(self, tenant_id):
        self._check()
        return self.tenant_defaults

    async def get_booked_appointments(
        self, tenant_id, professional_id, day_start, day_end, exclude_statuses: Iterable[str]
    ):
        self._check()
        excluded = set(exclude_statuses)
        return [
            a
            for a in self.appointments
            if a.professional_id == professional_id
            and day_start <= a.start <= day_end
            and a.status.value not in excluded
        ]

    async def get_time_off_blocks(self, tenant_id, professional_id, day_start, day_end):
        self._check()
        return [
            b
            for b in self.blocks
            if b.professional_id == professional_id and b.end >= day_start and b.start <= day_end
        ]

    async def get_service_durations(self, tenant_id, service_ids):
        self._check()
        return total_duration([self.services[sid] for sid in service_ids if sid in self.services])

    async def get_professional(self, tenant_id, professional_id):
        self._check()
        return self.professionals.get(professional_id)

    async def find_overlapping_appointments(
        self,
        tenant_id,
        start,
        end,
        *,
        professional_id=None,
        client_id=None,
        exclude_statuses=(),
        exclude_appointment_id=None,
    ):
        self._check()
        excluded = set(exclude_statuses)
        return [
            a
            for a in self.appointments
            if a.start < end
            and a.end > start
            and (professional_id is None or a.professional_id == professional_id)
            and (client_id is None or a.client_id == client_id)
            and a.id != exclude_appointment_id
            and a.status.value not in excluded
        ]


@pytest.fixture
def repository():
    """Repository with a Monday-Friday 09:00-18:00 professional and two services."""
    repo = InMemoryRepository()
    for day in (
        DayOfWeek.MONDAY,
        DayOfWeek.TUESDAY,
        DayOfWeek.WEDNESDAY,
        DayOfWeek.THURSDAY,
        DayOfWeek.FRIDAY,
    ):
        repo.add_schedule(PROFESSIONAL_ID, day, "09:00", "18:00")

    repo.professionals[PROFESSIONAL_ID] = Professional(id=PROFESSIONAL_ID, name="Jana Novakova")
    repo.overrides[PROFESSIONAL_ID] = ProfessionalConfigOverrides(
        professional_name="Jana Novakova"
    )
    repo.services["svc_haircut"] = Service(id="svc_haircut", name="Haircut", duration_minutes=60)
    repo.services["svc_wash"] = Service(id="svc_wash", name="Wash", duration_minutes=30)
    repo.services["svc_retired"] = Service(
        id="svc_retired", name="Retired", duration_minutes=45, active=False
    )
    return repo


@pytest.fixture
def frozen_clock():
    """Clock fixed at FROZEN_NOW."""
    return lambda: FROZEN_NOW
