"""
Unit tests for the Supabase availability repository.
Tests with mocked Supabase API calls.
"""

from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest

from db.supabase_client import SupabaseAvailabilityRepository
from models.booking import AppointmentStatus
from models.schedule import DayOfWeek
from utils.exceptions import DatabaseError


def _query(data):
    """Chainable PostgREST query mock whose execute() returns data."""
    query = MagicMock()
    for method in ("select", "eq", "neq", "in_", "gte", "lte", "lt", "gt", "order", "limit"):
        getattr(query, method).return_value = query
    query.not_ = query
    query.execute.return_value = MagicMock(data=data)
    return query


@pytest.fixture
def repo_settings(mock_settings):
    """Settings seen by the repository module."""
    mock_settings.validate_all_required = MagicMock()
    with patch("db.supabase_client.settings", mock_settings):
        yield mock_settings


@pytest.fixture
def supabase_repository(repo_settings, mock_supabase_client):
    """Create SupabaseAvailabilityRepository with mocked client."""
    mock_client, _ = mock_supabase_client
    with patch("db.supabase_client.create_client", return_value=mock_client) as create:
        repository = SupabaseAvailabilityRepository()
        create.assert_called_once_with("https://test.supabase.co", "test_key")
        return repository


def test_init_validates_settings(repo_settings, mock_supabase_client):
    """Missing credentials fail before a client is created."""
    repo_settings.validate_all_required.side_effect = ValueError("Missing supabase_url")

    with patch("db.supabase_client.create_client") as create:
        with pytest.raises(ValueError):
            SupabaseAvailabilityRepository()

        create.assert_not_called()


@pytest.mark.asyncio
async def test_get_schedule_found(supabase_repository, mock_supabase_client):
    """Test getting a schedule row."""
    mock_client, _ = mock_supabase_client
    query = _query(
        [
            {
                "id": "sch_1",
                "professional_id": "pro_1",
                "day_of_week": "MONDAY",
                "start_time": "09:00",
                "end_time": "18:00",
                "break_start": "12:00",
                "break_end": "13:00",
                "is_active": True,
            }
        ]
    )
    mock_client.table.return_value = query

    schedule = await supabase_repository.get_professional_schedule_for_weekday(
        "tenant_1", "pro_1", DayOfWeek.MONDAY
    )

    mock_client.table.assert_called_with("professional_schedules")
    query.eq.assert_any_call("day_of_week", "MONDAY")
    assert schedule.day_of_week == DayOfWeek.MONDAY
    assert schedule.has_break is True


@pytest.mark.asyncio
async def test_get_schedule_not_found(supabase_repository, mock_supabase_client):
    """Test a weekday without a schedule row."""
    mock_client, _ = mock_supabase_client
    mock_client.table.return_value = _query([])

    schedule = await supabase_repository.get_professional_schedule_for_weekday(
        "tenant_1", "pro_1", DayOfWeek.SUNDAY
    )

    assert schedule is None


@pytest.mark.asyncio
async def test_get_config_overrides_cached(supabase_repository, mock_supabase_client):
    """Professional config is read once and then served from cache."""
    mock_client, _ = mock_supabase_client
    mock_client.table.return_value = _query(
        [{"id": "pro_1", "name": "Jana", "slot_interval": 15, "buffer_time": None}]
    )

    first = await supabase_repository.get_professional_config_overrides("tenant_1", "pro_1")
    second = await supabase_repository.get_professional_config_overrides("tenant_1", "pro_1")

    assert first.slot_interval == 15
    assert first.buffer_minutes is None
    assert first.professional_name == "Jana"
    assert second is first
    assert mock_client.table.call_count == 1


@pytest.mark.asyncio
async def test_get_tenant_default_config_missing(supabase_repository, mock_supabase_client):
    """A tenant without a settings row has nothing configured."""
    mock_client, _ = mock_supabase_client
    mock_client.table.return_value = _query([])

    defaults = await supabase_repository.get_tenant_default_config("tenant_1")

    assert defaults.min_advance_booking_minutes is None
    assert defaults.default_slot_interval is None


@pytest.mark.asyncio
async def test_get_service_durations(supabase_repository, mock_supabase_client):
    """Test summing service durations."""
    mock_client, _ = mock_supabase_client
    query = _query([{"id": "svc_1", "duration": 60}, {"id": "svc_2", "duration": 30}])
    mock_client.table.return_value = query

    total = await supabase_repository.get_service_durations("tenant_1", ["svc_1", "svc_2"])

    assert total == 90
    query.in_.assert_called_once_with("id", ["svc_1", "svc_2"])


@pytest.mark.asyncio
async def test_get_service_durations_empty(supabase_repository, mock_supabase_client):
    """No ids means no query."""
    mock_client, _ = mock_supabase_client

    assert await supabase_repository.get_service_durations("tenant_1", []) == 0
    mock_client.table.assert_not_called()


@pytest.mark.asyncio
async def test_get_booked_appointments_converts_to_local(
    supabase_repository, mock_supabase_client
):
    """Stored UTC timestamps come back as naive local time."""
    mock_client, _ = mock_supabase_client
    query = _query(
        [
            {
                "id": "apt_1",
                "professional_id": "pro_1",
                "scheduled_at": "2026-10-19T08:00:00+00:00",
                "end_time": "2026-10-19T09:00:00Z",
                "status": "CONFIRMED",
            }
        ]
    )
    mock_client.table.return_value = query

    appointments = await supabase_repository.get_booked_appointments(
        "tenant_1",
        "pro_1",
        datetime(2026, 10, 19, 0, 0),
        datetime(2026, 10, 19, 23, 59),
        [AppointmentStatus.CANCELLED, "NO_SHOW"],
    )

    assert len(appointments) == 1
    assert appointments[0].start == datetime(2026, 10, 19, 10, 0)
    assert appointments[0].end == datetime(2026, 10, 19, 11, 0)
    assert appointments[0].status == AppointmentStatus.CONFIRMED
    query.gte.assert_called_once_with("scheduled_at", "2026-10-18T22:00:00+00:00")
    query.in_.assert_called_once_with("status", ["CANCELLED", "NO_SHOW"])


@pytest.mark.asyncio
async def test_get_time_off_blocks(supabase_repository, mock_supabase_client):
    """Test parsing time-off blocks."""
    mock_client, _ = mock_supabase_client
    mock_client.table.return_value = _query(
        [
            {
                "id": "block_1",
                "professional_id": "pro_1",
                "start_time": "2026-10-19T12:00:00+00:00",
                "end_time": "2026-10-19T13:00:00+00:00",
                "reason": "Training",
            }
        ]
    )

    blocks = await supabase_repository.get_time_off_blocks(
        "tenant_1", "pro_1", datetime(2026, 10, 19, 0, 0), datetime(2026, 10, 19, 23, 59)
    )

    assert blocks[0].start == datetime(2026, 10, 19, 14, 0)
    assert blocks[0].reason == "Training"


@pytest.mark.asyncio
async def test_find_overlapping_appointments_filters(supabase_repository, mock_supabase_client):
    """Test optional filters of the overlap query."""
    mock_client, _ = mock_supabase_client
    query = _query([])
    mock_client.table.return_value = query

    result = await supabase_repository.find_overlapping_appointments(
        "tenant_1",
        datetime(2026, 10, 19, 10, 0),
        datetime(2026, 10, 19, 11, 0),
        client_id="client_1",
        exclude_appointment_id="apt_1",
    )

    assert result == []
    query.eq.assert_any_call("client_id", "client_1")
    query.neq.assert_called_once_with("id", "apt_1")
    query.lt.assert_called_once_with("scheduled_at", "2026-10-19T09:00:00+00:00")
    query.gt.assert_called_once_with("end_time", "2026-10-19T08:00:00+00:00")


@pytest.mark.asyncio
async def test_get_professional_error(supabase_repository, mock_supabase_client):
    """Test error handling when the API call fails."""
    mock_client, _ = mock_supabase_client
    mock_client.table.side_effect = Exception("Database error")

    with pytest.raises(DatabaseError, match="Failed to get professional"):
        await supabase_repository.get_professional("tenant_1", "pro_1")
