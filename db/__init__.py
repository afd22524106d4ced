"""Persistence interface and Supabase implementation."""

from .repository import AvailabilityRepository
from .supabase_client import SupabaseAvailabilityRepository, get_db_client

__all__ = ["AvailabilityRepository", "SupabaseAvailabilityRepository", "get_db_client"]
