"""Supabase infrastructure package."""

from .supabase_auth_client import SupabaseAuthClient
from .supabase_record_store import SupabaseRecordStore

__all__ = ["SupabaseAuthClient", "SupabaseRecordStore"]
