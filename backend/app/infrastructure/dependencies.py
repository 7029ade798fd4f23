"""Composition root — wires infrastructure adapters to the application layer."""

import httpx

from app.application.interfaces import AuthProvider, RecordStore
from app.application.services import (
    CountAggregator,
    QueryExecutor,
    ViewStateManager,
    WriteCoordinator,
)
from app.config import Settings, get_settings
from app.infrastructure.supabase import SupabaseAuthClient, SupabaseRecordStore


def get_http_client(settings: Settings | None = None) -> httpx.AsyncClient:
    """Provides the shared pooled HTTP client for all Supabase adapters."""
    settings = settings or get_settings()
    return httpx.AsyncClient(timeout=settings.store_timeout_seconds)


def get_auth_client(
    http_client: httpx.AsyncClient, settings: Settings | None = None
) -> SupabaseAuthClient:
    settings = settings or get_settings()
    return SupabaseAuthClient(
        base_url=settings.supabase_url,
        anon_key=settings.supabase_anon_key,
        http_client=http_client,
    )


def get_record_store(
    http_client: httpx.AsyncClient,
    auth: SupabaseAuthClient,
    settings: Settings | None = None,
) -> SupabaseRecordStore:
    """Provides a record store authorized with the auth client's current token."""
    settings = settings or get_settings()
    return SupabaseRecordStore(
        base_url=settings.supabase_url,
        anon_key=settings.supabase_anon_key,
        access_token=lambda: auth.access_token,
        http_client=http_client,
    )


def get_view_state_manager(
    store: RecordStore, settings: Settings | None = None
) -> ViewStateManager:
    """Provides a ViewStateManager with executor, counts and writer wired up."""
    settings = settings or get_settings()
    executor = QueryExecutor(
        store,
        result_limit=settings.result_limit,
        global_min_chars=settings.global_search_min_chars,
    )
    writer = WriteCoordinator(
        store,
        restricted_marker=settings.restricted_name_marker,
        duplicate_markers=settings.duplicate_name_markers,
    )
    return ViewStateManager(
        executor,
        CountAggregator(store),
        writer,
        debounce_seconds=settings.debounce_seconds,
    )


async def bind_session(auth: AuthProvider, manager: ViewStateManager):
    """Seed the manager with the current session and follow later changes.

    Returns the unsubscribe callable from the auth provider.
    """
    session = await auth.get_session()
    if session is not None:
        manager.on_session_change(session)
    return auth.on_session_change(manager.on_session_change)
