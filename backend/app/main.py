"""Application entry point — builds the directory client and manages its lifetime."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx

from app.application.services import ViewStateManager
from app.config import Settings, get_settings
from app.infrastructure.dependencies import (
    bind_session,
    get_auth_client,
    get_http_client,
    get_record_store,
    get_view_state_manager,
)
from app.infrastructure.logging.log_config import setup_logging
from app.infrastructure.supabase import SupabaseAuthClient, SupabaseRecordStore

logger = logging.getLogger(__name__)


@dataclass
class DirectoryRuntime:
    """Everything a presentation layer needs: auth, store and the synced view."""

    settings: Settings
    auth: SupabaseAuthClient
    store: SupabaseRecordStore
    view: ViewStateManager


@asynccontextmanager
async def directory_lifespan(
    settings: Settings | None = None,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> AsyncIterator[DirectoryRuntime]:
    """Startup / shutdown for the directory client.

    Startup: configure logging, build adapters on one pooled HTTP client,
    bind the view to the current session and to future session changes.
    Shutdown: unsubscribe, cancel debounce timers and in-flight fetches,
    close the HTTP client if it was created here.
    """
    settings = settings or get_settings()
    setup_logging(settings)
    logger.info("Starting %s v%s (%s)", settings.app_title, settings.app_version, settings.app_env)

    owns_client = http_client is None
    client = http_client or get_http_client(settings)
    auth = get_auth_client(client, settings)
    store = get_record_store(client, auth, settings)
    view = get_view_state_manager(store, settings)
    unsubscribe = await bind_session(auth, view)

    try:
        yield DirectoryRuntime(settings=settings, auth=auth, store=store, view=view)
    finally:
        unsubscribe()
        await view.aclose()
        if owns_client:
            await client.aclose()
        logger.info("Directory client stopped")
