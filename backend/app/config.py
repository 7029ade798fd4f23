import logging
from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

_config_logger = logging.getLogger(__name__)

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Name Directory"
    app_version: str = "0.1.0"
    app_env: str = "development"

    # Supabase backend (PostgREST + GoTrue)
    supabase_url: str = "http://localhost:54321"
    supabase_anon_key: str = ""
    store_timeout_seconds: float = 30.0

    # Query synchronization
    debounce_ms: int = 250
    result_limit: int = 200
    global_search_min_chars: int = 2

    # Markers the store puts in rejection messages (matched case-insensitively)
    restricted_name_marker: str = "NOMBRE RESTRINGIDO"
    duplicate_name_markers: list[str] = [
        "DUPLICATE KEY",
        "UNIQUE CONSTRAINT",
        "NAMES_COUNTRY_NAME_UNIQUE_IDX",
    ]

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_http: str = "WARNING"          # httpx / httpcore (outbound HTTP)
    log_level_store: str = "INFO"            # Supabase store + auth adapters
    log_level_sync: str = "INFO"             # Query executor / view state manager

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    def model_post_init(self, __context: object) -> None:
        """Normalize the backend URL so adapters can append paths directly."""
        object.__setattr__(self, "supabase_url", self.supabase_url.rstrip("/"))
        if not self.supabase_anon_key:
            _config_logger.debug("SUPABASE_ANON_KEY is not set")

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance, reads .env once."""
    return Settings()
