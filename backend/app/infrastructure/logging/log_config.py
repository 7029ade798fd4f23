"""Per-category logging levels for the directory client.

``setup_logging`` is called once by ``directory_lifespan`` with the same
Settings the runtime is built from.
"""

import logging
import sys

from app.config import Settings, get_settings

_FORMAT = "%(levelname)-8s %(name)s: %(message)s"

# (Settings field, logger names it controls)
_CATEGORIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("log_level_http", ("httpx", "httpcore")),
    ("log_level_store", ("app.infrastructure.supabase",)),
    ("log_level_sync", ("ViewStateManager", "app.application.services")),
)


def setup_logging(settings: Settings | None = None) -> dict[str, int]:
    """Apply the root and per-category levels; returns the level set per logger name."""
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(_parse_level(settings.log_level))
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)

    applied: dict[str, int] = {}
    for field_name, logger_names in _CATEGORIES:
        level = _parse_level(getattr(settings, field_name))
        for name in logger_names:
            logging.getLogger(name).setLevel(level)
            applied[name] = level

    logging.getLogger(__name__).debug("Log levels applied: %s", applied)
    return applied


def _parse_level(raw: str) -> int:
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else logging.INFO
