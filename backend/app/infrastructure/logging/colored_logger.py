"""Colored sync logger — ANSI-colored console logging for view synchronization.

Provides a SyncLogger with color-coded output per sync stage, making it
easy to follow which list was re-fetched, which result was applied and
which one was discarded as stale.

Color scheme:
    🟢 Green   — Countries / Counts
    🔵 Blue    — Per-country list
    🟣 Magenta — Global search
    🟡 Yellow  — Submit
    🟠 Cyan    — Session
    ⚪ Gray    — Stale results / timing
    🔴 Red     — Errors
"""

import logging
import time
from contextlib import contextmanager
from typing import Any


# ── ANSI Color Codes ─────────────────────────────────────────────────

class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    GRAY = "\033[90m"


# ── Sync Stage Definitions ───────────────────────────────────────────

class SyncStage:
    """Predefined sync stages with colors and icons."""

    SESSION = ("SESSION", _Colors.CYAN, "🔑")
    COUNTRIES = ("COUNTRIES", _Colors.GREEN, "🌍")
    COUNTS = ("COUNTS", _Colors.GREEN, "🔢")
    PER_COUNTRY = ("PER_COUNTRY", _Colors.BLUE, "📋")
    GLOBAL = ("GLOBAL", _Colors.MAGENTA, "🔎")
    SUBMIT = ("SUBMIT", _Colors.YELLOW, "✏️")
    STALE = ("STALE", _Colors.GRAY, "⏭️")
    ERROR = ("ERROR", _Colors.RED, "❌")


def _format_details(kwargs: dict[str, Any], color: str) -> str:
    if not kwargs:
        return ""
    details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
    return f" {color}({details}){_Colors.RESET}"


# ── SyncLogger ───────────────────────────────────────────────────────

class SyncLogger:
    """Color-coded logger for list synchronization.

    Usage:
        slog = SyncLogger("ViewStateManager")
        slog.step_start(SyncStage.PER_COUNTRY, "Fetching names", country="MX")
        slog.stale(SyncStage.PER_COUNTRY, seq=3, latest=4)
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)

    def step_start(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        formatted = (
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}"
        )
        self._logger.debug(formatted + _format_details(kwargs, _Colors.GRAY))

    def step_complete(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        formatted = (
            f"{color}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.GREEN}✓ {message}{_Colors.RESET}"
        )
        self._logger.info(formatted + _format_details(kwargs, _Colors.GRAY))

    def step_error(self, stage: tuple[str, str, str], message: str, error: Exception | None = None) -> None:
        """Log a failed step in red. Read failures are warnings: the view keeps its list."""
        label, _, icon = stage
        formatted = (
            f"{_Colors.RED}{_Colors.BOLD}❌ [{label}]{_Colors.RESET} "
            f"{_Colors.RED}{message}{_Colors.RESET}"
        )
        if error:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.warning(formatted)

    def stale(self, stage: tuple[str, str, str], **kwargs: Any) -> None:
        """Log a result that arrived after a newer request and was discarded."""
        label, _, _ = stage
        icon = SyncStage.STALE[2]
        formatted = f"{_Colors.GRAY}{icon} [{label}] discarded stale result{_Colors.RESET}"
        self._logger.info(formatted + _format_details(kwargs, _Colors.DIM))

    def detail(self, message: str, **kwargs: Any) -> None:
        formatted = f"   {_Colors.GRAY}├─ {message}{_Colors.RESET}"
        self._logger.debug(formatted + _format_details(kwargs, _Colors.DIM))

    @contextmanager
    def timed_step(self, stage: tuple[str, str, str], message: str, **kwargs: Any):
        """Context manager that logs start/end with elapsed time.

        Usage:
            with slog.timed_step(SyncStage.GLOBAL, "Searching all countries"):
                names = await executor.fetch_global(text)
        """
        self.step_start(stage, message, **kwargs)
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            elapsed = time.perf_counter() - start
            self.step_error(stage, f"{message} — failed after {elapsed:.2f}s", error=e)
            raise
        else:
            elapsed = time.perf_counter() - start
            self.step_complete(stage, f"{message} — {elapsed:.2f}s", **kwargs)
