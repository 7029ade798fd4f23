"""Unit tests for logging setup and the colored sync logger."""

import logging

import pytest

from app.config import Settings, get_settings
from app.infrastructure.logging.colored_logger import SyncLogger, SyncStage
from app.infrastructure.logging.log_config import setup_logging


def test_setup_logging_applies_category_levels(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL_HTTP", "ERROR")
    monkeypatch.setenv("LOG_LEVEL_SYNC", "debug")
    monkeypatch.setenv("LOG_LEVEL_STORE", "not-a-level")
    get_settings.cache_clear()
    try:
        setup_logging()
        assert logging.getLogger("httpx").level == logging.ERROR
        assert logging.getLogger("ViewStateManager").level == logging.DEBUG
        assert logging.getLogger("app.infrastructure.supabase").level == logging.INFO
    finally:
        get_settings.cache_clear()


def test_stale_result_is_logged(caplog):
    slog = SyncLogger("test.sync")
    with caplog.at_level(logging.INFO, logger="test.sync"):
        slog.stale(SyncStage.PER_COUNTRY, seq=1, latest=2)
    assert "discarded stale result" in caplog.text
    assert "latest=2" in caplog.text


def test_timed_step_logs_failure_and_reraises(caplog):
    slog = SyncLogger("test.sync")
    with caplog.at_level(logging.DEBUG, logger="test.sync"):
        with pytest.raises(ValueError):
            with slog.timed_step(SyncStage.GLOBAL, "Searching"):
                raise ValueError("boom")
    assert "failed after" in caplog.text
    assert "ValueError: boom" in caplog.text


def test_setup_logging_uses_injected_settings(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL_STORE", "DEBUG")
    settings = Settings(_env_file=None, log_level_store="ERROR", log_level_http="CRITICAL")

    applied = setup_logging(settings)

    assert applied["app.infrastructure.supabase"] == logging.ERROR
    assert applied["httpcore"] == logging.CRITICAL
    assert logging.getLogger("app.infrastructure.supabase").level == logging.ERROR
