"""Typed smoke tests for the settings loader.

These tests verify three guarantees:
1) `load_settings()` yields a cached `Settings` instance with the defaults.
2) Environment variables override defaults after clearing the loader cache.
3) `get_logger()` respects the configured LOG_LEVEL when constructing loggers.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from weekboard.core.settings import Settings, get_logger, load_settings


def test_settings_instance_type(monkeypatch: Any) -> None:
    """`load_settings()` returns the typed `Settings` model, cached between calls."""
    monkeypatch.delenv("WEEKBOARD_STORAGE_KEY", raising=False)
    load_settings.cache_clear()
    settings = load_settings()
    assert isinstance(settings, Settings)
    assert settings.storage_key == "weekboard-state-v2"
    assert load_settings() is settings
    load_settings.cache_clear()


def test_env_overrides_with_cache_clear(monkeypatch: Any, tmp_path: Path) -> None:
    """Changing env vars should take effect after `load_settings.cache_clear()`."""
    monkeypatch.setenv("WEEKBOARD_ENV", "test")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("WEEKBOARD_STATE_DIR", str(tmp_path))
    monkeypatch.setenv("WEEKBOARD_STORAGE_KEY", "custom-key")

    load_settings.cache_clear()
    s = load_settings()

    assert s.environment == "test"
    assert s.log_level == "DEBUG"
    assert s.state_dir == tmp_path
    assert s.storage_key == "custom-key"
    load_settings.cache_clear()


def test_get_logger_respects_level(monkeypatch: Any) -> None:
    """`get_logger()` should apply the numeric level derived from `LOG_LEVEL`.

    A unique logger name avoids side effects between tests.
    """
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    load_settings.cache_clear()

    logger = get_logger("weekboard.tests.settings")

    assert logger.level == logging.ERROR
    assert logger.handlers, "Expected at least one StreamHandler to be attached."
    load_settings.cache_clear()
