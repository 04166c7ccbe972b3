"""Centralized application configuration using Pydantic Settings (v2).

`load_settings()` returns one cached `Settings` instance read from:
- Real environment variables (highest precedence)
- `.env` files at the repository root: .env, .env.local, .env.dev/.env.test/.env.prod
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Typed application configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `WEEKBOARD_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    state_dir : Path
        Directory used by the file-backed key-value store; maps from
        `WEEKBOARD_STATE_DIR`.
    storage_key : str
        Key under which the live planner state is written; maps from
        `WEEKBOARD_STORAGE_KEY`.
    """

    environment: EnvName = Field(default="dev", alias="WEEKBOARD_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    state_dir: Path = Field(default=Path(".weekboard"), alias="WEEKBOARD_STATE_DIR")
    storage_key: str = Field(default="weekboard-state-v2", alias="WEEKBOARD_STORAGE_KEY")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    We keep this behind an LRU cache so tests can force a rebuild via
    `load_settings.cache_clear()` after mutating `os.environ`.
    """
    os.environ.setdefault("WEEKBOARD_ENV", "dev")
    return Settings()


def get_logger(name: str = "weekboard") -> logging.Logger:
    """Return a process-global logger configured to the current `LOG_LEVEL`.

    The level is read through `load_settings()` so a test that clears the
    cache after changing the environment sees the new level.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger
