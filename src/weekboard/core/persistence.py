"""Key-value persistence collaborators for the history engine.

The engine only needs two calls: ``read(key)`` once at startup and
``write(key, value)`` after every commit and rollback. Two stores ship here:

- :class:`MemoryStore`: a dict, for tests and throwaway sessions.
- :class:`FileStore`: one UTF-8 JSON file per key under a base directory.

Default directory
-----------------
``FileStore()`` without arguments uses ``WEEKBOARD_STATE_DIR`` (via settings)
or ``.weekboard/``.

Usage
-----
>>> store = MemoryStore()
>>> store.write("weekboard-state-v2", "{}")
>>> read_first(store, ("weekboard-state-v2", "calendar-board-state-v1"))
('weekboard-state-v2', '{}')
"""

from __future__ import annotations

import os
import re
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from weekboard.core.settings import get_logger, load_settings

logger = get_logger("weekboard.persistence")

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class KeyValueStore(Protocol):
    """Minimal string key-value contract used by the engine."""

    def read(self, key: str) -> str | None: ...

    def write(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Dict-backed store; ``data`` is exposed for inspection in tests."""

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(data) if data else {}
        self.writes: int = 0

    def read(self, key: str) -> str | None:
        return self.data.get(key)

    def write(self, key: str, value: str) -> None:
        self.data[key] = value
        self.writes += 1


def _default_dir() -> Path:
    """Return the configured base directory for state files."""
    return load_settings().state_dir


class FileStore:
    """Persist values as ``<base_dir>/<key>.json`` files."""

    def __init__(self, base_dir: Path | None = None) -> None:
        self.base_dir: Path = base_dir if base_dir is not None else _default_dir()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        """Return the file path used for ``key`` (unsafe characters become ``_``)."""
        return self.base_dir / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def read(self, key: str) -> str | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, value: str) -> None:
        """Write ``value`` through a temp file and an atomic rename.

        A crash mid-write leaves the previous file intact.
        """
        path = self.path_for(key)
        fd, tmp_name = tempfile.mkstemp(dir=self.base_dir, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
                f.write("\n")
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def read_first(store: KeyValueStore, keys: Iterable[str]) -> tuple[str | None, str | None]:
    """
    Return ``(key, value)`` for the first key holding a non-empty value.

    Used at startup to fall back from the current storage key through the
    ordered legacy keys. Returns ``(None, None)`` when nothing is stored.
    """
    for key in keys:
        value = store.read(key)
        if value:
            logger.debug("Loaded persisted state from key %r", key)
            return key, value
    return None, None


__all__ = ["FileStore", "KeyValueStore", "MemoryStore", "read_first"]
