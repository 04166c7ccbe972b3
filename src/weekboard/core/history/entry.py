"""History entry definition.

This module defines the immutable record of one recorded state transition. It
is kept apart from ``log.py`` and ``engine.py`` so renderers and the HTTP layer
can import the record type without pulling in the engine.

Design Notes
------------
- **Immutability**: an entry never changes once appended. We use ``frozen=True``;
  the snapshot it carries is an owned deep copy that no other entry and never
  the live state refers to.
- **Serialization**: ``timestamp`` is a ``str`` captured at commit time, which
  keeps history panels and JSON responses free of datetime handling.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Generic, TypeVar

S = TypeVar("S")


def utc_timestamp() -> str:
    """Return the current UTC time as ``YYYY-MM-DDTHH:MM:SS.ffffffZ``."""
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


@dataclass(frozen=True, slots=True)
class HistoryEntry(Generic[S]):
    """
    Immutable record of one state transition.

    Attributes
    ----------
    description : str
        Human-readable label of the action (e.g. 'Added task "Gym" to Monday').
    snapshot : S
        Independent deep copy of the state right after the action.
    timestamp : str
        ISO-8601 UTC timestamp string taken when the entry was created.
    """

    description: str
    snapshot: S
    timestamp: str
