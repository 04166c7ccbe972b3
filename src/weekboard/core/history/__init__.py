"""Versioned state/history engine.

Re-exports the pieces collaborators need:
    from weekboard.core.history import HistoryEngine, HistoryEntry, ModelCodec
"""

from __future__ import annotations

from .codec import ModelCodec, SnapshotCodec, merge_defaults
from .engine import INITIAL_DESCRIPTION, HistoryEngine, Mutation, Renderer
from .entry import HistoryEntry
from .log import HistoryLog
from .store import StateStore

__all__ = [
    "INITIAL_DESCRIPTION",
    "HistoryEngine",
    "HistoryEntry",
    "HistoryLog",
    "ModelCodec",
    "Mutation",
    "Renderer",
    "SnapshotCodec",
    "StateStore",
    "merge_defaults",
]
