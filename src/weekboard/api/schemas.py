"""Request and response models for the Weekboard HTTP API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from weekboard.planner.commands import ZoomDirection
from weekboard.planner.model import SortMode


class StateView(BaseModel):
    """The effective state plus where it comes from."""

    previewing: bool
    preview_index: int | None = None
    cursor: int
    state: dict[str, Any] = Field(description="Planner state, camelCase keys as stored on disk")


class HistoryItem(BaseModel):
    index: int
    description: str
    timestamp: str
    current: bool = Field(description="True for the entry the live state corresponds to")
    previewed: bool = False


class HistoryView(BaseModel):
    cursor: int
    preview_index: int | None = None
    entries: list[HistoryItem]


class CommandResult(BaseModel):
    """Outcome of a state-affecting request."""

    applied: bool
    cursor: int
    size: int
    description: str | None = None


class NewTask(BaseModel):
    day: str
    title: str = Field(min_length=1)


class MoveTask(BaseModel):
    to_day: str


class SortRequest(BaseModel):
    mode: SortMode


class CloudText(BaseModel):
    text: str


class CloudMove(BaseModel):
    dx: float
    dy: float


class CloudSelection(BaseModel):
    cloud_ids: list[int]


class ZoomRequest(BaseModel):
    direction: ZoomDirection


__all__ = [
    "CloudMove",
    "CloudSelection",
    "CloudText",
    "CommandResult",
    "HistoryItem",
    "HistoryView",
    "MoveTask",
    "NewTask",
    "SortRequest",
    "StateView",
    "ZoomRequest",
]
