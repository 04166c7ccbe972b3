"""Planner state schema.

The whole application state is one :class:`PlannerState` tree:

- seven day columns, each an ordered list of :class:`Task`,
- one optional :class:`Board` (annotation canvas) per task, keyed by the task
  id as a string since JSON object keys are strings,
- counters that hand out task, cloud and group ids.

On-disk format
--------------
Field names are serialized in camelCase (``sortMode``, ``createdAt``,
``groupId``), which is also the shape the v1 application wrote. Every field has
a default so :class:`~weekboard.core.history.codec.ModelCodec` can fill in
anything an older payload lacks.

Versioning
----------
``version`` is the schema semver. v1 payloads carry no version and key their
day columns by Russian weekday names; :func:`upgrade_legacy_payload` renames
those before validation.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

DAYS: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

LEGACY_DAY_NAMES: dict[str, str] = {
    "Понедельник": "Monday",
    "Вторник": "Tuesday",
    "Среда": "Wednesday",
    "Четверг": "Thursday",
    "Пятница": "Friday",
    "Суббота": "Saturday",
    "Воскресенье": "Sunday",
}

SCHEMA_VERSION = "2.0.0"

MIN_ZOOM = 0.4
MAX_ZOOM = 2.5

SortMode = Literal["created", "alpha"]
Zoom = Annotated[float, Field(ge=MIN_ZOOM, le=MAX_ZOOM)]


class _Node(BaseModel):
    """Shared config: camelCase aliases, population by either name."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Task(_Node):
    """A task in one of the day columns."""

    id: int
    title: str
    pinned: bool = False
    created_at: int = Field(default=0, description="Creation time, epoch milliseconds")


class Cloud(_Node):
    """A text note placed on a task's board."""

    id: int
    text: str = ""
    x: float = 50.0
    y: float = 50.0
    group_id: int | None = None


class Board(_Node):
    """Per-task annotation canvas."""

    zoom: Zoom = 1.0
    clouds: list[Cloud] = Field(default_factory=list)


def _empty_days() -> dict[str, list[Task]]:
    return {day: [] for day in DAYS}


class PlannerState(_Node):
    """Root of the planner state tree."""

    version: str = SCHEMA_VERSION
    sort_mode: SortMode = "created"
    next_task_id: int = 1
    next_cloud_id: int = 1
    next_group_id: int = 1
    days: dict[str, list[Task]] = Field(default_factory=_empty_days)
    boards: dict[str, Board] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _all_days_present(self) -> PlannerState:
        """Keep exactly the seven known day columns, in weekday order."""
        self.days = {day: self.days.get(day, []) for day in DAYS}
        return self

    @model_validator(mode="after")
    def _counters_past_used_ids(self) -> PlannerState:
        """Raise each id counter above every id already present in the tree."""
        task_ids = [task.id for tasks in self.days.values() for task in tasks]
        task_ids += [int(key) for key in self.boards if key.isdigit()]
        clouds = [cloud for board in self.boards.values() for cloud in board.clouds]
        group_ids = [cloud.group_id for cloud in clouds if cloud.group_id is not None]
        self.next_task_id = max([self.next_task_id, *(i + 1 for i in task_ids)])
        self.next_cloud_id = max([self.next_cloud_id, *(c.id + 1 for c in clouds)])
        self.next_group_id = max([self.next_group_id, *(g + 1 for g in group_ids)])
        return self


def upgrade_legacy_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """
    Rename v1 day keys to their English names.

    The payload is returned as a new dict; unknown day keys are left for the
    model validator to discard.
    """
    days = payload.get("days")
    if not isinstance(days, dict):
        return payload
    renamed: dict[str, Any] = {}
    for name, tasks in days.items():
        renamed[LEGACY_DAY_NAMES.get(name, name)] = tasks
    return {**payload, "days": renamed}


__all__ = [
    "DAYS",
    "LEGACY_DAY_NAMES",
    "MAX_ZOOM",
    "MIN_ZOOM",
    "SCHEMA_VERSION",
    "Board",
    "Cloud",
    "PlannerState",
    "SortMode",
    "Task",
    "upgrade_legacy_payload",
]
