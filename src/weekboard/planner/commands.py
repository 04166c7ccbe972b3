"""
Planner commands: validated mutations ready to hand to the history engine.

Every user action is expressed as a :class:`Command`, a description plus a
mutation closure. Factories check their arguments against the current live
state and raise ``ValueError`` before anything is committed, so the closures
themselves stay total; they still tolerate a missing target and leave the
state unchanged in that case.

Usage
-----
>>> engine.commit(*add_task(engine.read(), "Monday", "Gym"))
"""

from __future__ import annotations

import time
from collections.abc import Iterable
from typing import Literal, NamedTuple

from weekboard.core.history import Mutation

from .model import DAYS, MAX_ZOOM, MIN_ZOOM, Board, Cloud, PlannerState, SortMode, Task
from .views import find_task

ZOOM_STEP = 0.1
DEFAULT_CLOUD_POSITION = (50.0, 50.0)

ZoomDirection = Literal["in", "out"]


class Command(NamedTuple):
    """A described mutation; unpack it into ``engine.commit(*command)``."""

    description: str
    mutate: Mutation[PlannerState]


# --------------------------------------------------------------------------- #
# Validation helpers
# --------------------------------------------------------------------------- #


def _require_day(day: str) -> str:
    if day not in DAYS:
        raise ValueError(f"unknown day {day!r}; expected one of {', '.join(DAYS)}")
    return day


def _require_task(state: PlannerState, task_id: int) -> tuple[Task, str]:
    found = find_task(state, task_id)
    if found is None:
        raise ValueError(f"task {task_id} does not exist")
    return found


def _require_clouds(state: PlannerState, task_id: int, cloud_ids: Iterable[int]) -> set[int]:
    _require_task(state, task_id)
    wanted = set(cloud_ids)
    board = state.boards.get(str(task_id))
    known = {c.id for c in board.clouds} if board else set()
    missing = sorted(wanted - known)
    if missing:
        raise ValueError(f"clouds {missing} do not exist on the board of task {task_id}")
    return wanted


def _board(state: PlannerState, task_id: int) -> Board:
    """Return the board of ``task_id``, creating an empty one on first use."""
    return state.boards.setdefault(str(task_id), Board())


def _find_cloud(board: Board, cloud_id: int) -> Cloud | None:
    return next((c for c in board.clouds if c.id == cloud_id), None)


# --------------------------------------------------------------------------- #
# Calendar commands
# --------------------------------------------------------------------------- #


def add_task(state: PlannerState, day: str, title: str, *, now_ms: int | None = None) -> Command:
    """Append a new unpinned task to ``day``."""
    _require_day(day)
    title = title.strip()
    if not title:
        raise ValueError("task title must not be empty")
    created_at = now_ms if now_ms is not None else int(time.time() * 1000)

    def mutate(st: PlannerState) -> None:
        st.days[day].append(Task(id=st.next_task_id, title=title, created_at=created_at))
        st.next_task_id += 1

    return Command(f'Added task "{title}" to {day}', mutate)


def move_task(state: PlannerState, task_id: int, to_day: str) -> Command:
    """Move a task to the end of ``to_day``."""
    _require_day(to_day)
    task, from_day = _require_task(state, task_id)

    def mutate(st: PlannerState) -> None:
        column = st.days[from_day]
        idx = next((i for i, t in enumerate(column) if t.id == task_id), None)
        if idx is None or from_day == to_day:
            return
        st.days[to_day].append(column.pop(idx))

    return Command(f'Moved task "{task.title}" from {from_day} to {to_day}', mutate)


def delete_task(state: PlannerState, task_id: int) -> Command:
    """Remove a task and its board."""
    task, day = _require_task(state, task_id)

    def mutate(st: PlannerState) -> None:
        st.days[day] = [t for t in st.days[day] if t.id != task_id]
        st.boards.pop(str(task_id), None)

    return Command(f'Deleted task "{task.title}"', mutate)


def toggle_pin(state: PlannerState, task_id: int) -> Command:
    task, day = _require_task(state, task_id)

    def mutate(st: PlannerState) -> None:
        for t in st.days[day]:
            if t.id == task_id:
                t.pinned = not t.pinned

    return Command(f'Toggled pin on "{task.title}"', mutate)


def set_sort_mode(state: PlannerState, mode: SortMode) -> Command:
    if mode not in ("created", "alpha"):
        raise ValueError(f"unknown sort mode {mode!r}")

    def mutate(st: PlannerState) -> None:
        st.sort_mode = mode

    return Command(f"Changed sort mode to {mode}", mutate)


def clear_unpinned(state: PlannerState) -> Command:
    """Remove every unpinned task (and its board) from the week."""

    def mutate(st: PlannerState) -> None:
        for day in DAYS:
            kept: list[Task] = []
            for t in st.days[day]:
                if t.pinned:
                    kept.append(t)
                else:
                    st.boards.pop(str(t.id), None)
            st.days[day] = kept

    return Command("Removed all unpinned tasks", mutate)


# --------------------------------------------------------------------------- #
# Board commands
# --------------------------------------------------------------------------- #


def add_cloud(state: PlannerState, task_id: int) -> Command:
    """Place an empty cloud at the default position on the task's board."""
    _require_task(state, task_id)

    def mutate(st: PlannerState) -> None:
        x, y = DEFAULT_CLOUD_POSITION
        _board(st, task_id).clouds.append(Cloud(id=st.next_cloud_id, x=x, y=y))
        st.next_cloud_id += 1

    return Command("Added a text cloud", mutate)


def edit_cloud(state: PlannerState, task_id: int, cloud_id: int, text: str) -> Command:
    _require_clouds(state, task_id, [cloud_id])

    def mutate(st: PlannerState) -> None:
        cloud = _find_cloud(_board(st, task_id), cloud_id)
        if cloud is not None:
            cloud.text = text

    return Command("Edited cloud text", mutate)


def move_cloud(state: PlannerState, task_id: int, cloud_id: int, dx: float, dy: float) -> Command:
    """
    Move a cloud, or every cloud of its group, by a screen-space delta.

    The delta is divided by the board zoom so a drag covers the same distance
    on screen at any zoom level.
    """
    _require_clouds(state, task_id, [cloud_id])

    def mutate(st: PlannerState) -> None:
        board = _board(st, task_id)
        cloud = _find_cloud(board, cloud_id)
        if cloud is None:
            return
        if cloud.group_id is not None:
            targets = [c for c in board.clouds if c.group_id == cloud.group_id]
        else:
            targets = [cloud]
        for c in targets:
            c.x += dx / board.zoom
            c.y += dy / board.zoom

    return Command("Moved cloud/group", mutate)


def group_clouds(state: PlannerState, task_id: int, cloud_ids: Iterable[int]) -> Command:
    """Put at least two clouds into a new group."""
    picked = _require_clouds(state, task_id, cloud_ids)
    if len(picked) < 2:
        raise ValueError("grouping needs at least two clouds")

    def mutate(st: PlannerState) -> None:
        group_id = st.next_group_id
        st.next_group_id += 1
        for c in _board(st, task_id).clouds:
            if c.id in picked:
                c.group_id = group_id

    return Command("Grouped clouds", mutate)


def ungroup_clouds(state: PlannerState, task_id: int, cloud_ids: Iterable[int]) -> Command:
    picked = _require_clouds(state, task_id, cloud_ids)

    def mutate(st: PlannerState) -> None:
        for c in _board(st, task_id).clouds:
            if c.id in picked:
                c.group_id = None

    return Command("Ungrouped clouds", mutate)


def zoom_board(state: PlannerState, task_id: int, direction: ZoomDirection) -> Command:
    """Step the board zoom by 0.1 within [0.4, 2.5]."""
    _require_task(state, task_id)
    if direction not in ("in", "out"):
        raise ValueError(f"unknown zoom direction {direction!r}")
    step = ZOOM_STEP if direction == "in" else -ZOOM_STEP

    def mutate(st: PlannerState) -> None:
        board = _board(st, task_id)
        board.zoom = round(min(MAX_ZOOM, max(MIN_ZOOM, board.zoom + step)), 2)

    label = "Zoomed in" if direction == "in" else "Zoomed out"
    return Command(f"{label} on the board", mutate)


__all__ = [
    "Command",
    "add_cloud",
    "add_task",
    "clear_unpinned",
    "delete_task",
    "edit_cloud",
    "group_clouds",
    "move_cloud",
    "move_task",
    "set_sort_mode",
    "toggle_pin",
    "ungroup_clouds",
    "zoom_board",
]
