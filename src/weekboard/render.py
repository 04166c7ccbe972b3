"""
Terminal renderers for the planner (Rich).

Each renderer implements ``render(state)`` and is subscribed to the engine, so
it redraws after every commit, rollback, undo and preview change. They only
ever read the state they are handed; while previewing that is a historical
snapshot.

- :class:`CalendarRenderer`: the week as a seven-column table.
- :class:`BoardRenderer`: the clouds on the board of one focused task.
- :class:`HistoryRenderer`: the history panel with cursor and preview markers.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from weekboard.planner import DAYS, PlannerEngine
from weekboard.planner.model import PlannerState
from weekboard.planner.views import find_task, sorted_tasks, task_count


class CalendarRenderer:
    """Draw the week, with a banner while a historical entry is previewed."""

    def __init__(self, console: Console, engine: PlannerEngine) -> None:
        self.console = console
        self.engine = engine

    def render(self, state: PlannerState) -> None:
        if self.engine.preview_index is not None:
            entry = self.engine.entries()[self.engine.preview_index]
            self.console.print(
                Panel(
                    f"Preview mode: [bold]{escape(entry.description)}[/bold] (type `live` to return)",
                    border_style="magenta",
                )
            )

        count = task_count(state)
        table = Table(
            title=f"Week (sorted by {state.sort_mode})",
            caption=f"{count} task{'' if count == 1 else 's'}",
            expand=True,
        )
        for day in DAYS:
            table.add_column(day, overflow="fold")

        columns = [sorted_tasks(state.days[day], state.sort_mode) for day in DAYS]
        height = max((len(col) for col in columns), default=0)
        for row in range(height):
            cells = []
            for col in columns:
                if row < len(col):
                    task = col[row]
                    marker = "📌 " if task.pinned else ""
                    cells.append(f"{marker}[dim]#{task.id}[/dim] {escape(task.title)}")
                else:
                    cells.append("")
            table.add_row(*cells)
        self.console.print(table)


class BoardRenderer:
    """Draw the board of ``task_id`` when a task is focused."""

    def __init__(self, console: Console) -> None:
        self.console = console
        self.task_id: int | None = None

    def render(self, state: PlannerState) -> None:
        if self.task_id is None:
            return
        found = find_task(state, self.task_id)
        if found is None:
            # Task is gone in this state (deleted, or not yet created in a preview).
            self.console.print(f"[dim]Board #{self.task_id} is not available here.[/dim]")
            return
        task, _ = found
        board = state.boards.get(str(self.task_id))
        zoom = board.zoom if board else 1.0

        table = Table(title=f"Board: {escape(task.title)} ({round(zoom * 100)}%)")
        table.add_column("Cloud", justify="right")
        table.add_column("Position")
        table.add_column("Group")
        table.add_column("Text")
        for cloud in board.clouds if board else []:
            group = str(cloud.group_id) if cloud.group_id is not None else "-"
            table.add_row(str(cloud.id), f"{cloud.x:.0f}, {cloud.y:.0f}", group, escape(cloud.text))
        self.console.print(table)


class HistoryRenderer:
    """Draw the history panel; the live entry and the previewed entry are marked."""

    def __init__(self, console: Console, engine: PlannerEngine) -> None:
        self.console = console
        self.engine = engine

    def render(self, state: PlannerState) -> None:  # noqa: ARG002 - reads the log
        lines = []
        for i, entry in enumerate(self.engine.entries()):
            if i == self.engine.preview_index:
                style, mark = "magenta", "◉"
            elif i == self.engine.cursor:
                style, mark = "bold green", "●"
            else:
                style, mark = "dim", "○"
            lines.append(f"[{style}]{mark} {i:>3}  {escape(entry.description)}[/{style}]")
        self.console.print(Panel("\n".join(lines), title="History", border_style="cyan"))


__all__ = ["BoardRenderer", "CalendarRenderer", "HistoryRenderer"]
