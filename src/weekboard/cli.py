# src/weekboard/cli.py
"""
Weekboard Command Line Interface (CLI).

This module implements the terminal front end using `typer` and `rich`.

Features
--------
- **show**: render the persisted week once.
- **shell**: an interactive session over one engine. Every command is a
  commit; `log`, `preview`, `live`, `rollback` and `undo` travel through the
  session's history. The calendar, board and history views redraw after each
  state-affecting command.
- **serve**: run the HTTP API with uvicorn.

History lives in memory for the duration of a session; only the live state is
persisted between sessions.

Usage
-----
    $ weekboard shell
    weekboard> add monday "Dentist at 10"
    weekboard> undo
"""

from __future__ import annotations

import shlex
from collections.abc import Callable
from pathlib import Path
from typing import Annotated, cast

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from weekboard.core.persistence import FileStore
from weekboard.planner import DAYS, PlannerEngine, commands, open_planner
from weekboard.planner.model import SortMode
from weekboard.render import BoardRenderer, CalendarRenderer, HistoryRenderer

load_dotenv()

app = typer.Typer(
    help="Weekboard: a weekly task board with history preview and rollback.",
    rich_markup_mode="markdown",
)
console = Console()

StateDirOption = Annotated[
    Path | None,
    typer.Option(
        "--state-dir",
        "-d",
        file_okay=False,
        help="Directory holding the persisted state (defaults to WEEKBOARD_STATE_DIR).",
    ),
]


# --------------------------------------------------------------------------- #
# Shell command handlers
# --------------------------------------------------------------------------- #


class Session:
    """One interactive session: an engine plus the focused board."""

    def __init__(self, engine: PlannerEngine, board: BoardRenderer) -> None:
        self.engine = engine
        self.board = board

    def run(self, command: commands.Command) -> None:
        self.engine.commit(*command)


def _day(name: str) -> str:
    """Accept weekday names case-insensitively (``monday`` -> ``Monday``)."""
    for day in DAYS:
        if day.lower() == name.lower():
            return day
    raise ValueError(f"unknown day {name!r}; expected one of {', '.join(DAYS)}")


def _ids(args: list[str]) -> list[int]:
    return [int(a) for a in args]


def _cmd_add(s: Session, args: list[str]) -> None:
    s.run(commands.add_task(s.engine.read(), _day(args[0]), " ".join(args[1:])))


def _cmd_move(s: Session, args: list[str]) -> None:
    s.run(commands.move_task(s.engine.read(), int(args[0]), _day(args[1])))


def _cmd_delete(s: Session, args: list[str]) -> None:
    s.run(commands.delete_task(s.engine.read(), int(args[0])))


def _cmd_pin(s: Session, args: list[str]) -> None:
    s.run(commands.toggle_pin(s.engine.read(), int(args[0])))


def _cmd_sort(s: Session, args: list[str]) -> None:
    s.run(commands.set_sort_mode(s.engine.read(), cast(SortMode, args[0])))


def _cmd_clear(s: Session, args: list[str]) -> None:
    s.run(commands.clear_unpinned(s.engine.read()))


def _cmd_board(s: Session, args: list[str]) -> None:
    """Focus the board of a task (``board`` alone unfocuses)."""
    s.board.task_id = int(args[0]) if args else None
    s.board.render(s.engine.effective_state())


def _cmd_cloud(s: Session, args: list[str]) -> None:
    task_id = int(args[0])
    s.board.task_id = task_id
    s.run(commands.add_cloud(s.engine.read(), task_id))


def _cmd_text(s: Session, args: list[str]) -> None:
    s.run(commands.edit_cloud(s.engine.read(), int(args[0]), int(args[1]), " ".join(args[2:])))


def _cmd_drag(s: Session, args: list[str]) -> None:
    task_id, cloud_id = int(args[0]), int(args[1])
    s.run(commands.move_cloud(s.engine.read(), task_id, cloud_id, float(args[2]), float(args[3])))


def _cmd_group(s: Session, args: list[str]) -> None:
    s.run(commands.group_clouds(s.engine.read(), int(args[0]), _ids(args[1:])))


def _cmd_ungroup(s: Session, args: list[str]) -> None:
    s.run(commands.ungroup_clouds(s.engine.read(), int(args[0]), _ids(args[1:])))


def _cmd_zoom(s: Session, args: list[str]) -> None:
    direction = cast(commands.ZoomDirection, args[1])
    s.run(commands.zoom_board(s.engine.read(), int(args[0]), direction))


def _cmd_log(s: Session, args: list[str]) -> None:
    table = Table(title="History")
    table.add_column("#", justify="right")
    table.add_column("When")
    table.add_column("Action")
    for i, entry in enumerate(s.engine.entries()):
        marker = " (live)" if i == s.engine.cursor else ""
        table.add_row(str(i), entry.timestamp, escape(f"{entry.description}{marker}"))
    console.print(table)


def _cmd_preview(s: Session, args: list[str]) -> None:
    if not s.engine.enter_preview(int(args[0])):
        console.print(f"[yellow]No history entry {args[0]}.[/yellow]")


def _cmd_live(s: Session, args: list[str]) -> None:
    s.engine.exit_preview()


def _cmd_rollback(s: Session, args: list[str]) -> None:
    if not s.engine.rollback(int(args[0])):
        console.print(f"[yellow]No history entry {args[0]}.[/yellow]")


def _cmd_undo(s: Session, args: list[str]) -> None:
    if not s.engine.undo():
        console.print("[yellow]Nothing to undo.[/yellow]")


def _cmd_show(s: Session, args: list[str]) -> None:
    CalendarRenderer(console, s.engine).render(s.engine.effective_state())


SHELL_COMMANDS: dict[str, tuple[Callable[[Session, list[str]], None], str]] = {
    "add": (_cmd_add, "add <day> <title>"),
    "move": (_cmd_move, "move <task> <day>"),
    "del": (_cmd_delete, "del <task>"),
    "pin": (_cmd_pin, "pin <task>"),
    "sort": (_cmd_sort, "sort created|alpha"),
    "clear": (_cmd_clear, "clear  (remove unpinned tasks)"),
    "board": (_cmd_board, "board [task]  (focus a task board)"),
    "cloud": (_cmd_cloud, "cloud <task>"),
    "text": (_cmd_text, "text <task> <cloud> <text>"),
    "drag": (_cmd_drag, "drag <task> <cloud> <dx> <dy>"),
    "group": (_cmd_group, "group <task> <cloud> <cloud>..."),
    "ungroup": (_cmd_ungroup, "ungroup <task> <cloud>..."),
    "zoom": (_cmd_zoom, "zoom <task> in|out"),
    "log": (_cmd_log, "log"),
    "preview": (_cmd_preview, "preview <index>"),
    "live": (_cmd_live, "live  (leave preview)"),
    "rollback": (_cmd_rollback, "rollback <index>"),
    "undo": (_cmd_undo, "undo"),
    "show": (_cmd_show, "show"),
}


def _print_help() -> None:
    console.print("[bold]Commands[/bold]")
    for _, usage in SHELL_COMMANDS.values():
        console.print(f"  {usage}", markup=False)
    console.print("  help | quit", markup=False)


def dispatch(session: Session, line: str) -> bool:
    """Run one shell line; return ``False`` when the session should end."""
    try:
        words = shlex.split(line)
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        return True
    if not words:
        return True
    name, args = words[0].lower(), words[1:]
    if name in ("quit", "exit"):
        return False
    if name == "help":
        _print_help()
        return True
    if name not in SHELL_COMMANDS:
        console.print(f"[bold red]Unknown command:[/bold red] {escape(name)} (try `help`)")
        return True

    handler, usage = SHELL_COMMANDS[name]
    try:
        handler(session, args)
    except IndexError:
        console.print(f"[bold red]Usage:[/bold red] {escape(usage)}", highlight=False)
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}", highlight=False)
    return True


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


def _storage(state_dir: Path | None) -> FileStore | None:
    return FileStore(state_dir) if state_dir is not None else None


@app.command()  # type: ignore[misc]
def show(state_dir: StateDirOption = None) -> None:
    """Render the persisted week."""
    engine = open_planner(_storage(state_dir))
    CalendarRenderer(console, engine).render(engine.read())


@app.command()  # type: ignore[misc]
def shell(state_dir: StateDirOption = None) -> None:
    """
    Start an interactive planning session.

    Every change is recorded; `preview <i>` inspects an earlier entry,
    `rollback <i>` makes it the present and `undo` steps back once.
    """
    engine = open_planner(_storage(state_dir))
    board = BoardRenderer(console)
    engine.subscribe(CalendarRenderer(console, engine))
    engine.subscribe(board)
    engine.subscribe(HistoryRenderer(console, engine))
    session = Session(engine, board)

    console.print("[bold cyan]Weekboard shell[/bold cyan] - type `help` for commands.")
    _cmd_show(session, [])
    while True:
        try:
            line = console.input("[bold]weekboard>[/bold] ")
        except (EOFError, KeyboardInterrupt):
            console.print()
            break
        if not dispatch(session, line):
            break


@app.command()  # type: ignore[misc]
def serve(
    host: Annotated[str, typer.Option(help="Interface to bind.")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="Port to listen on.")] = 8000,
    state_dir: StateDirOption = None,
) -> None:
    """Serve the HTTP API (single worker)."""
    import uvicorn

    from weekboard.api.app import create_app

    uvicorn.run(create_app(open_planner(_storage(state_dir))), host=host, port=port, workers=1)


if __name__ == "__main__":
    app()
