"""Request-scoped access to the engine owned by the application.

Route handlers are plain ``def`` functions, which FastAPI runs in a thread
pool. The engine itself is single-threaded, so every handler goes through
:func:`engine_session`, which holds the application's engine lock while the
handler reads, validates and commits.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from fastapi import Request

from weekboard.api.schemas import CommandResult
from weekboard.planner import PlannerEngine
from weekboard.planner.commands import Command


@contextmanager
def engine_session(request: Request) -> Iterator[PlannerEngine]:
    """Yield the engine stored on ``app.state`` with its lock held."""
    with request.app.state.engine_lock:
        yield request.app.state.engine


def run_command(
    request: Request, factory: Callable[..., Command], *args: Any
) -> CommandResult:
    """
    Build a command against the live state and commit it.

    The factory runs under the same lock as the commit, so the command is
    validated against exactly the state it mutates.
    """
    with engine_session(request) as engine:
        command = factory(engine.read(), *args)
        entry = engine.commit(*command)
        return CommandResult(
            applied=True,
            cursor=engine.cursor,
            size=len(engine),
            description=entry.description,
        )


def position(engine: PlannerEngine, applied: bool) -> CommandResult:
    """Describe the history position after a preview/rollback request."""
    current = engine.entries()[engine.cursor]
    return CommandResult(
        applied=applied,
        cursor=engine.cursor,
        size=len(engine),
        description=current.description,
    )


__all__ = ["engine_session", "position", "run_command"]
