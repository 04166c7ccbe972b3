"""
API routes for reading state and travelling through history.

Endpoints
---------
- `GET /state`: the effective state (previewed snapshot or live state).
- `GET /history`: every recorded entry with cursor/preview markers.
- `POST /history/preview/{index}` / `DELETE /history/preview`: read-only time travel.
- `POST /history/rollback/{index}`: make an entry the present, dropping later ones.
- `POST /history/undo`: roll back one entry.

Out-of-range indices are not errors: the engine ignores them and the response
reports ``applied: false``.
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from weekboard.api.deps import engine_session, position
from weekboard.api.schemas import CommandResult, HistoryItem, HistoryView, StateView

router = APIRouter(tags=["History"])


@router.get("/state", response_model=StateView, summary="Get the effective planner state")
def get_state(request: Request) -> StateView:
    with engine_session(request) as engine:
        return StateView(
            previewing=engine.is_previewing,
            preview_index=engine.preview_index,
            cursor=engine.cursor,
            state=engine.effective_state().model_dump(by_alias=True, mode="json"),
        )


@router.get("/history", response_model=HistoryView, summary="List history entries")
def get_history(request: Request) -> HistoryView:
    with engine_session(request) as engine:
        items = [
            HistoryItem(
                index=i,
                description=entry.description,
                timestamp=entry.timestamp,
                current=i == engine.cursor,
                previewed=i == engine.preview_index,
            )
            for i, entry in enumerate(engine.entries())
        ]
        return HistoryView(cursor=engine.cursor, preview_index=engine.preview_index, entries=items)


@router.post("/history/preview/{index}", response_model=CommandResult)
def enter_preview(index: int, request: Request) -> CommandResult:
    with engine_session(request) as engine:
        return position(engine, engine.enter_preview(index))


@router.delete("/history/preview", response_model=CommandResult)
def exit_preview(request: Request) -> CommandResult:
    with engine_session(request) as engine:
        engine.exit_preview()
        return position(engine, True)


@router.post("/history/rollback/{index}", response_model=CommandResult)
def rollback(index: int, request: Request) -> CommandResult:
    with engine_session(request) as engine:
        return position(engine, engine.rollback(index))


@router.post("/history/undo", response_model=CommandResult)
def undo(request: Request) -> CommandResult:
    with engine_session(request) as engine:
        return position(engine, engine.undo())


__all__ = ["router"]
