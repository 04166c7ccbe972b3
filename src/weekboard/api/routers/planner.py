"""
API routes for planner commands.

Each route validates its input against the live state through a command
factory (``ValueError`` becomes HTTP 400) and then commits it, so every
request that changes the planner adds exactly one history entry.
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from weekboard.api.deps import run_command
from weekboard.api.schemas import (
    CloudMove,
    CloudSelection,
    CloudText,
    CommandResult,
    MoveTask,
    NewTask,
    SortRequest,
    ZoomRequest,
)
from weekboard.planner import commands

router = APIRouter(tags=["Planner"])


# ------------------------------- Calendar -------------------------------------


@router.post("/tasks", response_model=CommandResult, status_code=201)
def create_task(body: NewTask, request: Request) -> CommandResult:
    return run_command(request, commands.add_task, body.day, body.title)


@router.delete("/tasks/{task_id}", response_model=CommandResult)
def delete_task(task_id: int, request: Request) -> CommandResult:
    return run_command(request, commands.delete_task, task_id)


@router.post("/tasks/{task_id}/move", response_model=CommandResult)
def move_task(task_id: int, body: MoveTask, request: Request) -> CommandResult:
    return run_command(request, commands.move_task, task_id, body.to_day)


@router.post("/tasks/{task_id}/pin", response_model=CommandResult)
def toggle_pin(task_id: int, request: Request) -> CommandResult:
    return run_command(request, commands.toggle_pin, task_id)


@router.post("/tasks/clear-unpinned", response_model=CommandResult)
def clear_unpinned(request: Request) -> CommandResult:
    return run_command(request, commands.clear_unpinned)


@router.put("/sort", response_model=CommandResult)
def set_sort_mode(body: SortRequest, request: Request) -> CommandResult:
    return run_command(request, commands.set_sort_mode, body.mode)


# ------------------------------- Boards ---------------------------------------


@router.post("/boards/{task_id}/clouds", response_model=CommandResult, status_code=201)
def add_cloud(task_id: int, request: Request) -> CommandResult:
    return run_command(request, commands.add_cloud, task_id)


@router.patch("/boards/{task_id}/clouds/{cloud_id}", response_model=CommandResult)
def edit_cloud(task_id: int, cloud_id: int, body: CloudText, request: Request) -> CommandResult:
    return run_command(request, commands.edit_cloud, task_id, cloud_id, body.text)


@router.post("/boards/{task_id}/clouds/{cloud_id}/move", response_model=CommandResult)
def move_cloud(task_id: int, cloud_id: int, body: CloudMove, request: Request) -> CommandResult:
    return run_command(request, commands.move_cloud, task_id, cloud_id, body.dx, body.dy)


@router.post("/boards/{task_id}/groups", response_model=CommandResult)
def group_clouds(task_id: int, body: CloudSelection, request: Request) -> CommandResult:
    return run_command(request, commands.group_clouds, task_id, body.cloud_ids)


@router.post("/boards/{task_id}/ungroup", response_model=CommandResult)
def ungroup_clouds(task_id: int, body: CloudSelection, request: Request) -> CommandResult:
    return run_command(request, commands.ungroup_clouds, task_id, body.cloud_ids)


@router.post("/boards/{task_id}/zoom", response_model=CommandResult)
def zoom_board(task_id: int, body: ZoomRequest, request: Request) -> CommandResult:
    return run_command(request, commands.zoom_board, task_id, body.direction)


__all__ = ["router"]
