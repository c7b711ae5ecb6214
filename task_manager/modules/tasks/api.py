from typing import Optional

from fastapi import APIRouter, Depends, Query
from task_manager.modules.auth.model import User
from task_manager.modules.tasks.schema import (
    TaskCreateRequest,
    TaskUpdateRequest,
    TaskResponse,
    TaskStatsResponse,
)
from task_manager.modules.tasks import service
from task_manager.modules.tasks.store import TaskRecord, TaskStore
from task_manager.core.dependencies import get_request_identity, get_task_store
from task_manager.core.response import success
from task_manager.routes.tasks import TASK_ROUTES, TASK_PREFIX, TASK_TAG, STATS_ROUTES, STATS_PREFIX, STATS_TAG

router = APIRouter(prefix=TASK_PREFIX, tags=[TASK_TAG])
stats_router = APIRouter(prefix=STATS_PREFIX, tags=[STATS_TAG])

_CLEAN_RESPONSES = {
    401: {"description": "Missing, invalid or expired token"},
    500: {"description": "Unexpected server error"},
}

_OWNED_RESPONSES = {
    403: {"description": "Task belongs to another user"},
    404: {"description": "Task not found"},
    **_CLEAN_RESPONSES,
}


# ════════════════════════════════════════════════════════
# LIST TASKS
# ════════════════════════════════════════════════════════

@router.get(
    TASK_ROUTES["list"],
    responses={
        200: {"description": "Tasks retrieved successfully"},
        **_CLEAN_RESPONSES,
    },
)
def list_tasks(
    identity: Optional[User] = Depends(get_request_identity),
    title: Optional[str] = Query(default=None, description="Case-insensitive substring of the title"),
    completed: Optional[str] = Query(default=None, description="'true' for completed tasks, anything else for pending"),
    store: TaskStore = Depends(get_task_store),
):
    completed_filter = None if completed is None else completed == "true"
    tasks = service.list_tasks(store, identity, title=title, completed=completed_filter)
    return success(
        data=[_serialize_task(t) for t in tasks],
        message="Tasks retrieved successfully",
        count=len(tasks),
    )


# ════════════════════════════════════════════════════════
# STATS  (/api/stats and /api/tasks/stats)
# ════════════════════════════════════════════════════════

def _stats(
    identity: Optional[User] = Depends(get_request_identity),
    store: TaskStore = Depends(get_task_store),
):
    stats = TaskStatsResponse(**service.get_stats(store, identity))
    return success(data=stats.model_dump(), message="Statistics retrieved successfully")


_STATS_RESPONSES = {
    200: {"description": "Statistics retrieved successfully"},
    **_CLEAN_RESPONSES,
}

# registered before "/{task_id}" so "stats" is not taken for an id
router.add_api_route(TASK_ROUTES["stats"], _stats, methods=["GET"], responses=_STATS_RESPONSES, name="task_stats")
stats_router.add_api_route(STATS_ROUTES["stats"], _stats, methods=["GET"], responses=_STATS_RESPONSES, name="stats")


# ════════════════════════════════════════════════════════
# GET TASK
# ════════════════════════════════════════════════════════

@router.get(
    TASK_ROUTES["get"],
    responses={
        200: {"description": "Task retrieved successfully"},
        **_OWNED_RESPONSES,
    },
)
def get_task(
    task_id: str,
    identity: Optional[User] = Depends(get_request_identity),
    store: TaskStore = Depends(get_task_store),
):
    task = service.get_task(store, identity, task_id)
    return success(data=_serialize_task(task), message="Task retrieved successfully")


# ════════════════════════════════════════════════════════
# CREATE TASK
# ════════════════════════════════════════════════════════

@router.post(
    TASK_ROUTES["create"],
    status_code=201,
    responses={
        201: {"description": "Task created successfully"},
        400: {"description": "Validation error"},
        **_CLEAN_RESPONSES,
    },
)
def create_task(
    data: TaskCreateRequest,
    identity: Optional[User] = Depends(get_request_identity),
    store: TaskStore = Depends(get_task_store),
):
    task = service.create_task(store, identity, data)
    return success(data=_serialize_task(task), message="Task created successfully", status_code=201)


# ════════════════════════════════════════════════════════
# UPDATE TASK
# ════════════════════════════════════════════════════════

@router.put(
    TASK_ROUTES["update"],
    responses={
        200: {"description": "Task updated successfully"},
        400: {"description": "Validation error"},
        **_OWNED_RESPONSES,
    },
)
def update_task(
    task_id: str,
    data: TaskUpdateRequest,
    identity: Optional[User] = Depends(get_request_identity),
    store: TaskStore = Depends(get_task_store),
):
    task = service.update_task(store, identity, task_id, data)
    return success(data=_serialize_task(task), message="Task updated successfully")


# ════════════════════════════════════════════════════════
# DELETE TASK
# ════════════════════════════════════════════════════════

@router.delete(
    TASK_ROUTES["delete"],
    responses={
        200: {"description": "Task deleted successfully"},
        **_OWNED_RESPONSES,
    },
)
def delete_task(
    task_id: str,
    identity: Optional[User] = Depends(get_request_identity),
    store: TaskStore = Depends(get_task_store),
):
    task = service.delete_task(store, identity, task_id)
    return success(data=_serialize_task(task), message="Task deleted successfully")


# ================================================================
# SERIALIZER
# ================================================================

def _serialize_task(task: TaskRecord) -> dict:
    return TaskResponse(
        id=task.id,
        title=task.title,
        completed=task.completed,
        user=task.owner_id,
        createdAt=task.created_at,
        updatedAt=task.updated_at,
    ).model_dump(mode="json")
