from typing import Optional

from task_manager.core.errors import Forbidden, NotFound
from task_manager.core.logger import logger
from task_manager.modules.auth.model import User
from task_manager.modules.tasks.schema import TaskCreateRequest, TaskUpdateRequest
from task_manager.modules.tasks.store import TaskRecord, TaskStore, parse_task_id


def _owner_id(identity: Optional[User]) -> Optional[int]:
    return identity.id if identity is not None else None


# ================================================================
# OWNERSHIP
# ================================================================

def get_task_or_404(store: TaskStore, identity: Optional[User], task_id, action: str = "access") -> TaskRecord:
    """
    Load a task and make sure the caller owns it.
    Missing → 404, someone else's → 403. With no identity (ownerless mode) the owner check is skipped.
    """
    parsed = parse_task_id(task_id)
    task = store.get(parsed) if parsed is not None else None
    if not task:
        raise NotFound("Task not found")

    if identity is not None and task.owner_id != identity.id:
        logger.info(f"User {identity.id} denied {action} on task {task.id}")
        raise Forbidden(f"Not authorized to {action} this task")

    return task


# ================================================================
# CRUD
# ================================================================

def list_tasks(
    store: TaskStore,
    identity: Optional[User],
    title: Optional[str] = None,
    completed: Optional[bool] = None,
) -> list[TaskRecord]:
    return store.list(_owner_id(identity), title=title, completed=completed)


def get_task(store: TaskStore, identity: Optional[User], task_id) -> TaskRecord:
    return get_task_or_404(store, identity, task_id)


def create_task(store: TaskStore, identity: Optional[User], data: TaskCreateRequest) -> TaskRecord:
    task = store.create(_owner_id(identity), data.title, data.completed)
    logger.info(f"Task {task.id} created by user {_owner_id(identity)}")
    return task


def update_task(store: TaskStore, identity: Optional[User], task_id, data: TaskUpdateRequest) -> TaskRecord:
    task = get_task_or_404(store, identity, task_id, action="update")

    updated = store.update(task.id, title=data.title, completed=data.completed)
    if not updated:
        # deleted between the ownership check and the write
        raise NotFound("Task not found")

    logger.info(f"Task {task.id} updated")
    return updated


def delete_task(store: TaskStore, identity: Optional[User], task_id) -> TaskRecord:
    task = get_task_or_404(store, identity, task_id, action="delete")

    deleted = store.delete(task.id)
    if not deleted:
        raise NotFound("Task not found")

    logger.info(f"Task {task.id} deleted")
    return deleted


# ================================================================
# STATS
# ================================================================

def get_stats(store: TaskStore, identity: Optional[User]) -> dict:
    total, completed = store.counts(_owner_id(identity))
    return {
        "totalTasks": total,
        "completedTasks": completed,
        "pendingTasks": total - completed,
    }
