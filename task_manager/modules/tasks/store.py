"""
tasks/store.py

The two task backends behind one interface:
  MemoryTaskStore → ownerless list shared by the whole process, one lock around it
  SqlTaskStore    → owned rows in the database, bound to a request session

Which one a request gets is decided once at startup (settings.STORAGE_MODE).
"""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import case, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from task_manager.core.errors import Internal
from task_manager.core.logger import logger
from task_manager.modules.tasks.model import Task


@dataclass(frozen=True)
class TaskRecord:
    id: int
    title: str
    completed: bool
    owner_id: Optional[int]
    created_at: datetime
    updated_at: datetime


# tasks.id is an Integer column: 32-bit on Postgres, the narrowest backend
MAX_TASK_ID = 2**31 - 1


def parse_task_id(raw) -> Optional[int]:
    """Path ids are strings; only plain ASCII digits within the column range can exist."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        task_id = raw
    elif isinstance(raw, str) and raw.isascii() and raw.isdigit() and not raw.startswith("0"):
        task_id = int(raw)
    else:
        return None
    return task_id if 0 < task_id <= MAX_TASK_ID else None


class TaskStore(ABC):
    @abstractmethod
    def list(self, owner_id: Optional[int], title: Optional[str] = None, completed: Optional[bool] = None) -> list[TaskRecord]:
        """Newest first. title = case-insensitive substring, completed = exact."""

    @abstractmethod
    def get(self, task_id: int) -> Optional[TaskRecord]: ...

    @abstractmethod
    def create(self, owner_id: Optional[int], title: str, completed: bool = False) -> TaskRecord: ...

    @abstractmethod
    def update(self, task_id: int, title: Optional[str] = None, completed: Optional[bool] = None) -> Optional[TaskRecord]: ...

    @abstractmethod
    def delete(self, task_id: int) -> Optional[TaskRecord]: ...

    @abstractmethod
    def counts(self, owner_id: Optional[int]) -> tuple[int, int]:
        """(total, completed) taken from a single read."""


# ================================================================
# IN-MEMORY (ownerless mode)
# ================================================================

class MemoryTaskStore(TaskStore):
    def __init__(self):
        self._tasks: list[TaskRecord] = []
        self._next_id = 1
        self._lock = threading.Lock()

    def list(self, owner_id=None, title=None, completed=None):
        with self._lock:
            tasks = list(self._tasks)

        if title:
            needle = title.lower()
            tasks = [t for t in tasks if needle in t.title.lower()]
        if completed is not None:
            tasks = [t for t in tasks if t.completed == completed]
        return list(reversed(tasks))

    def get(self, task_id):
        with self._lock:
            return self._find(task_id)

    def create(self, owner_id, title, completed=False):
        now = datetime.now(timezone.utc)
        with self._lock:
            record = TaskRecord(
                id=self._next_id,
                title=title,
                completed=completed,
                owner_id=None,
                created_at=now,
                updated_at=now,
            )
            self._next_id += 1
            self._tasks.append(record)
        return record

    def update(self, task_id, title=None, completed=None):
        with self._lock:
            current = self._find(task_id)
            if current is None:
                return None

            changes = {"updated_at": max(datetime.now(timezone.utc), current.updated_at)}
            if title is not None:
                changes["title"] = title
            if completed is not None:
                changes["completed"] = completed

            updated = replace(current, **changes)
            self._tasks[self._tasks.index(current)] = updated
            return updated

    def delete(self, task_id):
        with self._lock:
            current = self._find(task_id)
            if current is not None:
                self._tasks.remove(current)
            return current

    def counts(self, owner_id=None):
        with self._lock:
            total = len(self._tasks)
            completed = sum(1 for t in self._tasks if t.completed)
        return total, completed

    def _find(self, task_id) -> Optional[TaskRecord]:
        return next((t for t in self._tasks if t.id == task_id), None)


# ================================================================
# DATABASE (owned mode)
# ================================================================

def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _to_record(task: Task) -> TaskRecord:
    return TaskRecord(
        id=task.id,
        title=task.title,
        completed=bool(task.completed),
        owner_id=task.user_id,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


class SqlTaskStore(TaskStore):
    def __init__(self, db: Session):
        self.db = db

    def list(self, owner_id, title=None, completed=None):
        query = select(Task).where(Task.user_id == owner_id)

        if title:
            query = query.where(Task.title.ilike(f"%{_escape_like(title)}%", escape="\\"))

        if completed is not None:
            query = query.where(Task.completed == completed)

        query = query.order_by(Task.created_at.desc(), Task.id.desc())
        return [_to_record(t) for t in self.db.scalars(query).all()]

    def get(self, task_id):
        task = self.db.get(Task, task_id)
        return _to_record(task) if task else None

    def create(self, owner_id, title, completed=False):
        try:
            task = Task(title=title, completed=completed, user_id=owner_id)
            self.db.add(task)
            self.db.commit()
            self.db.refresh(task)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"[CreateTask] DB error: {e}")
            raise Internal("Failed to create task. Please try again.")
        return _to_record(task)

    def update(self, task_id, title=None, completed=None):
        task = self.db.get(Task, task_id)
        if not task:
            return None

        try:
            if title is not None:
                task.title = title
            if completed is not None:
                task.completed = completed
            self.db.commit()
            self.db.refresh(task)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"[UpdateTask] DB error for task {task_id}: {e}")
            raise Internal("Failed to update task. Please try again.")
        return _to_record(task)

    def delete(self, task_id):
        task = self.db.get(Task, task_id)
        if not task:
            return None

        record = _to_record(task)
        try:
            self.db.delete(task)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"[DeleteTask] DB error for task {task_id}: {e}")
            raise Internal("Failed to delete task.")
        return record

    def counts(self, owner_id):
        total, completed = self.db.execute(
            select(
                func.count(Task.id),
                func.coalesce(func.sum(case((Task.completed.is_(True), 1), else_=0)), 0),
            ).where(Task.user_id == owner_id)
        ).one()
        return int(total), int(completed)
