from pydantic import BaseModel, Field, StrictBool, field_validator, model_validator
from typing import Optional
from datetime import datetime

from task_manager.modules.tasks.model import TITLE_MAX_LENGTH


def _clean_title(v, empty_message: str):
    if not isinstance(v, str):
        raise ValueError("Title must be a string")
    v = v.strip()
    if not v:
        raise ValueError(empty_message)
    if len(v) > TITLE_MAX_LENGTH:
        raise ValueError(f"Title must be between 1 and {TITLE_MAX_LENGTH} characters")
    return v


# ────────────────────────────────────────────────────────────────
# REQUEST SCHEMAS
# ────────────────────────────────────────────────────────────────

class TaskCreateRequest(BaseModel):
    title: str = Field(..., description="Task title, 1-200 characters")
    completed: StrictBool = Field(default=False, description="Completion flag")

    @field_validator("title", mode="before")
    @classmethod
    def title_required(cls, v):
        if v is None:
            raise ValueError("Title is required")
        return _clean_title(v, "Title is required")

    @field_validator("completed", mode="before")
    @classmethod
    def completed_boolean(cls, v):
        if not isinstance(v, bool):
            raise ValueError("Completed must be a boolean value")
        return v


class TaskUpdateRequest(BaseModel):
    title: Optional[str] = Field(default=None, description="New title, 1-200 characters")
    completed: Optional[StrictBool] = Field(default=None, description="New completion flag")

    @field_validator("title", mode="before")
    @classmethod
    def title_not_empty(cls, v):
        if v is None:
            return v
        return _clean_title(v, "Title cannot be empty")

    @field_validator("completed", mode="before")
    @classmethod
    def completed_boolean(cls, v):
        if v is not None and not isinstance(v, bool):
            raise ValueError("Completed must be a boolean value")
        return v

    @model_validator(mode="after")
    def at_least_one_field(self):
        if self.title is None and self.completed is None:
            raise ValueError("At least one field (title or completed) must be provided")
        return self


# ────────────────────────────────────────────────────────────────
# RESPONSE SCHEMAS
# ────────────────────────────────────────────────────────────────

class TaskResponse(BaseModel):
    id: int
    title: str
    completed: bool
    user: Optional[int] = None
    createdAt: datetime
    updatedAt: datetime


class TaskStatsResponse(BaseModel):
    totalTasks: int
    completedTasks: int
    pendingTasks: int
