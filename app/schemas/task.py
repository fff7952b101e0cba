"""Task schemas."""
from datetime import date
from typing import Any

from pydantic import BaseModel, Field, field_validator


class TaskCreate(BaseModel):
    """Request to add a task."""

    title: str = Field(..., max_length=255)
    description: str | None = None
    priority_level: int = Field(1, ge=1, le=5)
    due_date: date | None = None


class TaskResponse(BaseModel):
    """Task response."""

    id: str
    title: str
    description: str | None
    priority_level: int
    is_completed: bool
    due_date: str | None
    completed_at: str | None
    created_at: str

    @field_validator("is_completed", mode="before")
    @classmethod
    def int_to_bool(cls, v: Any) -> bool:
        if isinstance(v, int):
            return bool(v)
        return v

    class Config:
        from_attributes = True


class TodaysTasksResponse(BaseModel):
    """The Critical Compass view: today's short list and the one to do next."""

    next_critical_task: TaskResponse | None
    tasks: list[TaskResponse]


class TaskCompletedResponse(BaseModel):
    """A completed task and the Brain Bucks it earned."""

    task: TaskResponse
    points_awarded: int
    brain_bucks_balance: int
