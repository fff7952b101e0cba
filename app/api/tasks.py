"""Critical Compass task API endpoints."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, get_ledger
from app.config import get_settings
from app.models.user import User
from app.schemas.task import (
    TaskCompletedResponse,
    TaskCreate,
    TaskResponse,
    TodaysTasksResponse,
)
from app.services.brain_bucks import BrainBucksLedger
from app.services.tasks import complete_task, create_task, list_tasks, list_todays_tasks

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=list[TaskResponse])
def get_tasks(
    include_completed: bool = Query(False, description="Include completed tasks"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List tasks, highest priority first."""
    return list_tasks(db, current_user.id, include_completed=include_completed)


@router.get("/today", response_model=TodaysTasksResponse)
def get_todays_tasks(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Today's short list and the next critical task."""
    tasks = list_todays_tasks(db, current_user.id)
    responses = [TaskResponse.model_validate(t) for t in tasks]
    return TodaysTasksResponse(
        next_critical_task=responses[0] if responses else None,
        tasks=responses,
    )


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def add_task(
    task_data: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Add a task."""
    return create_task(
        db,
        current_user.id,
        title=task_data.title,
        description=task_data.description,
        priority_level=task_data.priority_level,
        due_date=task_data.due_date,
    )


@router.post("/{task_id}/complete", response_model=TaskCompletedResponse)
def mark_task_complete(
    task_id: str,
    db: Session = Depends(get_db),
    ledger: BrainBucksLedger = Depends(get_ledger),
    current_user: User = Depends(get_current_user),
):
    """Complete a task and earn Brain Bucks."""
    task, balance = complete_task(db, ledger, current_user, task_id)
    return TaskCompletedResponse(
        task=TaskResponse.model_validate(task),
        points_awarded=get_settings().task_completed_points,
        brain_bucks_balance=balance,
    )
