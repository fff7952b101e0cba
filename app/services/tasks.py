"""Critical Compass task service."""
import logging
from datetime import date, datetime

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import commit_or_rollback
from app.errors import NotFoundError, ValidationError
from app.models.task import Task
from app.models.user import User
from app.services.brain_bucks import BrainBucksLedger
from app.services.profiles import record_activity

logger = logging.getLogger(__name__)

TASK_COMPLETED = "task_completed"


def get_task(db: Session, user_id: str, task_id: str) -> Task:
    task = db.query(Task).filter(Task.id == task_id, Task.user_id == user_id).first()
    if not task:
        raise NotFoundError("Task not found")
    return task


def list_tasks(db: Session, user_id: str, include_completed: bool = False) -> list[Task]:
    """All of a user's tasks, most important first."""
    query = db.query(Task).filter(Task.user_id == user_id)
    if not include_completed:
        query = query.filter(Task.is_completed == 0)
    return query.order_by(Task.priority_level.desc(), Task.created_at.asc()).all()


def list_todays_tasks(
    db: Session,
    user_id: str,
    today: date | None = None,
    limit: int | None = None,
) -> list[Task]:
    """Open tasks that matter today (undated, due today or overdue), capped.

    The first task is the "next critical thing".
    """
    if today is None:
        today = date.today()
    if limit is None:
        limit = get_settings().todays_task_limit

    return (
        db.query(Task)
        .filter(
            Task.user_id == user_id,
            Task.is_completed == 0,
            or_(Task.due_date.is_(None), Task.due_date <= today.isoformat()),
        )
        .order_by(Task.priority_level.desc(), Task.created_at.asc())
        .limit(limit)
        .all()
    )


def create_task(
    db: Session,
    user_id: str,
    title: str,
    description: str | None = None,
    priority_level: int = 1,
    due_date: date | None = None,
) -> Task:
    title = (title or "").strip()
    if not title:
        raise ValidationError("Task title is required")
    if not 1 <= priority_level <= 5:
        raise ValidationError("Priority must be between 1 and 5")

    task = Task(
        user_id=user_id,
        title=title,
        description=(description or "").strip() or None,
        priority_level=priority_level,
        due_date=due_date.isoformat() if due_date else None,
    )
    db.add(task)
    commit_or_rollback(db, "Could not save your task. Please try again.")
    db.refresh(task)
    return task


def complete_task(
    db: Session,
    ledger: BrainBucksLedger,
    user: User,
    task_id: str,
) -> tuple[Task, int]:
    """Mark a task done and award Brain Bucks, atomically.

    Returns the task and the new balance.
    """
    points = get_settings().task_completed_points

    with ledger.user_transaction(db, user.id):
        task = get_task(db, user.id, task_id)
        if task.is_completed:
            raise ValidationError("Task is already completed")

        # Only one caller, in any process, can flip is_completed from 0 to 1
        claimed = db.query(Task).filter(
            Task.id == task.id,
            Task.user_id == user.id,
            Task.is_completed == 0,
        ).update(
            {Task.is_completed: 1, Task.completed_at: datetime.utcnow().isoformat()},
            synchronize_session=False,
        )
        if not claimed:
            raise ValidationError("Task is already completed")

        record_activity(user)
        balance = ledger.credit(db, user.id, points, TASK_COMPLETED, "Task completed", reference_id=task.id)

    db.refresh(task)
    logger.info("User %s completed task %s", user.id, task.id)
    return task, balance
