"""Critical Compass task model."""
import uuid
from datetime import datetime

from sqlalchemy import Column, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from app.database import Base


class Task(Base):
    """A task the user wants to remember to do."""

    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_user_open", "user_id", "is_completed", "priority_level"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    priority_level = Column(Integer, nullable=False, default=1)  # 1 (low) .. 5 (critical)
    is_completed = Column(Integer, nullable=False, default=0)  # SQLite boolean
    due_date = Column(String(10))  # YYYY-MM-DD
    completed_at = Column(String(26))
    created_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String(26), default=lambda: datetime.utcnow().isoformat(), onupdate=lambda: datetime.utcnow().isoformat())

    # Relationships
    user = relationship("User", back_populates="tasks")
