"""Memory Map journal model."""
import uuid
from datetime import date, datetime

from sqlalchemy import Column, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship

from app.database import Base


class MemoryEntry(Base):
    """A journaled memory: a moment, a meal or an anchor."""

    __tablename__ = "memory_entries"
    __table_args__ = (
        Index("ix_memory_entries_user_date", "user_id", "entry_date"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    content = Column(Text)
    entry_date = Column(String(10), nullable=False, default=lambda: date.today().isoformat())  # YYYY-MM-DD
    tags = Column(Text, default="[]")  # JSON array
    emotional_tone = Column(String(50))
    memory_type = Column(String(20), nullable=False, default="moment")  # moment, meal, anchor
    created_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String(26), default=lambda: datetime.utcnow().isoformat(), onupdate=lambda: datetime.utcnow().isoformat())

    # Relationships
    user = relationship("User", back_populates="memories")
