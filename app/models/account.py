"""Account model (authentication identity)."""
import uuid
from datetime import datetime

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from app.database import Base


class Account(Base):
    """Login identity. The profile (User) hangs off this via users.auth_id."""

    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String(26), default=lambda: datetime.utcnow().isoformat(), onupdate=lambda: datetime.utcnow().isoformat())

    # Relationships
    profile = relationship("User", back_populates="account", uselist=False, cascade="all, delete-orphan")
    refresh_sessions = relationship("RefreshSession", back_populates="account", cascade="all, delete-orphan")
