"""User profile and preference models."""
import uuid
from datetime import date, datetime

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.database import Base


class User(Base):
    """User profile, one per account."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("brain_bucks_balance >= 0", name="ck_users_balance_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    auth_id = Column(String(36), ForeignKey("accounts.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    nickname = Column(String(100))
    neurotype_tags = Column(Text, default="[]")  # JSON array

    # Cached sum of brain_bucks_ledger.amount; only BrainBucksLedger writes it
    brain_bucks_balance = Column(Integer, nullable=False, default=0)
    streak_count = Column(Integer, nullable=False, default=0)
    last_activity_date = Column(String(10), default=lambda: date.today().isoformat())  # YYYY-MM-DD
    subscription_status = Column(String(20), nullable=False, default="free")

    created_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String(26), default=lambda: datetime.utcnow().isoformat(), onupdate=lambda: datetime.utcnow().isoformat())

    # Relationships
    account = relationship("Account", back_populates="profile")
    preferences = relationship("UserPreferences", back_populates="user", uselist=False, cascade="all, delete-orphan")
    tasks = relationship("Task", back_populates="user", cascade="all, delete-orphan")
    memories = relationship("MemoryEntry", back_populates="user", cascade="all, delete-orphan")
    rewards = relationship("Reward", back_populates="user", cascade="all, delete-orphan")
    ledger_entries = relationship("LedgerEntry", back_populates="user", cascade="all, delete-orphan")


class UserPreferences(Base):
    """UI and accessibility preferences."""

    __tablename__ = "user_preferences"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    animations_enabled = Column(Integer, nullable=False, default=1)  # SQLite boolean
    theme_mode = Column(String(10), nullable=False, default="light")  # light, dark
    sound_enabled = Column(Integer, nullable=False, default=1)  # SQLite boolean
    high_contrast = Column(Integer, nullable=False, default=0)  # SQLite boolean
    reminder_frequency = Column(String(20), nullable=False, default="gentle")  # off, gentle, daily, frequent
    created_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String(26), default=lambda: datetime.utcnow().isoformat(), onupdate=lambda: datetime.utcnow().isoformat())

    # Relationships
    user = relationship("User", back_populates="preferences")
