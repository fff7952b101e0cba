"""Rewards Vault model."""
import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from app.database import Base


class Reward(Base):
    """Something the user can buy with Brain Bucks."""

    __tablename__ = "brain_buck_rewards"
    __table_args__ = (
        CheckConstraint("cost >= 1", name="ck_brain_buck_rewards_cost_positive"),
        Index("ix_brain_buck_rewards_user_active", "user_id", "is_active", "cost"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    cost = Column(Integer, nullable=False)
    category = Column(String(20), nullable=False, default="treat")  # treat, activity, rest, social

    # Status
    is_redeemed = Column(Integer, nullable=False, default=0)  # SQLite boolean
    redeemed_at = Column(String(26))
    is_active = Column(Integer, nullable=False, default=1)  # SQLite boolean

    created_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String(26), default=lambda: datetime.utcnow().isoformat(), onupdate=lambda: datetime.utcnow().isoformat())

    # Relationships
    user = relationship("User", back_populates="rewards")
