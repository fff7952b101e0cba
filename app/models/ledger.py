"""Brain Bucks ledger model."""
import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from app.database import Base


class LedgerEntry(Base):
    """Append-only record of one Brain Bucks credit (+) or debit (-)."""

    __tablename__ = "brain_bucks_ledger"
    __table_args__ = (
        CheckConstraint("amount <> 0", name="ck_brain_bucks_ledger_amount_non_zero"),
        Index("ix_brain_bucks_ledger_user_created", "user_id", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    # task_completed, memory_added, reward_redeemed, ...
    action_type = Column(String(50), nullable=False)
    amount = Column(Integer, nullable=False)
    description = Column(Text)
    reference_id = Column(String(36))  # Task, memory or reward that caused the entry
    balance_after = Column(Integer, nullable=False)

    created_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())

    # Relationships
    user = relationship("User", back_populates="ledger_entries")
