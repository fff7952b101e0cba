"""Memory Map journal service."""
import json
import logging
from collections.abc import Iterable
from datetime import date

from sqlalchemy.orm import Session

from app.config import get_settings
from app.errors import ValidationError
from app.models.memory import MemoryEntry
from app.models.user import User
from app.services.brain_bucks import BrainBucksLedger
from app.services.profiles import clean_tags, record_activity

logger = logging.getLogger(__name__)

MEMORY_ADDED = "memory_added"
MEMORY_TYPES = ("moment", "meal", "anchor")
EMOTIONAL_TONES = ["Joyful", "Peaceful", "Grateful", "Proud", "Loved", "Safe", "Content"]


def list_memories(
    db: Session,
    user_id: str,
    memory_type: str | None = None,
    tag: str | None = None,
) -> list[MemoryEntry]:
    """Newest memories first, optionally narrowed to one type or tag."""
    query = db.query(MemoryEntry).filter(MemoryEntry.user_id == user_id)
    if memory_type:
        query = query.filter(MemoryEntry.memory_type == memory_type)
    memories = query.order_by(MemoryEntry.entry_date.desc(), MemoryEntry.created_at.desc()).all()

    if tag:
        memories = [m for m in memories if tag in json.loads(m.tags or "[]")]
    return memories


def create_memory(
    db: Session,
    ledger: BrainBucksLedger,
    user: User,
    title: str,
    content: str | None = None,
    entry_date: date | None = None,
    tags: Iterable[str] = (),
    emotional_tone: str | None = None,
    memory_type: str = "moment",
) -> tuple[MemoryEntry, int]:
    """Journal a memory and award Brain Bucks, atomically.

    Returns the memory and the new balance.
    """
    title = (title or "").strip()
    if not title:
        raise ValidationError("Memory title is required")
    if memory_type not in MEMORY_TYPES:
        raise ValidationError(f"Unknown memory type: {memory_type}")

    points = get_settings().memory_added_points

    with ledger.user_transaction(db, user.id):
        memory = MemoryEntry(
            user_id=user.id,
            title=title,
            content=(content or "").strip() or None,
            entry_date=(entry_date or date.today()).isoformat(),
            tags=json.dumps(clean_tags(tags)),
            emotional_tone=(emotional_tone or "").strip() or None,
            memory_type=memory_type,
        )
        db.add(memory)
        db.flush()
        record_activity(user)
        balance = ledger.credit(db, user.id, points, MEMORY_ADDED, "Memory added to your map", reference_id=memory.id)

    db.refresh(memory)
    logger.info("User %s added %s memory %s", user.id, memory_type, memory.id)
    return memory, balance
