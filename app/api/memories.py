"""Memory Map API endpoints."""
from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, get_ledger
from app.config import get_settings
from app.models.user import User
from app.schemas.memory import MemoryCreate, MemoryCreatedResponse, MemoryResponse
from app.services.brain_bucks import BrainBucksLedger
from app.services.memories import EMOTIONAL_TONES, create_memory, list_memories

router = APIRouter(prefix="/memories", tags=["memories"])


@router.get("", response_model=list[MemoryResponse])
def get_memories(
    memory_type: Literal["moment", "meal", "anchor"] | None = Query(None, description="Filter by type"),
    tag: str | None = Query(None, description="Filter by tag"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List memories, newest first."""
    return list_memories(db, current_user.id, memory_type=memory_type, tag=tag)


@router.get("/tones", response_model=list[str])
def get_emotional_tones():
    """Suggested emotional tones (no auth required)."""
    return EMOTIONAL_TONES


@router.post("", response_model=MemoryCreatedResponse, status_code=status.HTTP_201_CREATED)
def add_memory(
    memory_data: MemoryCreate,
    db: Session = Depends(get_db),
    ledger: BrainBucksLedger = Depends(get_ledger),
    current_user: User = Depends(get_current_user),
):
    """Add a memory to the map and earn Brain Bucks."""
    memory, balance = create_memory(
        db,
        ledger,
        current_user,
        title=memory_data.title,
        content=memory_data.content,
        entry_date=memory_data.entry_date,
        tags=memory_data.tags,
        emotional_tone=memory_data.emotional_tone,
        memory_type=memory_data.memory_type,
    )
    return MemoryCreatedResponse(
        memory=MemoryResponse.model_validate(memory),
        points_awarded=get_settings().memory_added_points,
        brain_bucks_balance=balance,
    )
