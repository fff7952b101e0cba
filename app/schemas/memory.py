"""Memory schemas."""
import json
from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


class MemoryCreate(BaseModel):
    """Request to journal a memory."""

    title: str = Field(..., max_length=255)
    content: str | None = None
    entry_date: date | None = None
    tags: list[str] = []
    emotional_tone: str | None = Field(None, max_length=50)
    memory_type: Literal["moment", "meal", "anchor"] = "moment"


class MemoryResponse(BaseModel):
    """Memory response."""

    id: str
    title: str
    content: str | None
    entry_date: str
    tags: list[str]
    emotional_tone: str | None
    memory_type: str
    created_at: str

    @field_validator("tags", mode="before")
    @classmethod
    def parse_tags(cls, v: Any) -> list[str]:
        if isinstance(v, str):
            return json.loads(v)
        return v or []

    class Config:
        from_attributes = True


class MemoryCreatedResponse(BaseModel):
    """A new memory and the Brain Bucks it earned."""

    memory: MemoryResponse
    points_awarded: int
    brain_bucks_balance: int
