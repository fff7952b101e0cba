"""Reward schemas."""
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


class RewardCreate(BaseModel):
    """Request to add a custom reward."""

    title: str = Field(..., max_length=255)
    description: str | None = None
    cost: int = Field(10, ge=1)
    category: Literal["treat", "activity", "rest", "social"] = "treat"


class RewardResponse(BaseModel):
    """Reward response."""

    id: str
    title: str
    description: str | None
    cost: int
    category: str
    is_redeemed: bool
    redeemed_at: str | None
    is_active: bool
    created_at: str

    @field_validator("is_redeemed", "is_active", mode="before")
    @classmethod
    def int_to_bool(cls, v: Any) -> bool:
        if isinstance(v, int):
            return bool(v)
        return v

    class Config:
        from_attributes = True


class SuggestedRewardResponse(BaseModel):
    """A starter reward template."""

    slug: str
    title: str
    cost: int
    category: str


class RewardRedeemedResponse(BaseModel):
    """A redeemed reward and the remaining balance."""

    reward: RewardResponse
    brain_bucks_balance: int
