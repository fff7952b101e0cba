"""Profile and preference schemas."""
import json
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


class ProfileCreate(BaseModel):
    """First-time profile provisioning for an account without one."""

    name: str = Field(..., min_length=1, max_length=100)
    nickname: str | None = Field(None, max_length=100)
    neurotype_tags: list[str] = []


class ProfileUpdate(BaseModel):
    """Partial profile update. Only the fields sent are changed."""

    name: str | None = Field(None, min_length=1, max_length=100)
    nickname: str | None = Field(None, max_length=100)
    neurotype_tags: list[str] | None = None


class ProfileResponse(BaseModel):
    """User profile."""

    id: str
    name: str
    nickname: str | None
    neurotype_tags: list[str]
    brain_bucks_balance: int
    streak_count: int
    last_activity_date: str | None
    subscription_status: str
    created_at: str

    @field_validator("neurotype_tags", mode="before")
    @classmethod
    def parse_tags(cls, v: Any) -> list[str]:
        if isinstance(v, str):
            return json.loads(v)
        return v or []

    class Config:
        from_attributes = True


class PreferencesUpdate(BaseModel):
    """Partial preferences update. Only the fields sent are changed."""

    animations_enabled: bool | None = None
    theme_mode: Literal["light", "dark"] | None = None
    sound_enabled: bool | None = None
    high_contrast: bool | None = None
    reminder_frequency: Literal["off", "gentle", "daily", "frequent"] | None = None


class PreferencesResponse(BaseModel):
    """User preferences."""

    animations_enabled: bool
    theme_mode: str
    sound_enabled: bool
    high_contrast: bool
    reminder_frequency: str
    updated_at: str | None = None

    @field_validator("animations_enabled", "sound_enabled", "high_contrast", mode="before")
    @classmethod
    def int_to_bool(cls, v: Any) -> bool:
        if isinstance(v, int):
            return bool(v)
        return v

    class Config:
        from_attributes = True
