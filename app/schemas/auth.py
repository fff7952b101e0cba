"""Authentication schemas."""
from pydantic import BaseModel, EmailStr, Field


class SignUpRequest(BaseModel):
    """Account sign-up request; also carries the initial profile."""

    email: EmailStr
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=1, max_length=100)
    nickname: str | None = Field(None, max_length=100)
    neurotype_tags: list[str] = []


class SignInRequest(BaseModel):
    """Sign-in request."""

    email: EmailStr
    password: str


class Token(BaseModel):
    """Token response. The refresh token travels only as an HttpOnly cookie."""

    access_token: str
    token_type: str = "bearer"


class SessionResponse(BaseModel):
    """Current session state: unauthenticated, no_profile or ready."""

    authenticated: bool
    state: str
    account_id: str | None = None
    email: str | None = None


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str
