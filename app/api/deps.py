"""Shared FastAPI dependencies."""
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.errors import AuthenticationError
from app.models.account import Account
from app.models.user import User
from app.services.brain_bucks import BrainBucksLedger
from app.services.profiles import load_profile
from app.services.session_events import SessionEventBus

__all__ = [
    "get_db",
    "get_current_account",
    "get_optional_account",
    "get_current_user",
    "get_ledger",
    "get_session_events",
]

settings = get_settings()
bearer_scheme = HTTPBearer(auto_error=False)


def _account_from_token(db: Session, token: str) -> Account:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        raise AuthenticationError("Invalid or expired access token")

    if payload.get("type") != "access" or not payload.get("sub"):
        raise AuthenticationError("Invalid access token")

    account = db.query(Account).filter(Account.id == payload["sub"]).first()
    if not account:
        raise AuthenticationError("Account not found")
    return account


def get_optional_account(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Account | None:
    """The signed-in account, or None for anonymous callers."""
    if credentials is None:
        return None
    try:
        return _account_from_token(db, credentials.credentials)
    except AuthenticationError:
        return None


def get_current_account(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Account:
    """The signed-in account; AuthenticationError otherwise."""
    if credentials is None:
        raise AuthenticationError("Not signed in")
    return _account_from_token(db, credentials.credentials)


def get_current_user(
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
) -> User:
    """The signed-in account's profile; NotFoundError until it is provisioned."""
    return load_profile(db, account.id)


def get_ledger(request: Request) -> BrainBucksLedger:
    return request.app.state.ledger


def get_session_events(request: Request) -> SessionEventBus:
    return request.app.state.session_events
