"""Authentication API endpoints."""
from datetime import datetime, timedelta
import hashlib
import logging
import uuid

import bcrypt
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from jose import JWTError, jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import get_current_account, get_db, get_optional_account, get_session_events
from app.config import get_settings
from app.errors import AuthenticationError, ValidationError
from app.models.account import Account
from app.models.auth import RefreshSession
from app.models.user import User
from app.schemas.auth import (
    MessageResponse,
    SessionResponse,
    SignInRequest,
    SignUpRequest,
    Token,
)
from app.schemas.profile import ProfileResponse
from app.services import session_events
from app.services.profiles import provision_profile
from app.services.session_events import SessionEventBus

router = APIRouter(prefix="/auth", tags=["auth"])
settings = get_settings()
logger = logging.getLogger(__name__)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(
        plain_password.encode("utf-8"),
        hashed_password.encode("utf-8"),
    )


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return bcrypt.hashpw(
        password.encode("utf-8"),
        bcrypt.gensalt(),
    ).decode("utf-8")


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def create_refresh_token(data: dict) -> str:
    """Create a JWT refresh token."""
    to_encode = data.copy()
    expire = to_encode.pop("exp", datetime.utcnow() + timedelta(days=settings.refresh_token_expire_days))
    to_encode.update({"exp": expire, "type": "refresh"})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def hash_token_id(token_id: str) -> str:
    """Hash refresh token identifier before persisting."""
    return hashlib.sha256(token_id.encode("utf-8")).hexdigest()


def set_refresh_cookie(response: Response, refresh_token: str) -> None:
    """Issue secure HttpOnly refresh-token cookie."""
    response.set_cookie(
        key=settings.refresh_cookie_name,
        value=refresh_token,
        httponly=True,
        secure=settings.refresh_cookie_secure,
        samesite=settings.refresh_cookie_samesite,
        path=settings.refresh_cookie_path,
        max_age=settings.refresh_token_expire_days * 24 * 60 * 60,
    )


def clear_refresh_cookie(response: Response) -> None:
    """Clear refresh-token cookie."""
    response.delete_cookie(
        key=settings.refresh_cookie_name,
        path=settings.refresh_cookie_path,
        secure=settings.refresh_cookie_secure,
        httponly=True,
        samesite=settings.refresh_cookie_samesite,
    )


def get_request_ip(request: Request) -> str | None:
    """Extract best-effort client IP for session metadata."""
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",")[0].strip()
    if request.client:
        return request.client.host
    return None


def create_refresh_session(
    db: Session,
    account_id: str,
    request: Request,
    rotated_from_id: str | None = None,
) -> tuple[RefreshSession, str]:
    """Create persisted refresh session + JWT pair."""
    jti = str(uuid.uuid4())
    expires_at_dt = datetime.utcnow() + timedelta(days=settings.refresh_token_expire_days)

    session = RefreshSession(
        account_id=account_id,
        jti_hash=hash_token_id(jti),
        expires_at=expires_at_dt.isoformat(),
        rotated_from_id=rotated_from_id,
        user_agent=request.headers.get("user-agent"),
        ip_address=get_request_ip(request),
    )
    db.add(session)
    db.flush()

    refresh_token = create_refresh_token({"sub": account_id, "jti": jti, "exp": expires_at_dt})
    return session, refresh_token


def revoke_all_account_sessions(db: Session, account_id: str) -> None:
    """Revoke all active refresh sessions for an account."""
    now = datetime.utcnow().isoformat()
    db.query(RefreshSession).filter(
        RefreshSession.account_id == account_id,
        RefreshSession.revoked_at.is_(None),
    ).update(
        {"revoked_at": now, "last_used_at": now},
        synchronize_session=False,
    )


@router.post("/signup", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
def sign_up(
    signup_data: SignUpRequest,
    db: Session = Depends(get_db),
    events: SessionEventBus = Depends(get_session_events),
):
    """Create an account and provision its profile and default preferences."""
    if not signup_data.name.strip():
        raise ValidationError("Name is required")

    email = signup_data.email.lower()
    if db.query(Account).filter(Account.email == email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )

    account = Account(
        email=email,
        password_hash=get_password_hash(signup_data.password),
    )
    db.add(account)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )
    db.refresh(account)

    user = provision_profile(
        db,
        account.id,
        name=signup_data.name,
        nickname=signup_data.nickname,
        neurotype_tags=signup_data.neurotype_tags,
    )
    events.publish(session_events.SIGNED_UP, account.id)
    return user


@router.post("/login", response_model=Token)
def login(
    credentials: SignInRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    events: SessionEventBus = Depends(get_session_events),
):
    """Sign in and get tokens."""
    account = db.query(Account).filter(Account.email == credentials.email.lower()).first()

    if not account or not verify_password(credentials.password, account.password_hash):
        logger.info("Failed sign-in attempt")
        raise AuthenticationError("Incorrect email or password")

    # Create tokens
    access_token = create_access_token({"sub": account.id})
    _, refresh_token = create_refresh_session(db, account.id, request)
    db.commit()
    set_refresh_cookie(response, refresh_token)
    events.publish(session_events.SIGNED_IN, account.id)

    return Token(access_token=access_token)


@router.post("/refresh", response_model=Token)
def refresh_tokens(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    events: SessionEventBus = Depends(get_session_events),
):
    """Refresh access token using secure cookie refresh token."""
    refresh_cookie = request.cookies.get(settings.refresh_cookie_name)
    if not refresh_cookie:
        raise AuthenticationError("Missing refresh token")

    try:
        payload = jwt.decode(
            refresh_cookie,
            settings.secret_key,
            algorithms=[settings.algorithm],
        )
    except JWTError:
        raise AuthenticationError("Invalid or expired refresh token", clear_refresh_cookie=True)

    if payload.get("type") != "refresh":
        raise AuthenticationError("Invalid token type", clear_refresh_cookie=True)

    account_id: str | None = payload.get("sub")
    jti: str | None = payload.get("jti")
    if account_id is None or jti is None:
        raise AuthenticationError("Invalid token", clear_refresh_cookie=True)

    session = db.query(RefreshSession).filter(
        RefreshSession.account_id == account_id,
        RefreshSession.jti_hash == hash_token_id(jti),
    ).first()
    if not session or session.revoked_at:
        raise AuthenticationError("Invalid refresh session", clear_refresh_cookie=True)

    try:
        expires_at = datetime.fromisoformat(session.expires_at)
    except ValueError:
        raise AuthenticationError("Invalid refresh session", clear_refresh_cookie=True)
    if expires_at <= datetime.utcnow():
        raise AuthenticationError("Refresh session expired", clear_refresh_cookie=True)

    # Verify account still exists
    account = db.query(Account).filter(Account.id == account_id).first()
    if not account:
        raise AuthenticationError("Account not found", clear_refresh_cookie=True)

    now = datetime.utcnow().isoformat()
    session.revoked_at = now
    session.last_used_at = now
    _, new_refresh_token = create_refresh_session(db, account.id, request, rotated_from_id=session.id)

    # Create new access token
    access_token = create_access_token({"sub": account.id})
    db.commit()
    set_refresh_cookie(response, new_refresh_token)
    events.publish(session_events.TOKEN_REFRESHED, account.id)

    return Token(access_token=access_token)


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    db: Session = Depends(get_db),
    current_account: Account = Depends(get_current_account),
    events: SessionEventBus = Depends(get_session_events),
):
    """Sign out and revoke all refresh sessions for the current account."""
    revoke_all_account_sessions(db, current_account.id)
    db.commit()
    clear_refresh_cookie(response)
    events.publish(session_events.SIGNED_OUT, current_account.id)
    return MessageResponse(message="Successfully logged out")


@router.get("/session", response_model=SessionResponse)
def get_session(
    db: Session = Depends(get_db),
    account: Account | None = Depends(get_optional_account),
):
    """Current session, or an unauthenticated state. Never fails."""
    if account is None:
        return SessionResponse(authenticated=False, state="unauthenticated")

    has_profile = db.query(User.id).filter(User.auth_id == account.id).first() is not None
    return SessionResponse(
        authenticated=True,
        state="ready" if has_profile else "no_profile",
        account_id=account.id,
        email=account.email,
    )
