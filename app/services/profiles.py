"""Profile provisioning, loading and updates."""
import json
import logging
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import commit_or_rollback
from app.errors import NotFoundError, PersistenceError, ValidationError
from app.models.user import User, UserPreferences

logger = logging.getLogger(__name__)

PROFILE_FIELDS = {"name", "nickname", "neurotype_tags"}
PREFERENCE_FIELDS = {"animations_enabled", "theme_mode", "sound_enabled", "high_contrast", "reminder_frequency"}
BOOLEAN_PREFERENCES = {"animations_enabled", "sound_enabled", "high_contrast"}
THEME_MODES = ("light", "dark")
REMINDER_FREQUENCIES = ("off", "gentle", "daily", "frequent")

NEUROTYPE_OPTIONS = [
    "ADHD", "Autism", "Epilepsy", "Dementia", "Anxiety", "Depression",
    "PTSD", "Bipolar", "OCD", "Dyslexia", "Other",
]


def load_profile(db: Session, auth_id: str) -> User:
    """Get the profile linked to an account, or NotFoundError if not provisioned yet."""
    user = db.query(User).filter(User.auth_id == auth_id).first()
    if not user:
        raise NotFoundError("Profile not found")
    return user


def load_preferences(db: Session, user: User) -> UserPreferences:
    preferences = db.query(UserPreferences).filter(UserPreferences.user_id == user.id).first()
    if not preferences:
        raise NotFoundError("Preferences not found")
    return preferences


def provision_profile(
    db: Session,
    auth_id: str,
    name: str,
    nickname: str | None = None,
    neurotype_tags: Iterable[str] = (),
) -> User:
    """Create the profile and default preferences for an account.

    Idempotent: if the account already has a profile (including one created by a
    concurrent request that won the unique ``auth_id`` race) that profile is
    returned unchanged.
    """
    existing = db.query(User).filter(User.auth_id == auth_id).first()
    if existing:
        return existing

    name = (name or "").strip()
    if not name:
        raise ValidationError("Name is required")

    user = User(
        auth_id=auth_id,
        name=name,
        nickname=(nickname or "").strip() or None,
        neurotype_tags=json.dumps(clean_tags(neurotype_tags)),
        brain_bucks_balance=0,
        streak_count=0,
        last_activity_date=date.today().isoformat(),
        subscription_status="free",
    )
    try:
        db.add(user)
        db.flush()
        db.add(UserPreferences(user_id=user.id))
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        winner = db.query(User).filter(User.auth_id == auth_id).first()
        if winner is None:
            raise PersistenceError("Could not create your profile. Please try again.") from exc
        logger.info("Profile for account %s was provisioned concurrently", auth_id)
        return winner
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError("Could not create your profile. Please try again.") from exc

    db.refresh(user)
    logger.info("Provisioned profile %s for account %s", user.id, auth_id)
    return user


def update_profile(db: Session, user: User, changes: dict[str, Any]) -> User:
    """Merge the given profile fields into the user row."""
    unknown = set(changes) - PROFILE_FIELDS
    if unknown:
        raise ValidationError(f"Cannot update profile fields: {', '.join(sorted(unknown))}")

    if "name" in changes:
        name = (changes["name"] or "").strip()
        if not name:
            raise ValidationError("Name is required")
        user.name = name
    if "nickname" in changes:
        user.nickname = (changes["nickname"] or "").strip() or None
    if "neurotype_tags" in changes:
        user.neurotype_tags = json.dumps(clean_tags(changes["neurotype_tags"] or []))

    commit_or_rollback(db, "Could not update your profile. Please try again.")
    db.refresh(user)
    return user


def update_preferences(db: Session, user: User, changes: dict[str, Any]) -> UserPreferences:
    """Merge the given preference fields into the user's preferences row."""
    unknown = set(changes) - PREFERENCE_FIELDS
    if unknown:
        raise ValidationError(f"Cannot update preferences: {', '.join(sorted(unknown))}")

    preferences = load_preferences(db, user)
    values = {}
    for key, value in changes.items():
        if value is None:
            raise ValidationError(f"{key} cannot be empty")
        if key in BOOLEAN_PREFERENCES:
            value = 1 if value else 0
        elif key == "theme_mode" and value not in THEME_MODES:
            raise ValidationError(f"Unknown theme mode: {value}")
        elif key == "reminder_frequency" and value not in REMINDER_FREQUENCIES:
            raise ValidationError(f"Unknown reminder frequency: {value}")
        values[key] = value
    for key, value in values.items():
        setattr(preferences, key, value)

    commit_or_rollback(db, "Could not update your preferences. Please try again.")
    db.refresh(preferences)
    return preferences


def record_activity(user: User, today: date | None = None) -> int:
    """Update the daily streak for an activity happening ``today``.

    Same day keeps the streak, the following day extends it, any gap restarts it.
    The caller commits.
    """
    if today is None:
        today = date.today()
    last = _parse_date(user.last_activity_date)

    if last == today and user.streak_count:
        return user.streak_count
    if last == today - timedelta(days=1):
        user.streak_count = (user.streak_count or 0) + 1
    else:
        user.streak_count = 1
    user.last_activity_date = today.isoformat()
    return user.streak_count


def clean_tags(tags: Iterable[str]) -> list[str]:
    cleaned: list[str] = []
    for tag in tags:
        tag = str(tag).strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None

