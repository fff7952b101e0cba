import json
import os
import sys
from datetime import date

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

os.environ.setdefault("DATABASE_URL", "sqlite:///./data/rememory.db")
os.environ.setdefault("SECRET_KEY", "0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef")

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.database import Base
from app.errors import NotFoundError, ValidationError
from app.models.account import Account
from app.models.user import User, UserPreferences
from app.services.profiles import (
    load_preferences,
    load_profile,
    provision_profile,
    record_activity,
    update_preferences,
    update_profile,
)


def _session_factory(url="sqlite:///:memory:"):
    engine = create_engine(url, connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def _make_account(session, email="casey@example.com") -> str:
    account = Account(email=email, password_hash="hashed")
    session.add(account)
    session.commit()
    return account.id


def test_load_profile_before_provisioning_is_not_found():
    session = _session_factory()()
    account_id = _make_account(session)

    with pytest.raises(NotFoundError):
        load_profile(session, account_id)


def test_provision_creates_profile_with_default_preferences():
    session = _session_factory()()
    account_id = _make_account(session)

    user = provision_profile(session, account_id, name=" Casey ", nickname="", neurotype_tags=["ADHD", "ADHD", " Autism "])

    assert user.name == "Casey"
    assert user.nickname is None
    assert json.loads(user.neurotype_tags) == ["ADHD", "Autism"]
    assert user.brain_bucks_balance == 0
    assert user.streak_count == 0
    assert user.subscription_status == "free"
    assert user.last_activity_date == date.today().isoformat()

    preferences = load_preferences(session, user)
    assert preferences.animations_enabled == 1
    assert preferences.theme_mode == "light"
    assert preferences.sound_enabled == 1
    assert preferences.high_contrast == 0
    assert preferences.reminder_frequency == "gentle"
    assert load_profile(session, account_id).id == user.id


def test_provisioning_twice_returns_the_existing_profile():
    session = _session_factory()()
    account_id = _make_account(session)

    first = provision_profile(session, account_id, name="Casey")
    second = provision_profile(session, account_id, name="Someone Else")

    assert second.id == first.id
    assert second.name == "Casey"
    assert session.query(User).filter(User.auth_id == account_id).count() == 1
    assert session.query(UserPreferences).count() == 1


def test_raced_provisioning_converges_on_one_profile(tmp_path):
    session_local = _session_factory(f"sqlite:///{tmp_path / 'race.db'}")
    setup = session_local()
    account_id = _make_account(setup)
    setup.close()

    winner_session = session_local()
    loser_session = session_local()

    # The competing request commits its profile after our existence check passed
    @event.listens_for(loser_session, "before_flush", once=True)
    def provision_concurrently(session, flush_context, instances):
        winner_session.add(User(auth_id=account_id, name="Winner"))
        winner_session.commit()

    user = provision_profile(loser_session, account_id, name="Loser")

    assert user.name == "Winner"
    assert loser_session.query(User).filter(User.auth_id == account_id).count() == 1
    winner_session.close()
    loser_session.close()


def test_identity_key_is_unique_in_the_store():
    session = _session_factory()()
    account_id = _make_account(session)
    session.add(User(auth_id=account_id, name="One"))
    session.commit()

    session.add(User(auth_id=account_id, name="Two"))
    with pytest.raises(IntegrityError):
        session.commit()


def test_provision_requires_a_name():
    session = _session_factory()()
    account_id = _make_account(session)

    with pytest.raises(ValidationError):
        provision_profile(session, account_id, name="   ")
    assert session.query(User).count() == 0


def test_update_profile_merges_only_given_fields():
    session = _session_factory()()
    account_id = _make_account(session)
    user = provision_profile(session, account_id, name="Casey", nickname="Cas", neurotype_tags=["ADHD"])

    updated = update_profile(session, user, {"nickname": "CJ"})

    assert updated.name == "Casey"
    assert updated.nickname == "CJ"
    assert json.loads(updated.neurotype_tags) == ["ADHD"]


def test_update_profile_cannot_touch_balance():
    session = _session_factory()()
    account_id = _make_account(session)
    user = provision_profile(session, account_id, name="Casey")

    with pytest.raises(ValidationError):
        update_profile(session, user, {"brain_bucks_balance": 1000})
    with pytest.raises(ValidationError):
        update_profile(session, user, {"name": ""})

    session.expire_all()
    assert load_profile(session, account_id).brain_bucks_balance == 0


def test_update_preferences_is_partial_and_validated():
    session = _session_factory()()
    account_id = _make_account(session)
    user = provision_profile(session, account_id, name="Casey")

    preferences = update_preferences(session, user, {"animations_enabled": False, "theme_mode": "dark"})
    assert preferences.animations_enabled == 0
    assert preferences.theme_mode == "dark"
    assert preferences.sound_enabled == 1

    with pytest.raises(ValidationError):
        update_preferences(session, user, {"sound_enabled": False, "theme_mode": "sepia"})
    session.expire_all()
    preferences = load_preferences(session, user)
    assert preferences.sound_enabled == 1
    assert preferences.theme_mode == "dark"


def test_record_activity_tracks_daily_streak():
    user = User(name="Casey", streak_count=0, last_activity_date="2026-03-01")

    assert record_activity(user, today=date(2026, 3, 1)) == 1
    assert record_activity(user, today=date(2026, 3, 1)) == 1
    assert record_activity(user, today=date(2026, 3, 2)) == 2
    assert record_activity(user, today=date(2026, 3, 3)) == 3
    assert record_activity(user, today=date(2026, 3, 6)) == 1
    assert user.last_activity_date == "2026-03-06"
