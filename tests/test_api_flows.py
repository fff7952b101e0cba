import os
import sys

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite:///./data/rememory.db")
os.environ.setdefault("SECRET_KEY", "0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef")

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.api import deps
from app.database import Base
from app.main import create_app
from app.models.account import Account
from app.models.user import User


def _build_test_client():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    app = create_app()

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[deps.get_db] = override_get_db
    return TestClient(app), TestingSessionLocal


def _auth_headers(client: TestClient, email: str, signup: bool = True) -> dict:
    if signup:
        response = client.post(
            "/api/auth/signup",
            json={
                "email": email,
                "password": "TestPass123!",
                "name": "Casey",
                "neurotype_tags": ["ADHD", "Dyslexia"],
            },
        )
        assert response.status_code == 201
    login_response = client.post("/api/auth/login", json={"email": email, "password": "TestPass123!"})
    assert login_response.status_code == 200
    return {"Authorization": f"Bearer {login_response.json()['access_token']}"}


def test_session_state_without_credentials_is_unauthenticated():
    client, _ = _build_test_client()

    response = client.get("/api/auth/session")

    assert response.status_code == 200
    assert response.json()["authenticated"] is False
    assert response.json()["state"] == "unauthenticated"

    garbage = client.get("/api/auth/session", headers={"Authorization": "Bearer not-a-token"})
    assert garbage.json()["state"] == "unauthenticated"


def test_protected_routes_require_a_token():
    client, _ = _build_test_client()

    assert client.get("/api/tasks").status_code == 401
    assert client.get("/api/brain-bucks").status_code == 401


def test_signup_provisions_profile_and_preferences():
    client, _ = _build_test_client()
    headers = _auth_headers(client, "casey@example.com")

    session = client.get("/api/auth/session", headers=headers).json()
    assert session["state"] == "ready"
    assert session["email"] == "casey@example.com"

    profile = client.get("/api/profile", headers=headers).json()
    assert profile["name"] == "Casey"
    assert profile["neurotype_tags"] == ["ADHD", "Dyslexia"]
    assert profile["brain_bucks_balance"] == 0
    assert profile["subscription_status"] == "free"

    preferences = client.get("/api/profile/preferences", headers=headers).json()
    assert preferences["animations_enabled"] is True
    assert preferences["theme_mode"] == "light"
    assert preferences["high_contrast"] is False


def test_task_completion_flow_earns_brain_bucks():
    client, _ = _build_test_client()
    headers = _auth_headers(client, "tasks@example.com")

    created = client.post("/api/tasks", json={"title": "Take meds", "priority_level": 5}, headers=headers)
    assert created.status_code == 201
    task_id = created.json()["id"]
    client.post("/api/tasks", json={"title": "Call pharmacy", "priority_level": 2}, headers=headers)

    today = client.get("/api/tasks/today", headers=headers).json()
    assert today["next_critical_task"]["id"] == task_id
    assert [t["title"] for t in today["tasks"]] == ["Take meds", "Call pharmacy"]

    completed = client.post(f"/api/tasks/{task_id}/complete", headers=headers)
    assert completed.status_code == 200
    assert completed.json()["task"]["is_completed"] is True
    assert completed.json()["points_awarded"] == 5
    assert completed.json()["brain_bucks_balance"] == 5

    again = client.post(f"/api/tasks/{task_id}/complete", headers=headers)
    assert again.status_code == 400

    balance = client.get("/api/brain-bucks", headers=headers).json()
    assert balance == {"balance": 5, "ledger_total": 5, "consistent": True}

    ledger = client.get("/api/brain-bucks/ledger", headers=headers).json()
    assert [(e["action_type"], e["amount"]) for e in ledger["entries"]] == [("task_completed", 5)]
    assert ledger["entries"][0]["reference_id"] == task_id

    assert client.get("/api/profile", headers=headers).json()["streak_count"] == 1


def test_invalid_task_input_is_rejected():
    client, _ = _build_test_client()
    headers = _auth_headers(client, "invalid@example.com")

    assert client.post("/api/tasks", json={"title": "Huh", "priority_level": 9}, headers=headers).status_code == 422
    assert client.post("/api/tasks", json={"title": "   "}, headers=headers).status_code == 400
    assert client.post("/api/tasks/not-a-task/complete", headers=headers).status_code == 404


def test_memory_flow_earns_brain_bucks():
    client, _ = _build_test_client()
    headers = _auth_headers(client, "memories@example.com")

    created = client.post(
        "/api/memories",
        json={
            "title": "Sunday roast",
            "entry_date": "2026-01-04",
            "tags": ["family", "food"],
            "emotional_tone": "Grateful",
            "memory_type": "meal",
        },
        headers=headers,
    )
    assert created.status_code == 201
    assert created.json()["brain_bucks_balance"] == 5
    assert created.json()["memory"]["tags"] == ["family", "food"]

    assert len(client.get("/api/memories?memory_type=meal", headers=headers).json()) == 1
    assert client.get("/api/memories?tag=work", headers=headers).json() == []
    assert "Grateful" in client.get("/api/memories/tones").json()


def test_redeeming_without_enough_brain_bucks_is_a_conflict():
    client, _ = _build_test_client()
    headers = _auth_headers(client, "vault@example.com")

    reward = client.post("/api/rewards/suggestions/order-a-treat", headers=headers)
    assert reward.status_code == 201
    reward_id = reward.json()["id"]

    task_id = client.post("/api/tasks", json={"title": "Laundry"}, headers=headers).json()["id"]
    client.post(f"/api/tasks/{task_id}/complete", headers=headers)

    response = client.post(f"/api/rewards/{reward_id}/redeem", headers=headers)

    assert response.status_code == 409
    assert response.json() == {"detail": "Not enough Brain Bucks!", "balance": 5, "required": 50}
    rewards = client.get("/api/rewards", headers=headers).json()
    assert rewards[0]["is_redeemed"] is False
    assert client.get("/api/brain-bucks", headers=headers).json()["balance"] == 5


def test_redeeming_a_reward_spends_brain_bucks():
    client, _ = _build_test_client()
    headers = _auth_headers(client, "spender@example.com")

    reward_id = client.post(
        "/api/rewards",
        json={"title": "Fancy coffee", "cost": 5, "category": "treat"},
        headers=headers,
    ).json()["id"]
    memory = client.post("/api/memories", json={"title": "First snow"}, headers=headers)
    assert memory.json()["brain_bucks_balance"] == 5

    response = client.post(f"/api/rewards/{reward_id}/redeem", headers=headers)

    assert response.status_code == 200
    assert response.json()["brain_bucks_balance"] == 0
    assert response.json()["reward"]["is_redeemed"] is True
    assert client.get("/api/rewards?include_redeemed=false", headers=headers).json() == []

    entries = client.get("/api/brain-bucks/ledger", headers=headers).json()["entries"]
    assert entries[0]["amount"] == -5
    assert entries[0]["description"] == "Redeemed: Fancy coffee"


def test_suggested_rewards_are_listed():
    client, _ = _build_test_client()

    suggestions = client.get("/api/rewards/suggestions").json()

    assert {s["slug"] for s in suggestions} >= {"watch-a-show", "order-a-treat"}
    assert all(s["cost"] >= 1 for s in suggestions)


def test_profile_and_preferences_patch_only_given_fields():
    client, _ = _build_test_client()
    headers = _auth_headers(client, "patch@example.com")

    profile = client.patch("/api/profile", json={"nickname": "CJ"}, headers=headers)
    assert profile.status_code == 200
    assert profile.json()["nickname"] == "CJ"
    assert profile.json()["name"] == "Casey"

    preferences = client.patch(
        "/api/profile/preferences",
        json={"theme_mode": "dark", "high_contrast": True},
        headers=headers,
    )
    assert preferences.status_code == 200
    assert preferences.json()["theme_mode"] == "dark"
    assert preferences.json()["high_contrast"] is True
    assert preferences.json()["sound_enabled"] is True

    bad = client.patch("/api/profile/preferences", json={"theme_mode": "sepia"}, headers=headers)
    assert bad.status_code == 422


def test_account_without_profile_can_provision_once():
    client, testing_session_local = _build_test_client()
    headers = _auth_headers(client, "late@example.com")

    # Simulate an account whose profile was never provisioned
    db = testing_session_local()
    try:
        account = db.query(Account).filter(Account.email == "late@example.com").first()
        db.query(User).filter(User.auth_id == account.id).delete()
        db.commit()
    finally:
        db.close()

    assert client.get("/api/auth/session", headers=headers).json()["state"] == "no_profile"
    assert client.get("/api/profile", headers=headers).status_code == 404

    first = client.post("/api/profile", json={"name": "Late Starter"}, headers=headers)
    second = client.post("/api/profile", json={"name": "Someone Else"}, headers=headers)

    assert first.status_code == 201
    assert second.status_code == 201
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["name"] == "Late Starter"
    assert client.get("/api/auth/session", headers=headers).json()["state"] == "ready"


def test_neurotype_options_are_public():
    client, _ = _build_test_client()

    options = client.get("/api/profile/neurotypes").json()

    assert "ADHD" in options
    assert "Other" in options
