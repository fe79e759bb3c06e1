"""
HTTP surface exercised through TestClient on an in-memory store.
"""
from __future__ import annotations

import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Make the recovery_api package importable for local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from recovery_api.app import create_app  # noqa: E402
from recovery_api.core.config import Settings  # noqa: E402
from recovery_api.repositories.memory_storage import MemoryStorage  # noqa: E402


def _settings(**overrides) -> Settings:
    values = dict(
        app_env="test",
        public_base_url="http://testserver",
        storage_backend="memory",
        database_url="",
        log_level="WARNING",
        demo_user_id=1,
        mood_log_default_limit=10,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture()
def storage():
    return MemoryStorage()


@pytest.fixture()
def client(storage):
    app = create_app(settings=_settings(), storage=storage)
    with TestClient(app) as c:
        yield c


REGISTER_PAYLOAD = {
    "username": "jordan",
    "password": "longenough",
    "email": "jordan@example.com",
    "addiction_types": ["alcohol"],
    "recovery_start_date": "2024-03-01T00:00:00Z",
}


def test_login_demo_user_hides_password(client):
    resp = client.post("/api/auth/login", json={"username": "demo_user", "password": "password123"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == 1
    assert body["username"] == "demo_user"
    assert "password" not in body


def test_login_wrong_password_is_401(client):
    resp = client.post("/api/auth/login", json={"username": "demo_user", "password": "nope"})
    assert resp.status_code == 401
    assert resp.json() == {"message": "Invalid credentials"}


def test_login_requires_fields(client):
    resp = client.post("/api/auth/login", json={"username": "", "password": "x"})
    assert resp.status_code == 400


def test_register_then_duplicate(client):
    resp = client.post("/api/auth/register", json=REGISTER_PAYLOAD)
    assert resp.status_code == 201
    assert resp.json()["id"] == 7
    assert resp.json()["emergency_contacts"] == []

    dup = client.post("/api/auth/register", json=REGISTER_PAYLOAD)
    assert dup.status_code == 409
    assert dup.json() == {"message": "User already exists"}


@pytest.mark.parametrize(
    "override",
    [
        {"password": "short"},
        {"email": "not-an-email"},
        {"addiction_types": []},
    ],
)
def test_register_validation(client, override):
    resp = client.post("/api/auth/register", json={**REGISTER_PAYLOAD, **override})
    assert resp.status_code == 400
    assert "message" in resp.json()


def test_concurrent_register_same_username_single_winner(client):
    payloads = [{**REGISTER_PAYLOAD, "email": f"jordan{i}@example.com"} for i in range(6)]
    with ThreadPoolExecutor(max_workers=6) as pool:
        codes = sorted(pool.map(lambda body: client.post("/api/auth/register", json=body).status_code, payloads))
    assert codes == [201, 409, 409, 409, 409, 409]


def test_get_and_patch_user(client):
    assert client.get("/api/user/1").json()["email"] == "demo@example.com"

    missing = client.get("/api/user/999")
    assert missing.status_code == 404
    assert missing.json() == {"message": "User not found"}

    patched = client.patch("/api/user/1", json={"emergency_contacts": ["sponsor"]})
    assert patched.status_code == 200
    assert patched.json()["emergency_contacts"] == ["sponsor"]
    assert patched.json()["addiction_types"] == ["alcohol", "opioids"]

    assert client.patch("/api/user/999", json={"emergency_contacts": []}).status_code == 404


def test_patch_user_ignores_unknown_fields(client):
    resp = client.patch("/api/user/1", json={"username": "hijack", "password": "x"})
    assert resp.status_code == 200
    assert resp.json()["username"] == "demo_user"


def test_mood_logs(client):
    bad = client.post("/api/mood-logs", json={"user_id": 1, "mood": 11, "craving_level": "none"})
    assert bad.status_code == 400
    bad_enum = client.post("/api/mood-logs", json={"user_id": 1, "mood": 5, "craving_level": "extreme"})
    assert bad_enum.status_code == 400

    for mood in (3, 6, 9):
        resp = client.post("/api/mood-logs", json={"user_id": 1, "mood": mood, "craving_level": "mild"})
        assert resp.status_code == 201
        assert resp.json()["notes"] is None

    logs = client.get("/api/mood-logs/1", params={"limit": 2}).json()
    assert [log["mood"] for log in logs] == [9, 6]
    assert len(client.get("/api/mood-logs/1").json()) == 3


def test_medication_flow_defaults_to_demo_user(client):
    created = client.post(
        "/api/medications",
        json={"name": "Naltrexone", "dosage": "50mg", "frequency": "daily"},
    )
    assert created.status_code == 201
    med = created.json()
    assert med["user_id"] == 1
    assert med["is_active"] is True

    assert [m["id"] for m in client.get("/api/medications").json()] == [med["id"]]

    patched = client.patch(f"/api/medications/{med['id']}", json={"is_active": False})
    assert patched.json()["is_active"] is False
    assert client.get("/api/medications").json() == []
    assert client.get(f"/api/medications/{med['id']}").json()["name"] == "Naltrexone"

    assert client.get("/api/medications/9999").status_code == 404
    assert client.patch("/api/medications/9999", json={"is_active": False}).status_code == 404

    log = client.post("/api/medication-logs", json={"medication_id": med["id"], "taken": True})
    assert log.status_code == 201
    assert [entry["id"] for entry in client.get("/api/medication-logs").json()] == [log.json()["id"]]


def test_community_ordering(client):
    p1 = client.post("/api/community/posts", json={"title": "P1", "content": "one"}).json()
    p2 = client.post("/api/community/posts", json={"title": "P2", "content": "two"}).json()
    assert p1["is_anonymous"] is True

    r1 = client.post(f"/api/community/posts/{p1['id']}/replies", json={"content": "R1"}).json()
    r2 = client.post(f"/api/community/posts/{p1['id']}/replies", json={"content": "R2"}).json()
    assert r1["post_id"] == p1["id"]

    assert [p["id"] for p in client.get("/api/community/posts").json()] == [p2["id"], p1["id"]]
    replies = client.get(f"/api/community/posts/{p1['id']}/replies").json()
    assert [r["id"] for r in replies] == [r1["id"], r2["id"]]
    assert client.get("/api/community/posts/9999/replies").json() == []


def test_resources_and_professionals(client):
    assert len(client.get("/api/resources").json()) == 2
    triggers = client.get("/api/resources", params={"category": "triggers"}).json()
    assert [r["title"] for r in triggers] == ["Understanding Triggers"]
    assert triggers[0]["type"] == "article"

    created = client.post(
        "/api/resources",
        json={"title": "Sleep", "type": "audio", "content": "...", "category": "wellness"},
    )
    assert created.status_code == 201
    assert client.post(
        "/api/resources",
        json={"title": "X", "type": "podcast", "content": "...", "category": "wellness"},
    ).status_code == 400

    pros = client.get("/api/professionals").json()
    assert [p["name"] for p in pros] == ["Dr. Emily Chen", "Weekly Group Meeting", "Crisis Hotline"]
    new_pro = client.post(
        "/api/professionals",
        json={"name": "Dr. Ray", "type": "therapist", "contact": "phone:555-0199"},
    )
    assert new_pro.status_code == 201
    assert new_pro.json()["is_active"] is True


def test_security_headers(client):
    resp = client.get("/api/professionals")
    assert resp.headers["X-Frame-Options"] == "DENY"
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert "Strict-Transport-Security" not in resp.headers
