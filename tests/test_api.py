"""HTTP level tests that drive the routers through FastAPI's TestClient."""

import logging
import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("BCRYPT_ROUNDS", "4")

from timetrack import create_app
from timetrack.db.session import get_db
from timetrack.db.setup import init_db
from timetrack.models.account import Account
from timetrack.models.activity import Activity


@pytest.fixture()
def engine():
    # StaticPool keeps the single in-memory database alive across worker threads.
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def client(engine):
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    app = create_app()

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


def _register(client, uid="alice", password="s3cret", **profile):
    return client.post("/user/register", json={"user": {"uid": uid, "password": password, **profile}})


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_register_and_authenticate(client):
    response = _register(client, firstName="Alice")
    assert response.status_code == 200
    assert response.json() == {"message": "ok"}

    response = client.post("/user/authenticate", json={"username": "alice", "password": "s3cret"})
    assert response.status_code == 200
    body = response.json()
    assert body["uid"] == "alice"
    assert body["firstName"] == "Alice"
    assert body["token"] == "fake-jwt-token"
    assert "password" not in body
    assert "password_hash" not in body


def test_register_duplicate_is_400(client):
    assert _register(client).status_code == 200

    response = _register(client, password="other")
    assert response.status_code == 400
    assert response.json() == {
        "code": "duplicate_account",
        "message": "A user already exists with this username",
    }


def test_register_without_password_is_400(client):
    response = client.post("/user/register", json={"user": {"uid": "alice"}})
    assert response.status_code == 400
    assert response.json()["code"] == "invalid_input"


def test_authenticate_failures_are_404(client):
    _register(client)

    wrong = client.post("/user/authenticate", json={"username": "alice", "password": "nope"})
    assert wrong.status_code == 404
    assert wrong.json()["message"] == "Incorrect Password"

    missing = client.post("/user/authenticate", json={"username": "ghost", "password": "nope"})
    assert missing.status_code == 404
    assert missing.json()["message"] == "No user found with this username"


def test_activity_lifecycle(client):
    created = client.post(
        "/activity/",
        json={"activity": {"username": "alice", "date": "2024-01-01", "duration": 60, "description": "Review"}},
    )
    assert created.status_code == 200
    body = created.json()
    assert body["message"] == "ok"
    record_id = body["recordId"]

    client.post("/activity/", json={"activity": {"username": "alice", "date": "2024-01-02", "duration": 15}})
    client.post("/activity/", json={"activity": {"username": "bob", "date": "2024-01-01", "duration": 30}})

    day = client.get("/activity/2024-01-01/for/alice")
    assert day.status_code == 200
    assert day.json() == {
        "activities": [
            {"id": record_id, "username": "alice", "date": "2024-01-01", "duration": 60, "description": "Review"}
        ]
    }

    everything = client.get("/activity/alice")
    assert [a["date"] for a in everything.json()["activities"]] == ["2024-01-01", "2024-01-02"]

    updated = client.put("/activity/", json={"activity": {"id": record_id, "duration": 75}})
    assert updated.status_code == 200
    assert updated.json() == {"message": "ok"}

    day = client.get("/activity/2024-01-01/for/alice").json()["activities"]
    assert day[0]["duration"] == 75
    assert day[0]["description"] == "Review"

    first_delete = client.delete(f"/activity/{record_id}")
    assert first_delete.status_code == 200
    assert first_delete.json() == {"message": "ok"}

    second_delete = client.delete(f"/activity/{record_id}")
    assert second_delete.status_code == 200
    assert second_delete.json() == {"message": "nothing deleted"}


def test_list_for_unknown_user_is_empty(client):
    response = client.get("/activity/nobody")
    assert response.status_code == 200
    assert response.json() == {"activities": []}


def test_create_activity_requires_username_and_date(client):
    response = client.post("/activity/", json={"activity": {"duration": 5}})
    assert response.status_code == 400
    assert response.json()["code"] == "invalid_input"


def test_update_unknown_activity_is_500(client):
    response = client.put("/activity/", json={"activity": {"id": 9999, "duration": 10}})
    assert response.status_code == 500
    assert response.json()["code"] == "update_failed"


def test_delete_malformed_id_is_400(client):
    response = client.delete("/activity/not-an-id")
    assert response.status_code == 400
    assert response.json()["code"] == "invalid_input"


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"


def test_cors_allows_configured_origin_only(client):
    allowed = client.options(
        "/activity/",
        headers={"Origin": "http://localhost:4200", "Access-Control-Request-Method": "POST"},
    )
    assert allowed.headers.get("access-control-allow-origin") == "http://localhost:4200"

    denied = client.options(
        "/activity/",
        headers={"Origin": "http://evil.example", "Access-Control-Request-Method": "POST"},
    )
    assert "access-control-allow-origin" not in denied.headers


@pytest.mark.parametrize("raw", ["²", "99999999999999999999999"])
def test_unusable_activity_ids_are_400(client, raw):
    deleted = client.delete(f"/activity/{raw}")
    assert deleted.status_code == 400
    assert deleted.json()["code"] == "invalid_input"

    updated = client.put("/activity/", json={"activity": {"id": raw, "duration": 1}})
    assert updated.status_code == 400
    assert updated.json()["code"] == "invalid_input"


def test_long_password_registers_and_authenticates(client):
    password = "p" * 80
    assert _register(client, uid="verbose", password=password).status_code == 200

    response = client.post("/user/authenticate", json={"username": "verbose", "password": password})
    assert response.status_code == 200
    assert response.json()["uid"] == "verbose"


def test_store_failures_become_500_envelope(client, engine, caplog):
    caplog.set_level(logging.INFO, logger="timetrack.errors")
    Activity.__table__.drop(engine)
    Account.__table__.drop(engine)

    responses = [
        client.get("/activity/alice"),
        client.get("/activity/2024-01-01/for/alice"),
        client.post("/activity/", json={"activity": {"username": "alice", "date": "2024-01-01"}}),
        client.put("/activity/", json={"activity": {"id": 1, "duration": 5}}),
        client.delete("/activity/1"),
        _register(client),
        client.post("/user/authenticate", json={"username": "alice", "password": "s3cret"}),
    ]

    for response in responses:
        assert response.status_code == 500
        assert response.json()["code"] == "store_error"
        assert set(response.json()) == {"code", "message"}

    failures = [r for r in caplog.records if r.name == "timetrack.errors"]
    assert len(failures) == len(responses)
    assert all(r.levelno == logging.ERROR and r.exc_info for r in failures)


def test_only_server_side_errors_are_logged(client, caplog):
    caplog.set_level(logging.INFO, logger="timetrack.errors")
    _register(client)

    _register(client)  # duplicate
    client.post("/user/register", json={"user": {"uid": "bob"}})  # invalid input
    client.post("/user/authenticate", json={"username": "ghost", "password": "x"})  # not found
    client.post("/user/authenticate", json={"username": "alice", "password": "nope"})  # bad password
    client.delete("/activity/abc")  # invalid id
    assert [r for r in caplog.records if r.name == "timetrack.errors"] == []

    response = client.put("/activity/", json={"activity": {"id": 9999, "duration": 10}})
    assert response.status_code == 500

    failures = [r for r in caplog.records if r.name == "timetrack.errors"]
    assert len(failures) == 1
    assert failures[0].levelno == logging.WARNING
    assert failures[0].exc_info is None
    assert failures[0].extra_data["code"] == "update_failed"
