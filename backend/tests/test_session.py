from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from stepgate.database import get_db
from stepgate.errors import NotFound, StoreUnavailable
from stepgate.main import app
from stepgate.models.page_view import PageView
from stepgate.services.session_service import SessionManager, PageViewTracker


def test_new_visitor_gets_fresh_session_with_all_flags_false(client):
    resp = client.post("/api/session", json={})
    assert resp.status_code == 200
    body = resp.json()
    assert len(body["session_token"]) >= 40
    assert body["registration_completed"] is False
    assert body["step1_verified"] is False
    assert body["step2_verified"] is False
    assert body["reward_disclosed"] is False
    assert body["current_step"] == 1


def test_known_token_resolves_same_session(client, new_token):
    token = new_token()
    resp = client.post("/api/session", json={"sessionToken": token})
    assert resp.status_code == 200
    assert resp.json()["session_token"] == token


def test_unknown_token_creates_new_session(client):
    resp = client.post("/api/session", json={"sessionToken": "stale-token-from-old-db"})
    assert resp.status_code == 200
    assert resp.json()["session_token"] != "stale-token-from-old-db"


def test_tokens_are_unique(client):
    tokens = {client.post("/api/session", json={}).json()["session_token"] for _ in range(5)}
    assert len(tokens) == 5


def test_refresh_unknown_token_is_404_and_creates_nothing(client, db):
    from stepgate.models.session import UserSession

    resp = client.post("/api/session/refresh", json={"sessionToken": "nope"})
    assert resp.status_code == 404
    assert resp.json() == {"error": "Session not found"}
    assert db.query(UserSession).count() == 0


def test_refresh_returns_current_state(client, registered_token):
    resp = client.post("/api/session/refresh", json={"sessionToken": registered_token})
    assert resp.status_code == 200
    assert resp.json()["registration_completed"] is True
    assert resp.json()["student_name"] == "Asha Rao"


def test_page_view_recorded_per_resolution(client, db, new_token):
    token = new_token()
    client.post("/api/session", json={"sessionToken": token, "pagePath": "/offer"},
                headers={"user-agent": "pytest-agent"})
    views = db.query(PageView).order_by(PageView.id).all()
    assert len(views) == 2
    assert views[1].page_path == "/offer"
    assert views[1].session_token == token
    assert views[1].user_agent == "pytest-agent"


def test_page_view_failure_never_raises():
    def broken_factory():
        raise OperationalError("INSERT", {}, Exception("db down"))

    PageViewTracker.record(broken_factory, "tok", page_path="/")


def test_store_unavailable_on_lookup():
    db = MagicMock()
    db.query.side_effect = OperationalError("SELECT", {}, Exception("db down"))
    with pytest.raises(StoreUnavailable):
        SessionManager.get_or_create(db, "some-token")


def test_store_unavailable_is_503_with_generic_message(client):
    db = MagicMock()
    db.query.side_effect = OperationalError("SELECT", {}, Exception("connection refused on 10.0.0.5"))
    app.dependency_overrides[get_db] = lambda: db

    resp = client.post("/api/session/refresh", json={"sessionToken": "abc"})
    assert resp.status_code == 503
    assert "10.0.0.5" not in resp.text


def test_refresh_service_raises_not_found(db):
    with pytest.raises(NotFound):
        SessionManager.refresh(db, "missing")
