import uuid
from unittest.mock import patch

from stepgate.config import get_settings
from stepgate.models.session import UserSession
from stepgate.services.admin_service import AdminService

from helpers import set_flags

settings = get_settings()
CREDS = {"username": "admin", "password": "s3cret-pass"}


def _admin(client, **body):
    return client.post("/api/admin-api", json=body)


def test_bad_credentials_rejected(client):
    resp = _admin(client, action="fetch", username="admin", password="wrong")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid credentials"}


def test_missing_credentials_rejected(client):
    assert _admin(client, action="fetch").status_code == 401


def test_admin_disabled_when_credentials_unset():
    with patch.object(settings, "ADMIN_PASSWORD", ""):
        assert AdminService.authenticate("admin", "") is False


def test_fetch_returns_sessions_views_and_funnel(client, registered_token, new_token):
    new_token()
    set_flags(registered_token, step1_verified=True)

    resp = _admin(client, action="fetch", **CREDS)
    assert resp.status_code == 200
    body = resp.json()
    assert len(body["sessions"]) == 2
    assert body["totalViews"] == 2
    assert body["stats"] == {
        "totalViews": 2,
        "totalRegistrations": 1,
        "step1Verified": 1,
        "step2Verified": 0,
        "rewardDisclosed": 0,
    }


def test_fetch_search_filters_by_name_or_mobile(client, registered_token, new_token):
    new_token()
    by_name = _admin(client, action="fetch", search="asha", **CREDS).json()["sessions"]
    by_mobile = _admin(client, action="fetch", search="98765", **CREDS).json()["sessions"]
    assert [s["student_name"] for s in by_name] == ["Asha Rao"]
    assert [s["student_mobile"] for s in by_mobile] == ["9876543210"]


def test_fetch_search_treats_like_wildcards_literally(client, registered_token, new_token):
    new_token()
    for term in ("%", "_", "9%0", "asha_rao"):
        sessions = _admin(client, action="fetch", search=term, **CREDS).json()["sessions"]
        assert sessions == [], term


def test_fetch_search_matches_literal_underscore(client, new_token):
    token = new_token()
    resp = client.post("/api/session/register", json={
        "sessionToken": token,
        "name": "Ravi Kumar",
        "studentClass": "Class 10",
        "mobile": "9123456780",
        "email": "ravi_k@example.com",
    })
    assert resp.status_code == 200
    sessions = _admin(client, action="fetch", search="ravi_k", **CREDS).json()["sessions"]
    assert [s["student_email"] for s in sessions] == ["ravi_k@example.com"]


def test_delete_removes_sessions(client, db, new_token):
    new_token()
    new_token()
    ids = [row.id for row in db.query(UserSession).all()]

    resp = _admin(client, action="delete", ids=ids[:1], **CREDS)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "deleted": 1}
    assert db.query(UserSession).count() == 1


def test_delete_rejects_malformed_id_without_deleting_anything(client, db, new_token):
    new_token()
    ids = [row.id for row in db.query(UserSession).all()]

    resp = _admin(client, action="delete", ids=ids + ["1; DROP TABLE user_sessions"], **CREDS)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid ID format"
    assert db.query(UserSession).count() == 1


def test_delete_requires_ids(client):
    resp = _admin(client, action="delete", ids=[], **CREDS)
    assert resp.status_code == 400
    assert resp.json()["error"] == "No IDs provided"


def test_delete_unknown_uuid_counts_zero(client):
    resp = _admin(client, action="delete", ids=[str(uuid.uuid4())], **CREDS)
    assert resp.json() == {"success": True, "deleted": 0}


def test_unknown_action(client):
    resp = _admin(client, action="export", **CREDS)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid action"}
