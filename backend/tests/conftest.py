"""Pytest configuration and fixtures."""

import os
import tempfile

# Configure before anything imports stepgate.config (settings are cached)
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="stepgate-logs-")
os.environ["GEMINI_API_KEY"] = ""
os.environ["REWARD_LINK"] = "https://drive.example.com/folders/reward-pack"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "s3cret-pass"

import pytest
from fastapi.testclient import TestClient

from stepgate.database import Base, SessionLocal, engine
from stepgate.main import app
from stepgate.services.classifier import get_classifier
from stepgate.utils.rate_limiter import reset_rate_limits

from helpers import FakeClassifier


@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    reset_rate_limits()
    yield
    app.dependency_overrides = {}


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def classifier():
    fake = FakeClassifier()
    app.dependency_overrides[get_classifier] = lambda: fake
    return fake


@pytest.fixture
def new_token(client):
    def _make():
        resp = client.post("/api/session", json={})
        assert resp.status_code == 200
        return resp.json()["session_token"]
    return _make


@pytest.fixture
def registered_token(client, new_token):
    token = new_token()
    resp = client.post("/api/session/register", json={
        "sessionToken": token,
        "name": "Asha Rao",
        "studentClass": "Class 10",
        "mobile": "9876543210",
    })
    assert resp.status_code == 200
    return token
