"""
Shared fixtures: an app built over a throwaway SQLite file, a TestClient,
and helpers to create users and admin tokens through the public API.
"""
import uuid

import pytest
from fastapi.testclient import TestClient

from finplatform.auth import issue_token
from finplatform.config import Settings
from finplatform.main import create_app

TEST_SECRET = "test-jwt-secret"
PASSWORD = "s3cret-pass"


def make_settings(tmp_path, **overrides) -> Settings:
    values = dict(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,  # fastest cost bcrypt allows
        log_level="WARNING",
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def app(settings):
    application = create_app(settings)
    yield application
    application.state.db.dispose()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session(app):
    session = app.state.db.session()
    try:
        yield session
    finally:
        session.close()


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register_user(client):
    """Register a fresh account; returns the response JSON (token + user)."""

    def _register(email=None, password=PASSWORD, full_name="Test User", country_code="US", phone=None):
        payload = {
            "email": email or f"user_{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
            "fullName": full_name,
            "countryCode": country_code,
        }
        if phone is not None:
            payload["phone"] = phone
        resp = client.post("/api/auth/register", json=payload)
        assert resp.status_code == 200, resp.text
        return resp.json()

    return _register


@pytest.fixture
def user(register_user):
    return register_user()


@pytest.fixture
def user_headers(user):
    return auth_header(user["token"])


@pytest.fixture
def admin_headers(register_user):
    data = register_user(email="admin@financialplatform.com", full_name="Platform Admin")
    return auth_header(data["token"])


@pytest.fixture
def forged_admin_headers():
    """A correctly signed admin token for an account that does not exist."""
    return auth_header(issue_token(str(uuid.uuid4()), "ops-admin@example.com", TEST_SECRET))
