"""
Shared fixtures
===============

- sqlalchemy_db: fresh SQLite database and upload directory per test
- api_client / second_client: TestClients with a registered, logged-in user
"""

import os

import pytest
from fastapi.testclient import TestClient

PASSWORD = "password123"


@pytest.fixture
def sqlalchemy_db(tmp_path):
    """Configure a fresh SQLAlchemy SQLite DB (and upload dir) for tests."""
    from legalpro_lite.config import get_settings
    from legalpro_lite.db.session import reset_engine, init_db

    old_db_url = os.environ.get("DATABASE_URL")
    old_upload_dir = os.environ.get("UPLOAD_DIR")
    os.environ["DATABASE_URL"] = f"sqlite:///{tmp_path / 'legalpro_test.db'}"
    os.environ["UPLOAD_DIR"] = str(tmp_path / "uploads")
    get_settings.cache_clear()
    reset_engine()
    init_db()

    yield tmp_path

    # Restore env
    for key, old in (("DATABASE_URL", old_db_url), ("UPLOAD_DIR", old_upload_dir)):
        if old is not None:
            os.environ[key] = old
        else:
            os.environ.pop(key, None)
    get_settings.cache_clear()
    reset_engine()


def register_and_login(client: TestClient, email: str, name: str = "Test Lawyer") -> dict:
    """Register an account and log in; the client keeps the session cookie."""
    response = client.post("/api/auth/register", json={
        "name": name,
        "email": email,
        "password": PASSWORD,
    })
    assert response.status_code == 201, response.text

    response = client.post("/api/auth/login", json={"email": email, "password": PASSWORD})
    assert response.status_code == 200, response.text
    return response.json()


@pytest.fixture
def api_client(sqlalchemy_db):
    from legalpro_lite.api import app

    client = TestClient(app)
    register_and_login(client, "lawyer@example.com", name="Asha Rao")
    return client


@pytest.fixture
def second_client(sqlalchemy_db):
    from legalpro_lite.api import app

    client = TestClient(app)
    register_and_login(client, "other@example.com", name="Vikram Shah")
    return client


@pytest.fixture
def make_client(sqlalchemy_db):
    """Factory for extra logged-in clients: make_client(email)"""
    from legalpro_lite.api import app

    def _make(email: str, name: str = "Test Lawyer") -> TestClient:
        client = TestClient(app)
        register_and_login(client, email, name=name)
        return client

    return _make
