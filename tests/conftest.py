"""Shared test fixtures."""

import os
import uuid

os.environ.setdefault("JWT_SECRET", "test-secret-key-for-gossipgo-tests")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("PRESENCE_CONNECT_DELAY_SECONDS", "0")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from gossipgo.main import create_app


class ScriptedRandom:
    """Stand-in RNG that replays fixed draws."""

    def __init__(self, draws, picks=None):
        self._draws = list(draws)
        self._picks = list(picks or [])

    def random(self):
        return self._draws.pop(0)

    def choice(self, seq):
        return self._picks.pop(0) if self._picks else seq[0]


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def login_as(client):
    """Log in and return an Authorization header."""

    def _login(identifier: str, password: str) -> dict:
        resp = client.post("/api/auth/login", json={"identifier": identifier, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['data']['token']}"}

    return _login


@pytest.fixture
def sarah_header(login_as):
    return login_as("1", "user1password")


@pytest.fixture
def michael_header(login_as):
    return login_as("2", "user2password")


@pytest.fixture
def register_user(client):
    """Register a fresh user and return (user, auth header)."""

    def _register(name: str = "Test User") -> tuple[dict, dict]:
        email = f"test_{uuid.uuid4().hex[:8]}@example.com"
        resp = client.post("/api/auth/register", json={"name": name, "email": email, "password": "SecureTestPass123"})
        assert resp.status_code == 201, resp.text
        data = resp.json()["data"]
        return data["user"], {"Authorization": f"Bearer {data['token']}"}

    return _register
