"""Tests for user directory endpoints."""

from fastapi.testclient import TestClient

from gossipgo.config.settings import get_settings
from gossipgo.main import create_app
from gossipgo.presence.channel import PresenceChannel

from conftest import ScriptedRandom


def test_me(client, sarah_header):
    resp = client.get("/api/users/me", headers=sarah_header)
    assert resp.status_code == 200
    assert resp.json()["data"]["id"] == "1"


def test_list_excludes_caller(client, sarah_header):
    resp = client.get("/api/users", headers=sarah_header)
    assert resp.status_code == 200
    ids = [u["id"] for u in resp.json()["data"]]
    assert "1" not in ids
    assert set(ids) >= {"2", "3", "4", "5"}


def test_search_matches_name_case_insensitively(client, sarah_header):
    resp = client.get("/api/users/search", params={"q": "CHEN"}, headers=sarah_header)
    assert resp.status_code == 200
    assert [u["id"] for u in resp.json()["data"]] == ["2"]


def test_search_never_returns_caller(client, sarah_header):
    resp = client.get("/api/users/search", params={"q": "sarah"}, headers=sarah_header)
    assert resp.json()["data"] == []


def test_batch_keeps_request_order_and_skips_unknown(client, sarah_header):
    resp = client.post("/api/users/batch", json={"ids": ["4", "missing", "2", "4"]}, headers=sarah_header)
    assert resp.status_code == 200
    assert [u["id"] for u in resp.json()["data"]] == ["4", "2"]


def test_users_require_auth(client):
    assert client.get("/api/users").status_code == 401


def test_listing_applies_live_presence():
    # Aisha (3) is seeded offline; one scripted tick brings her online.
    settings = get_settings()
    channel = PresenceChannel(["3"], connect_delay=0, tick_interval=3600, rng=ScriptedRandom([0.1, 0.2], ["3"]))
    app = create_app(settings, channel=channel)

    with TestClient(app) as client:
        resp = client.post("/api/auth/login", json={"identifier": "1", "password": "user1password"})
        header = {"Authorization": f"Bearer {resp.json()['data']['token']}"}

        before = {u["id"]: u["is_online"] for u in client.get("/api/users", headers=header).json()["data"]}
        assert before["3"] is False

        assert channel.simulate_tick() is not None

        after = {u["id"]: u["is_online"] for u in client.get("/api/users", headers=header).json()["data"]}
        assert after["3"] is True
        assert after["5"] is False


def test_registered_users_join_presence_simulation(app, register_user):
    user, _ = register_user("Late Joiner")

    assert user["id"] in app.state.channel.user_ids
