"""Tests for connection endpoints."""


def test_request_accept_flow(client, register_user):
    alice, alice_header = register_user("Alice")
    bob, bob_header = register_user("Bob")

    resp = client.post("/api/connections/request", json={"user_id": bob["id"]}, headers=alice_header)
    assert resp.status_code == 201
    assert resp.json()["data"]["status"] == "pending"

    pending = client.get("/api/connections/pending", headers=bob_header).json()["data"]
    assert [c["from_user_id"] for c in pending] == [alice["id"]]

    status = client.get(f"/api/connections/{bob['id']}/status", headers=alice_header).json()["data"]
    assert status == {"user_id": bob["id"], "status": "pending", "sent_by_me": True}

    resp = client.post("/api/connections/accept", json={"user_id": alice["id"]}, headers=bob_header)
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["connection"]["status"] == "accepted"

    # Accepting opens a direct chat both users can see
    chat_ids = [c["id"] for c in client.get("/api/chats", headers=alice_header).json()["data"]]
    assert data["chat_id"] in chat_ids

    assert client.get("/api/connections/pending", headers=bob_header).json()["data"] == []
    accepted = client.get("/api/connections/accepted", headers=alice_header).json()["data"]
    assert len(accepted) == 1


def test_decline(client, register_user):
    alice, alice_header = register_user("Alice")
    bob, bob_header = register_user("Bob")
    client.post("/api/connections/request", json={"user_id": bob["id"]}, headers=alice_header)

    resp = client.post("/api/connections/decline", json={"user_id": alice["id"]}, headers=bob_header)
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "declined"

    status = client.get(f"/api/connections/{alice['id']}/status", headers=bob_header).json()["data"]
    assert status["status"] == "declined"
    assert status["sent_by_me"] is False


def test_cancel(client, register_user):
    _, alice_header = register_user("Alice")
    bob, _ = register_user("Bob")
    client.post("/api/connections/request", json={"user_id": bob["id"]}, headers=alice_header)

    resp = client.post("/api/connections/cancel", json={"user_id": bob["id"]}, headers=alice_header)
    assert resp.status_code == 200

    status = client.get(f"/api/connections/{bob['id']}/status", headers=alice_header).json()["data"]
    assert status["status"] == "none"
    assert client.get("/api/connections", headers=alice_header).json()["data"] == []


def test_cancel_after_accept_conflicts(client, register_user):
    alice, alice_header = register_user("Alice")
    bob, bob_header = register_user("Bob")
    client.post("/api/connections/request", json={"user_id": bob["id"]}, headers=alice_header)
    client.post("/api/connections/accept", json={"user_id": alice["id"]}, headers=bob_header)

    resp = client.post("/api/connections/cancel", json={"user_id": bob["id"]}, headers=alice_header)
    assert resp.status_code == 409
    assert resp.json()["error"]["type"] == "invalid_transition"


def test_request_unknown_user(client, sarah_header):
    resp = client.post("/api/connections/request", json={"user_id": "ghost"}, headers=sarah_header)
    assert resp.status_code == 404


def test_request_self(client, sarah_header):
    resp = client.post("/api/connections/request", json={"user_id": "1"}, headers=sarah_header)
    assert resp.status_code == 400


def test_accept_without_request(client, sarah_header):
    resp = client.post("/api/connections/accept", json={"user_id": "2"}, headers=sarah_header)
    assert resp.status_code == 404
    assert resp.json()["error"]["type"] == "not_found"
