"""Tests for the API client: envelope handling, retries, endpoint coverage."""

import httpx
import pytest

from gossipgo.client.http import ApiClient, unwrap
from gossipgo.db.models import ConnectionStatus
from gossipgo.errors import GossipGoError, InvalidRequestError, InvalidTransitionError, NetworkError, NotFoundError


def response(status: int, payload=None, content: bytes | None = None) -> httpx.Response:
    if content is not None:
        return httpx.Response(status, content=content)
    return httpx.Response(status, json=payload)


class Recorder:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


def test_unwrap_success():
    assert unwrap(response(200, {"status": "success", "data": [1, 2]})) == [1, 2]


def test_unwrap_rejects_bare_payloads():
    with pytest.raises(GossipGoError, match="envelope"):
        unwrap(response(200, [{"id": "1"}]))
    with pytest.raises(GossipGoError, match="envelope"):
        unwrap(response(200, {"users": []}))


def test_unwrap_maps_error_type():
    error = {"status": "error", "error": {"type": "invalid_transition", "message": "nope", "request_id": "r"}}
    with pytest.raises(InvalidTransitionError, match="nope"):
        unwrap(response(409, error))


def test_unwrap_falls_back_to_status_code():
    with pytest.raises(NotFoundError):
        unwrap(response(404, content=b"<html>not found</html>"))
    with pytest.raises(InvalidRequestError):
        unwrap(response(422, {"status": "error", "error": {"type": "validation_error", "message": "bad"}}))


def test_unwrap_no_content():
    assert unwrap(httpx.Response(204)) is None


@pytest.mark.asyncio
async def test_connect_errors_are_retried_with_backoff():
    attempts = []

    def handler(request):
        attempts.append(request.method)
        if len(attempts) < 3:
            raise httpx.ConnectError("refused", request=request)
        return httpx.Response(200, json={"status": "success", "data": {"message": "ok"}})

    sleep = Recorder()
    async with ApiClient("http://api", transport=httpx.MockTransport(handler), max_retries=3, backoff=0.5, sleep=sleep) as api:
        await api.cancel_connection("2")

    assert attempts == ["POST", "POST", "POST"]
    assert sleep.delays == [0.5, 1.0]


@pytest.mark.asyncio
async def test_gateway_errors_retried_for_get_until_exhausted():
    calls = []

    def handler(request):
        calls.append(request.url.path)
        return httpx.Response(503, text="unavailable")

    sleep = Recorder()
    async with ApiClient("http://api", transport=httpx.MockTransport(handler), max_retries=2, backoff=0.1, sleep=sleep) as api:
        with pytest.raises(NetworkError, match="3 attempts"):
            await api.list_users()

    assert len(calls) == 3
    assert sleep.delays == [0.1, 0.2]


@pytest.mark.asyncio
async def test_gateway_errors_not_retried_for_post():
    calls = []

    def handler(request):
        calls.append(request.url.path)
        return httpx.Response(503, text="unavailable")

    async with ApiClient("http://api", transport=httpx.MockTransport(handler), sleep=Recorder()) as api:
        with pytest.raises(GossipGoError):
            await api.send_message("general", "hi")

    assert len(calls) == 1


@pytest.mark.asyncio
async def test_post_timeout_is_not_retried():
    calls = []

    def handler(request):
        calls.append(1)
        raise httpx.ReadTimeout("slow", request=request)

    async with ApiClient("http://api", transport=httpx.MockTransport(handler), sleep=Recorder()) as api:
        with pytest.raises(NetworkError, match="timed out"):
            await api.request_connection("2")

    assert len(calls) == 1


@pytest.mark.asyncio
async def test_bearer_token_is_sent():
    seen = []

    def handler(request):
        seen.append(request.headers.get("Authorization"))
        return httpx.Response(200, json={"status": "success", "data": []})

    async with ApiClient("http://api", token="abc", transport=httpx.MockTransport(handler)) as api:
        await api.list_chats()

    assert seen == ["Bearer abc"]


@pytest.mark.asyncio
async def test_full_flow_against_backend(app):
    transport = httpx.ASGITransport(app=app)
    async with ApiClient("http://testserver", transport=transport) as sarah, ApiClient("http://testserver", transport=transport) as emma:
        await sarah.login("1", "user1password")
        await emma.login("emma@example.com", "user5password")

        found = await sarah.search_users("emma")
        assert [u.id for u in found] == ["5"]

        await sarah.request_connection("5")
        assert (await sarah.connection_status("5")).status == ConnectionStatus.PENDING
        assert [c.from_user_id for c in await emma.pending_requests()] == ["1"]

        conn, chat_id = await emma.accept_connection("1")
        assert conn.status == ConnectionStatus.ACCEPTED
        assert len(await sarah.connected_users()) == 1

        sent = await sarah.send_message(chat_id, "Hi Emma!")
        page = await emma.list_messages(chat_id)
        assert page.total == 1
        assert page.items[0].id == sent.id

        group = await sarah.create_group("Weekend", member_ids=["5"])
        await emma.archive_chat(group.id)
        assert [c.id for c in await emma.archived_chats()] == [group.id]
        await emma.unarchive_chat(group.id)
        await emma.leave_group(group.id)
        assert (await sarah.get_chat(group.id)).member_ids == ["1"]

        users = await sarah.batch_users(["5", "2"])
        assert [u.name for u in users] == ["Emma Wilson", "Michael Chen"]
        assert (await sarah.me()).id == "1"
        assert len(await sarah.list_connections()) == 1

        await emma.logout()
        assert emma.token is None


@pytest.mark.asyncio
async def test_malformed_data_raises_envelope_error():
    payloads = {
        "/api/users": {"status": "success", "data": {"id": "1"}},
        "/api/users/me": {"status": "success", "data": {"name": "no id"}},
        "/api/connections/accept": {"status": "success", "data": {"connection": {}}},
    }

    def handler(request):
        return httpx.Response(200, json=payloads[request.url.path])

    async with ApiClient("http://api", transport=httpx.MockTransport(handler)) as api:
        with pytest.raises(GossipGoError, match="envelope"):
            await api.list_users()
        with pytest.raises(GossipGoError, match="envelope"):
            await api.me()
        with pytest.raises(GossipGoError, match="envelope"):
            await api.accept_connection("2")
