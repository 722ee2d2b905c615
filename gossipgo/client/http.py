"""Async HTTP client for the GossipGo API.

Every response goes through ``unwrap``, which accepts only the canonical
envelope and turns error envelopes back into typed ``GossipGoError``s.
Requests that never reached the server are retried for any method; timeouts
and gateway errors are retried for GET only.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from gossipgo.config.settings import Settings
from gossipgo.connections.schemas import ConnectionStatusResponse
from gossipgo.db.models import Chat, Connection, Message, Session, User
from gossipgo.errors import GossipGoError, NetworkError, error_from_envelope

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = {502, 503, 504}

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class MessagePage:
    items: list[Message]
    page: int
    per_page: int
    total: int


def _payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def unwrap(response: httpx.Response) -> Any:
    """Return the ``data`` of a success envelope, or raise the typed error it describes."""
    if response.status_code == 204:
        return None

    payload = _payload(response)
    if response.is_success:
        if not isinstance(payload, dict) or payload.get("status") != "success" or "data" not in payload:
            raise GossipGoError("Unexpected response envelope")
        return payload["data"]

    error = payload.get("error") if isinstance(payload, dict) else None
    if not isinstance(error, dict):
        raise error_from_envelope(response.status_code, None, f"HTTP {response.status_code}")
    raise error_from_envelope(response.status_code, error.get("type"), error.get("message") or f"HTTP {response.status_code}")


def _validate(model: type[ModelT], data: Any) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise GossipGoError("Unexpected response envelope") from exc


def _validate_list(model: type[ModelT], data: Any) -> list[ModelT]:
    if not isinstance(data, list):
        raise GossipGoError("Unexpected response envelope")
    return [_validate(model, item) for item in data]


class ApiClient:
    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        *,
        timeout: float = 15.0,
        max_retries: int = 3,
        backoff: float = 0.5,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.max_retries = max_retries
        self.backoff = backoff
        self._sleep = sleep
        self._http = httpx.AsyncClient(base_url=self.base_url, timeout=httpx.Timeout(timeout), transport=transport)

    @classmethod
    def from_settings(cls, settings: Settings, token: str | None = None, transport: httpx.AsyncBaseTransport | None = None) -> "ApiClient":
        return cls(
            settings.API_BASE_URL,
            token,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            max_retries=settings.HTTP_MAX_RETRIES,
            backoff=settings.HTTP_BACKOFF_SECONDS,
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _send(self, method: str, path: str, *, json: Any = None, params: dict | None = None) -> httpx.Response:
        idempotent = method == "GET"
        reason = ""
        for attempt in range(self.max_retries + 1):
            try:
                response = await self._http.request(method, path, json=json, params=params, headers=self._headers())
            except (httpx.ConnectError, httpx.ConnectTimeout) as exc:
                reason = f"cannot connect to {self.base_url}: {exc}"
            except httpx.TimeoutException as exc:
                if not idempotent:
                    raise NetworkError(f"{method} {path} timed out") from exc
                reason = f"timed out: {exc}"
            except httpx.TransportError as exc:
                raise NetworkError(f"{method} {path} failed: {exc}") from exc
            else:
                if not (idempotent and response.status_code in RETRYABLE_STATUS):
                    return response
                reason = f"server returned HTTP {response.status_code}"

            if attempt < self.max_retries:
                delay = self.backoff * 2 ** attempt
                logger.warning("%s %s %s; retrying in %.2fs (attempt %d/%d)", method, path, reason, delay, attempt + 1, self.max_retries)
                await self._sleep(delay)

        raise NetworkError(f"{method} {path} failed after {self.max_retries + 1} attempts: {reason}")

    async def _request(self, method: str, path: str, *, json: Any = None, params: dict | None = None) -> Any:
        return unwrap(await self._send(method, path, json=json, params=params))

    # --- Auth ---

    async def login(self, identifier: str, secret: str) -> Session:
        session = _validate(Session, await self._request("POST", "/api/auth/login", json={"identifier": identifier, "password": secret}))
        self.token = session.token
        return session

    async def register(self, name: str, identifier: str, secret: str) -> Session:
        data = await self._request("POST", "/api/auth/register", json={"name": name, "email": identifier, "password": secret})
        session = _validate(Session, data)
        self.token = session.token
        return session

    async def logout(self, token: str | None = None) -> None:
        if token is not None:
            self.token = token
        try:
            await self._request("POST", "/api/auth/logout")
        finally:
            self.token = None

    # --- Users ---

    async def me(self) -> User:
        return _validate(User, await self._request("GET", "/api/users/me"))

    async def list_users(self) -> list[User]:
        return _validate_list(User, await self._request("GET", "/api/users"))

    async def search_users(self, query: str) -> list[User]:
        return _validate_list(User, await self._request("GET", "/api/users/search", params={"q": query}))

    async def batch_users(self, user_ids: list[str]) -> list[User]:
        return _validate_list(User, await self._request("POST", "/api/users/batch", json={"ids": user_ids}))

    # --- Connections ---

    async def list_connections(self) -> list[Connection]:
        return _validate_list(Connection, await self._request("GET", "/api/connections"))

    async def pending_requests(self) -> list[Connection]:
        return _validate_list(Connection, await self._request("GET", "/api/connections/pending"))

    async def connected_users(self) -> list[Connection]:
        return _validate_list(Connection, await self._request("GET", "/api/connections/accepted"))

    async def connection_status(self, user_id: str) -> ConnectionStatusResponse:
        return _validate(ConnectionStatusResponse, await self._request("GET", f"/api/connections/{user_id}/status"))

    async def request_connection(self, user_id: str) -> Connection:
        return _validate(Connection, await self._request("POST", "/api/connections/request", json={"user_id": user_id}))

    async def accept_connection(self, user_id: str) -> tuple[Connection, str]:
        data = await self._request("POST", "/api/connections/accept", json={"user_id": user_id})
        if not isinstance(data, dict) or not isinstance(data.get("chat_id"), str):
            raise GossipGoError("Unexpected response envelope")
        return _validate(Connection, data.get("connection")), data["chat_id"]

    async def decline_connection(self, user_id: str) -> Connection:
        return _validate(Connection, await self._request("POST", "/api/connections/decline", json={"user_id": user_id}))

    async def cancel_connection(self, user_id: str) -> None:
        await self._request("POST", "/api/connections/cancel", json={"user_id": user_id})

    # --- Chats ---

    async def list_chats(self) -> list[Chat]:
        return _validate_list(Chat, await self._request("GET", "/api/chats"))

    async def archived_chats(self) -> list[Chat]:
        return _validate_list(Chat, await self._request("GET", "/api/chats/archived"))

    async def get_chat(self, chat_id: str) -> Chat:
        return _validate(Chat, await self._request("GET", f"/api/chats/{chat_id}"))

    async def create_group(self, name: str, description: str = "", member_ids: list[str] | None = None) -> Chat:
        body = {"name": name, "description": description, "member_ids": member_ids or []}
        return _validate(Chat, await self._request("POST", "/api/chats/groups", json=body))

    async def archive_chat(self, chat_id: str) -> Chat:
        return _validate(Chat, await self._request("POST", f"/api/chats/{chat_id}/archive"))

    async def unarchive_chat(self, chat_id: str) -> Chat:
        return _validate(Chat, await self._request("POST", f"/api/chats/{chat_id}/unarchive"))

    async def leave_group(self, chat_id: str) -> None:
        await self._request("POST", f"/api/chats/{chat_id}/leave")

    # --- Messages ---

    async def list_messages(self, chat_id: str, page: int = 1, per_page: int = 50) -> MessagePage:
        response = await self._send("GET", f"/api/chats/{chat_id}/messages", params={"page": page, "per_page": per_page})
        items = unwrap(response)
        body = response.json()
        return MessagePage(
            items=_validate_list(Message, items),
            page=body.get("page", page),
            per_page=body.get("per_page", per_page),
            total=body.get("total", len(items)),
        )

    async def send_message(self, chat_id: str, text: str) -> Message:
        return _validate(Message, await self._request("POST", f"/api/chats/{chat_id}/messages", json={"text": text}))
