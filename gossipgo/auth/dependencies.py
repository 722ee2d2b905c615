"""Auth dependencies for FastAPI route injection."""

from dataclasses import dataclass

import jwt
from fastapi import Depends, Request

from gossipgo.auth.jwt import verify_token
from gossipgo.db.client import get_store
from gossipgo.db.store import InMemoryStore
from gossipgo.errors import AuthenticationError


@dataclass
class CurrentUser:
    id: str
    name: str
    token_id: str


def _extract_bearer_token(request: Request) -> str | None:
    auth = request.headers.get("Authorization")
    if auth and auth.startswith("Bearer "):
        return auth[7:]
    return None


async def get_current_user(request: Request, store: InMemoryStore = Depends(get_store)) -> CurrentUser:
    """FastAPI dependency: authenticate via Bearer JWT."""
    token = _extract_bearer_token(request)
    if not token:
        raise AuthenticationError("Missing authentication credentials")

    try:
        payload = verify_token(token)
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError("Invalid or expired token") from exc

    if payload.get("type") != "access":
        raise AuthenticationError("Invalid token type")
    if payload.get("jti") in store.revoked_tokens:
        raise AuthenticationError("Token has been revoked")
    if payload.get("sub") not in store.users:
        raise AuthenticationError("Unknown user")

    return CurrentUser(id=payload["sub"], name=payload.get("name", ""), token_id=payload.get("jti", ""))
