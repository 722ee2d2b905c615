"""User directory endpoints: me, list, search, batch."""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from gossipgo.auth.dependencies import CurrentUser, get_current_user
from gossipgo.db.client import get_store
from gossipgo.db.store import InMemoryStore
from gossipgo.presence.dependencies import get_tracker
from gossipgo.presence.tracker import PresenceTracker
from gossipgo.users import service
from gossipgo.utils.envelope import ok

router = APIRouter(prefix="/api/users", tags=["Users"])


class BatchUsersRequest(BaseModel):
    ids: list[str] = Field(default_factory=list, max_length=200)


@router.get("/me", summary="Current user")
async def me(
    user: CurrentUser = Depends(get_current_user),
    store: InMemoryStore = Depends(get_store),
    tracker: PresenceTracker = Depends(get_tracker),
):
    return ok(tracker.apply([service.get_user(store, user.id)])[0])


@router.get("", summary="List users", description="Every user except the caller, with live presence applied.")
async def list_all(
    user: CurrentUser = Depends(get_current_user),
    store: InMemoryStore = Depends(get_store),
    tracker: PresenceTracker = Depends(get_tracker),
):
    return ok(tracker.apply(service.list_users(store, exclude_id=user.id)))


@router.get("/search", summary="Search users", description="Case-insensitive match on name or email, excluding the caller.")
async def search(
    q: str = Query("", max_length=100),
    user: CurrentUser = Depends(get_current_user),
    store: InMemoryStore = Depends(get_store),
    tracker: PresenceTracker = Depends(get_tracker),
):
    return ok(tracker.apply(service.search_users(store, q, exclude_id=user.id)))


@router.post("/batch", summary="Fetch users by id")
async def batch(
    body: BatchUsersRequest,
    user: CurrentUser = Depends(get_current_user),
    store: InMemoryStore = Depends(get_store),
    tracker: PresenceTracker = Depends(get_tracker),
):
    return ok(tracker.apply(service.batch_users(store, body.ids)))
