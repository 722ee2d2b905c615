"""Chat endpoints: list, archive, groups."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from gossipgo.auth.dependencies import CurrentUser, get_current_user
from gossipgo.chats import service
from gossipgo.db.client import get_store
from gossipgo.db.store import InMemoryStore
from gossipgo.utils.envelope import ok

router = APIRouter(prefix="/api/chats", tags=["Chats"])


class CreateGroupRequest(BaseModel):
    name: str = Field(max_length=100)
    description: str = Field("", max_length=500)
    member_ids: list[str] = Field(default_factory=list)


@router.get("", summary="List chats", description="The caller's chats that are not archived, most recent activity first.")
async def list_active(user: CurrentUser = Depends(get_current_user), store: InMemoryStore = Depends(get_store)):
    return ok(service.list_chats(store, user.id))


@router.get("/archived", summary="List archived chats")
async def list_archived(user: CurrentUser = Depends(get_current_user), store: InMemoryStore = Depends(get_store)):
    return ok(service.list_chats(store, user.id, archived=True))


@router.post("/groups", status_code=201, summary="Create a group")
async def create_group(body: CreateGroupRequest, user: CurrentUser = Depends(get_current_user), store: InMemoryStore = Depends(get_store)):
    return ok(service.create_group(store, user.id, body.name, body.description, body.member_ids))


@router.get("/{chat_id}", summary="Get a chat")
async def get(chat_id: str, user: CurrentUser = Depends(get_current_user), store: InMemoryStore = Depends(get_store)):
    return ok(service.get_chat(store, chat_id, user.id))


@router.post("/{chat_id}/archive", summary="Archive a chat for the caller")
async def archive(chat_id: str, user: CurrentUser = Depends(get_current_user), store: InMemoryStore = Depends(get_store)):
    return ok(service.set_archived(store, chat_id, user.id, True))


@router.post("/{chat_id}/unarchive", summary="Unarchive a chat for the caller")
async def unarchive(chat_id: str, user: CurrentUser = Depends(get_current_user), store: InMemoryStore = Depends(get_store)):
    return ok(service.set_archived(store, chat_id, user.id, False))


@router.post("/{chat_id}/leave", summary="Leave a group")
async def leave(chat_id: str, user: CurrentUser = Depends(get_current_user), store: InMemoryStore = Depends(get_store)):
    service.leave_group(store, chat_id, user.id)
    return ok({"message": "Left group"})
