"""Message endpoints: list and send within a chat."""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from gossipgo.auth.dependencies import CurrentUser, get_current_user
from gossipgo.db.client import get_store
from gossipgo.db.models import Message
from gossipgo.db.store import InMemoryStore
from gossipgo.messages import service
from gossipgo.presence.channel import PresenceChannel
from gossipgo.presence.dependencies import get_channel
from gossipgo.utils.envelope import ok

router = APIRouter(prefix="/api/chats/{chat_id}", tags=["Messages"])


class SendMessageRequest(BaseModel):
    text: str = Field(min_length=1, max_length=4000)


class MessageListResponse(BaseModel):
    status: str = "success"
    data: list[Message]
    page: int
    per_page: int
    total: int


@router.get("/messages", summary="List messages", description="Messages in timestamp order, paginated.")
async def list_messages(
    chat_id: str,
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=200),
    user: CurrentUser = Depends(get_current_user),
    store: InMemoryStore = Depends(get_store),
):
    messages, total = service.list_messages(store, chat_id, user.id, page, per_page)
    return MessageListResponse(data=messages, page=page, per_page=per_page, total=total)


@router.post("/messages", status_code=201, summary="Send a message")
async def send(
    chat_id: str,
    body: SendMessageRequest,
    user: CurrentUser = Depends(get_current_user),
    store: InMemoryStore = Depends(get_store),
    channel: PresenceChannel = Depends(get_channel),
):
    return ok(service.send_message(store, channel, chat_id, user.id, body.text))
