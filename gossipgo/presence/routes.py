"""Server-Sent Events stream of messages and presence changes."""

import asyncio
import logging

from fastapi import APIRouter, Depends, Request
from starlette.responses import StreamingResponse

from gossipgo.auth.dependencies import CurrentUser, get_current_user
from gossipgo.db.client import get_store
from gossipgo.db.store import InMemoryStore
from gossipgo.presence.channel import PresenceChannel
from gossipgo.presence.dependencies import get_channel
from gossipgo.presence.streaming import EventSubscription, format_keepalive

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Events"])

KEEPALIVE_SECONDS = 15.0


@router.get("/events", summary="Event stream", description="SSE stream of new messages in the caller's chats and user status changes.")
async def events(
    request: Request,
    user: CurrentUser = Depends(get_current_user),
    store: InMemoryStore = Depends(get_store),
    channel: PresenceChannel = Depends(get_channel),
):
    def is_member(chat_id: str) -> bool:
        chat = store.chats.get(chat_id)
        return chat is not None and user.id in chat.member_ids

    async def event_stream():
        with EventSubscription(channel, chat_filter=is_member) as subscription:
            while True:
                if await request.is_disconnected():
                    logger.info("Client %s disconnected from event stream", user.id)
                    break
                try:
                    frame = await asyncio.wait_for(subscription.queue.get(), timeout=KEEPALIVE_SECONDS)
                except asyncio.TimeoutError:
                    yield format_keepalive()
                    continue
                if frame is None:
                    break
                yield frame

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive", "X-Accel-Buffering": "no"},
    )
