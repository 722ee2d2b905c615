"""SSE formatting and the queue bridge between the channel and one stream."""

import asyncio
import json
from collections.abc import Callable

from gossipgo.db.models import Message
from gossipgo.presence.channel import EventType, PresenceChannel, UserStatusEvent


def _sse(event: str, data: dict) -> str:
    return f"event: {event}\ndata: {json.dumps(data, default=str)}\n\n"


def format_new_message(message: Message) -> str:
    return _sse(EventType.NEW_MESSAGE.value, {"type": EventType.NEW_MESSAGE.value, "message": message.model_dump(mode="json")})


def format_user_status(event: UserStatusEvent) -> str:
    return _sse(EventType.USER_STATUS.value, {"type": EventType.USER_STATUS.value, **event.model_dump()})


def format_disconnect() -> str:
    return _sse(EventType.DISCONNECT.value, {"type": EventType.DISCONNECT.value})


def format_keepalive() -> str:
    return ": keepalive\n\n"


class EventSubscription:
    """Collects channel events for one subscriber into a queue of SSE frames.

    ``chat_filter`` decides, per NEW_MESSAGE, whether the subscriber may see it.
    A DISCONNECT pushes ``None`` to end the stream.
    """

    def __init__(self, channel: PresenceChannel, chat_filter: Callable[[str], bool] | None = None):
        self._channel = channel
        self._chat_filter = chat_filter
        self.queue: asyncio.Queue[str | None] = asyncio.Queue()
        self._handlers = {
            EventType.NEW_MESSAGE: self._on_message,
            EventType.USER_STATUS: self._on_status,
            EventType.DISCONNECT: self._on_disconnect,
        }

    def __enter__(self) -> "EventSubscription":
        for event, handler in self._handlers.items():
            self._channel.add_listener(event, handler)
        return self

    def __exit__(self, *exc) -> None:
        for event, handler in self._handlers.items():
            self._channel.remove_listener(event, handler)

    def _allowed(self, chat_id: str) -> bool:
        return self._chat_filter is None or self._chat_filter(chat_id)

    def _on_message(self, message: Message) -> None:
        if self._allowed(message.chat_id):
            self.queue.put_nowait(format_new_message(message))

    def _on_status(self, event: UserStatusEvent) -> None:
        self.queue.put_nowait(format_user_status(event))

    def _on_disconnect(self, _data) -> None:
        self.queue.put_nowait(format_disconnect())
        self.queue.put_nowait(None)
