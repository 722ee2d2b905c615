"""Message posting and paging within a chat."""

import logging

from gossipgo.chats.service import get_chat, touch
from gossipgo.db.models import Message
from gossipgo.db.store import InMemoryStore
from gossipgo.errors import InvalidRequestError
from gossipgo.presence.channel import PresenceChannel

logger = logging.getLogger(__name__)


def list_messages(store: InMemoryStore, chat_id: str, user_id: str, page: int = 1, per_page: int = 50) -> tuple[list[Message], int]:
    get_chat(store, chat_id, user_id)
    messages = store.messages.for_chat(chat_id)
    offset = (page - 1) * per_page
    return messages[offset:offset + per_page], len(messages)


def send_message(store: InMemoryStore, channel: PresenceChannel, chat_id: str, user_id: str, text: str) -> Message:
    """Append a message to the chat and publish it on the presence channel."""
    chat = get_chat(store, chat_id, user_id)
    text = text.strip()
    if not text:
        raise InvalidRequestError("Message text must not be blank")

    message = store.messages.append(Message(chat_id=chat_id, user_id=user_id, text=text))
    touch(chat)
    logger.info("Message %s posted to %s by %s", message.id, chat_id, user_id)
    channel.send_message(message)
    return message
