"""Chat membership, group creation and per-user archiving."""

import logging

from gossipgo.db.models import Chat, ChatKind, utcnow
from gossipgo.db.store import InMemoryStore
from gossipgo.errors import InvalidRequestError, NotFoundError, PermissionDeniedError

logger = logging.getLogger(__name__)


def verify_membership(chat: Chat, user_id: str) -> None:
    if user_id not in chat.member_ids:
        raise PermissionDeniedError("You are not a member of this chat")


def get_chat(store: InMemoryStore, chat_id: str, user_id: str) -> Chat:
    chat = store.chats.get(chat_id)
    if chat is None:
        raise NotFoundError("Chat not found")
    verify_membership(chat, user_id)
    return chat


def list_chats(store: InMemoryStore, user_id: str, archived: bool = False) -> list[Chat]:
    chats = [
        c for c in store.chats.values()
        if user_id in c.member_ids and (user_id in c.archived_by) == archived
    ]
    return sorted(chats, key=lambda c: c.last_activity, reverse=True)


def create_group(store: InMemoryStore, creator_id: str, name: str, description: str = "", member_ids: list[str] | None = None) -> Chat:
    name = name.strip()
    if not name:
        raise InvalidRequestError("Please enter a group name")

    members = [creator_id]
    for member_id in member_ids or []:
        if member_id not in store.users:
            raise NotFoundError(f"User {member_id} not found")
        if member_id not in members:
            members.append(member_id)

    chat = Chat(name=name, kind=ChatKind.GROUP, description=description.strip(), member_ids=members)
    store.chats[chat.id] = chat
    logger.info("Group %s created by %s with %d members", chat.id, creator_id, len(members))
    return chat


def direct_chat_id(a: str, b: str) -> str:
    low, high = sorted((a, b))
    return f"dm-{low}-{high}"


def open_direct_chat(store: InMemoryStore, a: str, b: str) -> Chat:
    """Return the direct chat between two users, creating it on first use."""
    chat_id = direct_chat_id(a, b)
    chat = store.chats.get(chat_id)
    if chat is None:
        names = [store.users[u].name if u in store.users else u for u in (a, b)]
        chat = Chat(id=chat_id, name=" & ".join(names), kind=ChatKind.DIRECT, member_ids=[a, b])
        store.chats[chat_id] = chat
        logger.info("Opened direct chat %s", chat_id)
    return chat


def set_archived(store: InMemoryStore, chat_id: str, user_id: str, archived: bool) -> Chat:
    chat = get_chat(store, chat_id, user_id)
    if archived and user_id not in chat.archived_by:
        chat.archived_by.append(user_id)
    elif not archived and user_id in chat.archived_by:
        chat.archived_by.remove(user_id)
    return chat


def leave_group(store: InMemoryStore, chat_id: str, user_id: str) -> None:
    chat = get_chat(store, chat_id, user_id)
    if chat.kind != ChatKind.GROUP:
        raise InvalidRequestError("Only group chats can be left")
    chat.member_ids.remove(user_id)
    if user_id in chat.archived_by:
        chat.archived_by.remove(user_id)
    logger.info("User %s left group %s", user_id, chat_id)


def touch(chat: Chat) -> None:
    chat.last_activity = utcnow()
