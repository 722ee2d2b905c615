"""Sample users, groups and messages for a fresh store."""

import logging
from datetime import datetime, timedelta, timezone

import bcrypt

from gossipgo.db.models import Chat, ChatKind, Message, User
from gossipgo.db.store import InMemoryStore

logger = logging.getLogger(__name__)

SAMPLE_USERS = [
    User(id="1", name="Sarah Johnson", avatar="https://i.pravatar.cc/150?img=1", is_online=True, email="sarah@example.com"),
    User(id="2", name="Michael Chen", avatar="https://i.pravatar.cc/150?img=8", is_online=True, email="michael@example.com"),
    User(id="3", name="Aisha Patel", avatar="https://i.pravatar.cc/150?img=5", is_online=False, email="aisha@example.com"),
    User(id="4", name="Carlos Rodriguez", avatar="https://i.pravatar.cc/150?img=3", is_online=True, email="carlos@example.com"),
    User(id="5", name="Emma Wilson", avatar="https://i.pravatar.cc/150?img=9", is_online=False, email="emma@example.com"),
]

# Demo logins: user id "1" with "user1password", and so on.
SAMPLE_PASSWORDS = {user.id: f"user{user.id}password" for user in SAMPLE_USERS}

_GENERAL_START = datetime(2023, 5, 3, 10, 0, tzinfo=timezone.utc)

SAMPLE_CHATS = [
    Chat(
        id="general",
        name="Coffee Chat",
        kind=ChatKind.GROUP,
        description="Virtual coffee breaks",
        member_ids=["1", "2", "3", "4", "5"],
        created_at=_GENERAL_START,
        last_activity=_GENERAL_START + timedelta(minutes=10),
    ),
    Chat(id="group1", name="Marketing Team", description="Marketing discussions and campaigns", member_ids=["1", "3", "5"]),
    Chat(id="group2", name="Product Discussion", description="Product development and feedback", member_ids=["1", "2", "4"]),
    Chat(id="group3", name="Development Team", description="Technical discussions and updates", member_ids=["2", "4"]),
]

SAMPLE_MESSAGES = [
    ("m1", "1", 0, "Hey everyone! Who's up for a virtual coffee chat?"),
    ("m2", "4", 2, "Count me in! I could use a break from coding all morning."),
    ("m3", "2", 5, "Same here! What time are you thinking?"),
    ("m4", "1", 7, "How about 2pm? That gives everyone time to grab their beverage of choice."),
    ("m5", "5", 9, "Sounds perfect! I just made a fresh pot of coffee."),
    ("m6", "2", 10, "Great! Looking forward to catching up with everyone."),
]


def seed_store(store: InMemoryStore, bcrypt_rounds: int = 12) -> InMemoryStore:
    for user in SAMPLE_USERS:
        store.users[user.id] = user.model_copy()
        store.password_hashes[user.id] = bcrypt.hashpw(
            SAMPLE_PASSWORDS[user.id].encode(), bcrypt.gensalt(rounds=bcrypt_rounds)
        ).decode()

    for chat in SAMPLE_CHATS:
        store.chats[chat.id] = chat.model_copy(deep=True)

    for message_id, user_id, minute, text in SAMPLE_MESSAGES:
        store.messages.append(
            Message(
                id=message_id,
                chat_id="general",
                user_id=user_id,
                text=text,
                timestamp=_GENERAL_START + timedelta(minutes=minute),
            )
        )

    logger.info("Seeded store with %d users and %d chats", len(store.users), len(store.chats))
    return store
