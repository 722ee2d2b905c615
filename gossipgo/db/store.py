"""In-memory storage for the reference backend."""

import bisect
import logging
from dataclasses import dataclass, field

from gossipgo.db.models import Chat, Connection, Message, User

logger = logging.getLogger(__name__)


class InMemoryConnectionRepository:
    """Connection records kept in insertion order."""

    def __init__(self, records: list[Connection] | None = None):
        self._records: list[Connection] = list(records or [])

    def all(self) -> list[Connection]:
        return list(self._records)

    def find_between(self, a: str, b: str) -> Connection | None:
        for conn in self._records:
            if conn.links(a, b):
                return conn
        return None

    def find_directed(self, from_user_id: str, to_user_id: str) -> Connection | None:
        for conn in self._records:
            if conn.from_user_id == from_user_id and conn.to_user_id == to_user_id:
                return conn
        return None

    def add(self, conn: Connection) -> Connection:
        self._records.append(conn)
        return conn

    def save(self, conn: Connection) -> Connection:
        for i, existing in enumerate(self._records):
            if existing.id == conn.id:
                self._records[i] = conn
                return conn
        return self.add(conn)

    def remove(self, connection_id: str) -> bool:
        before = len(self._records)
        self._records = [c for c in self._records if c.id != connection_id]
        return len(self._records) != before


class MessageLog:
    """Append-only messages per chat, ordered by timestamp."""

    def __init__(self):
        self._by_chat: dict[str, list[Message]] = {}

    def append(self, message: Message) -> Message:
        log = self._by_chat.setdefault(message.chat_id, [])
        keys = [m.timestamp for m in log]
        # bisect_right keeps arrival order for equal timestamps
        log.insert(bisect.bisect_right(keys, message.timestamp), message)
        return message

    def for_chat(self, chat_id: str) -> list[Message]:
        return list(self._by_chat.get(chat_id, []))

    def count(self, chat_id: str) -> int:
        return len(self._by_chat.get(chat_id, []))


@dataclass
class InMemoryStore:
    users: dict[str, User] = field(default_factory=dict)
    password_hashes: dict[str, str] = field(default_factory=dict)
    revoked_tokens: set[str] = field(default_factory=set)
    connections: InMemoryConnectionRepository = field(default_factory=InMemoryConnectionRepository)
    chats: dict[str, Chat] = field(default_factory=dict)
    messages: MessageLog = field(default_factory=MessageLog)

    def find_user_by_identifier(self, identifier: str) -> User | None:
        """Match a user by id, or by email case-insensitively."""
        if identifier in self.users:
            return self.users[identifier]
        lowered = identifier.strip().lower()
        for user in self.users.values():
            if user.email and user.email.lower() == lowered:
                return user
        return None
