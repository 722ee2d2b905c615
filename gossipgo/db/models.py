"""Domain records shared by the client core and the HTTP backend."""

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id(prefix: str) -> str:
    return f"{prefix}{uuid.uuid4().hex[:12]}"


class ConnectionStatus(str, Enum):
    NONE = "none"
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class ChatKind(str, Enum):
    DIRECT = "direct"
    GROUP = "group"


class User(BaseModel):
    id: str
    name: str
    avatar: str = ""
    is_online: bool = False
    email: str | None = None


class Session(BaseModel):
    user: User
    token: str


class Message(BaseModel):
    id: str = Field(default_factory=lambda: new_id("m"))
    chat_id: str
    user_id: str
    text: str
    timestamp: datetime = Field(default_factory=utcnow)


class Connection(BaseModel):
    id: str = Field(default_factory=lambda: new_id("c"))
    from_user_id: str
    to_user_id: str
    status: ConnectionStatus = ConnectionStatus.PENDING
    created_at: datetime = Field(default_factory=utcnow)

    def involves(self, user_id: str) -> bool:
        return user_id in (self.from_user_id, self.to_user_id)

    def links(self, a: str, b: str) -> bool:
        return {self.from_user_id, self.to_user_id} == {a, b}


class Chat(BaseModel):
    id: str = Field(default_factory=lambda: new_id("chat"))
    name: str
    kind: ChatKind = ChatKind.GROUP
    description: str = ""
    member_ids: list[str] = Field(default_factory=list)
    archived_by: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    last_activity: datetime = Field(default_factory=utcnow)
