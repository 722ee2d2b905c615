"""Pydantic schemas for connection requests and responses."""

from pydantic import BaseModel, Field

from gossipgo.db.models import ConnectionStatus


class ConnectionTargetRequest(BaseModel):
    user_id: str = Field(min_length=1)


class ConnectionStatusResponse(BaseModel):
    user_id: str
    status: ConnectionStatus
    sent_by_me: bool
