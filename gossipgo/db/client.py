"""Access to the store owned by the running application."""

from fastapi import Request

from gossipgo.db.store import InMemoryStore


def get_store(request: Request) -> InMemoryStore:
    return request.app.state.store
