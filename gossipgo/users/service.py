"""User directory lookups."""

from gossipgo.db.models import User
from gossipgo.db.store import InMemoryStore
from gossipgo.errors import NotFoundError


def get_user(store: InMemoryStore, user_id: str) -> User:
    user = store.users.get(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def list_users(store: InMemoryStore, exclude_id: str | None = None) -> list[User]:
    return [u for u in store.users.values() if u.id != exclude_id]


def search_users(store: InMemoryStore, query: str, exclude_id: str | None = None) -> list[User]:
    needle = query.strip().lower()
    if not needle:
        return list_users(store, exclude_id)
    return [
        u for u in store.users.values()
        if u.id != exclude_id and (needle in u.name.lower() or (u.email and needle in u.email.lower()))
    ]


def batch_users(store: InMemoryStore, user_ids: list[str]) -> list[User]:
    """Users for the given ids, in request order; unknown ids are skipped."""
    seen: set[str] = set()
    result = []
    for user_id in user_ids:
        if user_id in store.users and user_id not in seen:
            seen.add(user_id)
            result.append(store.users[user_id])
    return result
