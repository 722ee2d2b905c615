"""Account registration, credential checks and token revocation."""

import logging

import bcrypt

from gossipgo.auth.jwt import create_access_token
from gossipgo.config.settings import get_settings
from gossipgo.db.models import Session, User, new_id
from gossipgo.db.store import InMemoryStore
from gossipgo.errors import AuthenticationError, ConflictError, InvalidRequestError

logger = logging.getLogger(__name__)

DEFAULT_AVATAR = "https://i.pravatar.cc/150?u={user_id}"


def _issue(user: User) -> Session:
    return Session(user=user, token=create_access_token(user.id, user.name))


def register(store: InMemoryStore, name: str, email: str, password: str) -> Session:
    name = name.strip()
    if not name:
        raise InvalidRequestError("Name must not be blank")
    if store.find_user_by_identifier(email) is not None:
        raise ConflictError("Email already registered")

    user_id = new_id("user-")
    user = User(id=user_id, name=name, email=email.lower(), avatar=DEFAULT_AVATAR.format(user_id=user_id), is_online=True)
    rounds = get_settings().BCRYPT_ROUNDS
    store.users[user.id] = user
    store.password_hashes[user.id] = bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()
    logger.info("Registered user %s", user.id)
    return _issue(user)


def login(store: InMemoryStore, identifier: str, password: str) -> Session:
    user = store.find_user_by_identifier(identifier)
    password_hash = store.password_hashes.get(user.id) if user else None
    if user is None or password_hash is None:
        raise AuthenticationError("Invalid credentials")
    if not bcrypt.checkpw(password.encode(), password_hash.encode()):
        raise AuthenticationError("Invalid credentials")
    logger.info("User %s logged in", user.id)
    return _issue(user)


def revoke(store: InMemoryStore, jti: str) -> None:
    store.revoked_tokens.add(jti)
