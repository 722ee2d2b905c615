"""The locally held authenticated identity and its lifecycle."""

import logging
from typing import Protocol

from gossipgo.db.models import Session, User
from gossipgo.errors import GossipGoError
from gossipgo.session.storage import SessionStorage

logger = logging.getLogger(__name__)


class AuthGateway(Protocol):
    async def login(self, identifier: str, secret: str) -> Session: ...

    async def register(self, name: str, identifier: str, secret: str) -> Session: ...

    async def logout(self, token: str | None = None) -> None: ...


class SessionStore:
    def __init__(self, auth: AuthGateway, storage: SessionStorage | None = None):
        self._auth = auth
        self._storage = storage
        self._session: Session | None = None
        self.last_error: GossipGoError | None = None

    @property
    def current_user(self) -> User | None:
        return self._session.user if self._session else None

    @property
    def token(self) -> str | None:
        return self._session.token if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    def restore(self) -> bool:
        """Load a persisted session; never raises."""
        if self._storage is None:
            return False
        session = self._storage.load()
        if session is None:
            return False
        self._session = session
        logger.info("Restored session for user %s", session.user.id)
        return True

    async def login(self, identifier: str, secret: str) -> bool:
        return await self._authenticate(self._auth.login(identifier, secret), "login")

    async def signup(self, name: str, identifier: str, secret: str) -> bool:
        return await self._authenticate(self._auth.register(name, identifier, secret), "signup")

    async def logout(self) -> None:
        token = self.token
        if token is not None:
            try:
                await self._auth.logout(token)
            except GossipGoError as exc:
                logger.warning("Logout notification failed, clearing local session anyway: %s", exc.message)
        self._clear()

    async def _authenticate(self, pending, action: str) -> bool:
        self.last_error = None
        try:
            session = await pending
        except GossipGoError as exc:
            self.last_error = exc
            self._clear()
            logger.info("%s failed (%s): %s", action.capitalize(), exc.error_type, exc.message)
            return False

        self._session = session
        if self._storage is not None:
            try:
                self._storage.save(session)
            except OSError as exc:
                logger.warning("Could not persist session: %s", exc)
        logger.info("%s succeeded for user %s", action.capitalize(), session.user.id)
        return True

    def _clear(self) -> None:
        self._session = None
        if self._storage is not None:
            self._storage.clear()
