"""Pairwise connection ("friend request") state for one current user.

Every ``ConnectionGraph`` is a view bound to a single user id over a shared
repository, so two graphs for users A and B see the same underlying records.
Status only moves pending -> accepted or pending -> declined; cancelling
deletes the pending record.
"""

import logging
from typing import Protocol

from gossipgo.db.models import Connection, ConnectionStatus
from gossipgo.errors import InvalidRequestError, InvalidTransitionError, NotFoundError

logger = logging.getLogger(__name__)


class ConnectionRepository(Protocol):
    def all(self) -> list[Connection]: ...

    def find_between(self, a: str, b: str) -> Connection | None: ...

    def find_directed(self, from_user_id: str, to_user_id: str) -> Connection | None: ...

    def add(self, conn: Connection) -> Connection: ...

    def save(self, conn: Connection) -> Connection: ...

    def remove(self, connection_id: str) -> bool: ...


class ConnectionGraph:
    def __init__(self, current_user_id: str, repository: ConnectionRepository):
        self.current_user_id = current_user_id
        self._repo = repository

    # --- Queries ---

    def get_connection_status(self, other_id: str) -> ConnectionStatus:
        conn = self._repo.find_between(self.current_user_id, other_id)
        return conn.status if conn else ConnectionStatus.NONE

    def is_request_sent_by_current_user(self, other_id: str) -> bool:
        return self._repo.find_directed(self.current_user_id, other_id) is not None

    def get_pending_requests(self) -> list[Connection]:
        return [
            c for c in self._repo.all()
            if c.to_user_id == self.current_user_id and c.status == ConnectionStatus.PENDING
        ]

    def get_connected_users(self) -> list[Connection]:
        return [
            c for c in self._repo.all()
            if c.involves(self.current_user_id) and c.status == ConnectionStatus.ACCEPTED
        ]

    def get_connections(self) -> list[Connection]:
        return [c for c in self._repo.all() if c.involves(self.current_user_id)]

    # --- Mutations ---

    def send_connection_request(self, other_id: str) -> Connection:
        """Create a pending request from the current user.

        Idempotent while the pair has a pending or accepted record: the existing
        record comes back unchanged. A declined record is replaced by a fresh
        pending one.
        """
        if other_id == self.current_user_id:
            raise InvalidRequestError("Cannot send a connection request to yourself")

        existing = self._repo.find_between(self.current_user_id, other_id)
        if existing is not None:
            if existing.status != ConnectionStatus.DECLINED:
                return existing
            self._repo.remove(existing.id)
            logger.info("Replacing declined connection %s between %s and %s", existing.id, self.current_user_id, other_id)

        conn = self._repo.add(Connection(from_user_id=self.current_user_id, to_user_id=other_id))
        logger.info("Connection request %s: %s -> %s", conn.id, self.current_user_id, other_id)
        return conn

    def accept_connection_request(self, other_id: str) -> Connection:
        return self._answer(other_id, ConnectionStatus.ACCEPTED)

    def decline_connection_request(self, other_id: str) -> Connection:
        return self._answer(other_id, ConnectionStatus.DECLINED)

    def cancel_connection_request(self, other_id: str) -> None:
        conn = self._repo.find_directed(self.current_user_id, other_id)
        if conn is None:
            raise NotFoundError("No connection request to this user")
        if conn.status != ConnectionStatus.PENDING:
            raise InvalidTransitionError(f"Cannot cancel a {conn.status.value} connection")
        self._repo.remove(conn.id)
        logger.info("Connection request %s cancelled by %s", conn.id, self.current_user_id)

    def _answer(self, other_id: str, status: ConnectionStatus) -> Connection:
        conn = self._repo.find_directed(other_id, self.current_user_id)
        if conn is None:
            raise NotFoundError("No connection request from this user")
        if conn.status != ConnectionStatus.PENDING:
            raise InvalidTransitionError(f"Connection request is already {conn.status.value}")
        updated = self._repo.save(conn.model_copy(update={"status": status}))
        logger.info("Connection %s %s by %s", conn.id, status.value, self.current_user_id)
        return updated
