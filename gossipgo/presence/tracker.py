"""Latest online flag per user, as reported by a presence channel."""

from gossipgo.db.models import User
from gossipgo.presence.channel import EventType, PresenceChannel, UserStatusEvent


class PresenceTracker:
    def __init__(self, channel: PresenceChannel):
        self._channel = channel
        self._status: dict[str, bool] = {}
        self._attached = False

    def attach(self) -> None:
        if not self._attached:
            self._channel.add_listener(EventType.USER_STATUS, self._on_status)
            self._attached = True

    def detach(self) -> None:
        if self._attached:
            self._channel.remove_listener(EventType.USER_STATUS, self._on_status)
            self._attached = False

    def _on_status(self, event: UserStatusEvent) -> None:
        self._status[event.user_id] = event.is_online

    def status_of(self, user_id: str) -> bool | None:
        return self._status.get(user_id)

    def apply(self, users: list[User]) -> list[User]:
        """Return copies of ``users`` with tracked flags applied; untracked users keep theirs."""
        if not self._status:
            return list(users)
        return [
            user.model_copy(update={"is_online": self._status[user.id]}) if user.id in self._status else user
            for user in users
        ]
