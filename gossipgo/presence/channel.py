"""Duplex presence/message channel, backed by a timer-driven simulator.

The simulator stands in for server-pushed presence deltas: on every tick it
may flip one known user online or offline. Sent messages are echoed straight
back as NEW_MESSAGE events (optimistic local echo).
"""

import asyncio
import logging
import random
from collections import defaultdict
from collections.abc import Callable, Collection, Iterable
from enum import Enum
from typing import Any

from pydantic import BaseModel

from gossipgo.config.settings import Settings
from gossipgo.db.models import Message

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    CONNECT = "connect"
    DISCONNECT = "disconnect"
    NEW_MESSAGE = "new_message"
    USER_STATUS = "user_status"


class UserStatusEvent(BaseModel):
    user_id: str
    is_online: bool


Listener = Callable[[Any], Any]


class PresenceChannel:
    def __init__(
        self,
        user_ids: Iterable[str],
        *,
        tick_interval: float = 10.0,
        connect_delay: float = 0.5,
        select_probability: float = 0.3,
        online_probability: float = 0.7,
        rng: random.Random | None = None,
    ):
        # Read on every tick, so a dict.keys() view tracks users added later
        self._user_ids = user_ids if isinstance(user_ids, Collection) else list(user_ids)
        self.tick_interval = tick_interval
        self.connect_delay = connect_delay
        self.select_probability = select_probability
        self.online_probability = online_probability
        self._rng = rng or random.Random()
        self._listeners: dict[EventType, list[Listener]] = defaultdict(list)
        self._connected = False
        self._epoch = 0
        self._simulation: asyncio.Task | None = None

    @classmethod
    def from_settings(cls, settings: Settings, user_ids: Iterable[str], rng: random.Random | None = None) -> "PresenceChannel":
        return cls(
            user_ids,
            tick_interval=settings.PRESENCE_TICK_SECONDS,
            connect_delay=settings.PRESENCE_CONNECT_DELAY_SECONDS,
            select_probability=settings.PRESENCE_SELECT_PROBABILITY,
            online_probability=settings.PRESENCE_ONLINE_PROBABILITY,
            rng=rng,
        )

    @property
    def user_ids(self) -> list[str]:
        return list(self._user_ids)

    @property
    def is_connected(self) -> bool:
        return self._connected

    # --- Lifecycle ---

    async def start(self) -> None:
        await self.connect()

    async def stop(self) -> None:
        task = self._simulation
        self.disconnect()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def connect(self) -> None:
        if self._connected:
            return
        self._epoch += 1
        epoch = self._epoch
        logger.info("Presence channel connecting")
        await asyncio.sleep(self.connect_delay)
        if epoch != self._epoch or self._connected:
            logger.info("Presence channel connect aborted")
            return

        self._connected = True
        self._emit(EventType.CONNECT, None)
        logger.info("Presence channel connected")
        self._simulation = asyncio.create_task(self._run_simulation())

    def disconnect(self) -> None:
        # Bumping the epoch also aborts a connect() still waiting out its delay
        self._epoch += 1
        if not self._connected:
            return
        self._connected = False
        if self._simulation is not None:
            self._simulation.cancel()
            self._simulation = None
        self._emit(EventType.DISCONNECT, None)
        logger.info("Presence channel disconnected")

    # --- Messaging ---

    def send_message(self, message: Message) -> None:
        if not self._connected:
            logger.warning("Dropping message %s: presence channel not connected", message.id)
            return
        logger.debug("Echoing message %s in chat %s", message.id, message.chat_id)
        self._emit(EventType.NEW_MESSAGE, message)

    # --- Listeners ---

    def add_listener(self, event: EventType, callback: Listener) -> None:
        self._listeners[event].append(callback)

    def remove_listener(self, event: EventType, callback: Listener) -> None:
        callbacks = self._listeners.get(event)
        if callbacks and callback in callbacks:
            callbacks.remove(callback)

    def listener_count(self, event: EventType) -> int:
        return len(self._listeners.get(event, []))

    def _emit(self, event: EventType, data: Any) -> None:
        # Copy so listeners may deregister themselves mid-delivery
        for callback in list(self._listeners.get(event, [])):
            try:
                callback(data)
            except Exception:
                logger.exception("Listener %r failed on %s event", callback, event.value)

    # --- Simulation ---

    def simulate_tick(self) -> UserStatusEvent | None:
        """Run one simulation step; returns the status event emitted, if any."""
        candidates = self.user_ids
        if not self._connected or not candidates:
            return None
        if self._rng.random() >= self.select_probability:
            return None
        status = UserStatusEvent(
            user_id=self._rng.choice(candidates),
            is_online=self._rng.random() < self.online_probability,
        )
        self._emit(EventType.USER_STATUS, status)
        return status

    async def _run_simulation(self) -> None:
        while self._connected:
            await asyncio.sleep(self.tick_interval)
            self.simulate_tick()
