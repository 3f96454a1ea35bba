"""BroadcastHub - Tracks connected subscribers and fans events out to them."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol
from uuid import uuid4

from fastapi.websockets import WebSocketState

from issuehub.broadcast.events import Event

if TYPE_CHECKING:
    from fastapi import WebSocket

    from issuehub.snapshot_store import SnapshotStore

logger = logging.getLogger("issuehub.broadcast")


class Channel(Protocol):
    """A bidirectional message channel to one client."""

    @property
    def is_open(self) -> bool:
        """Whether messages can still be delivered."""
        ...

    async def send_json(self, message: dict[str, Any]) -> None:
        """Deliver one JSON-shaped message."""
        ...


class WebSocketChannel:
    """Channel over a FastAPI WebSocket."""

    def __init__(self, websocket: WebSocket) -> None:
        self.websocket = websocket

    @property
    def is_open(self) -> bool:
        return (
            self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    async def send_json(self, message: dict[str, Any]) -> None:
        await self.websocket.send_json(message)


@dataclass
class Subscriber:
    """A connected client."""

    id: str
    channel: Channel
    # Keeps the initial snapshot ahead of any delta racing it
    _send_lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    @classmethod
    def create(cls, channel: Channel) -> Subscriber:
        """Create a new subscriber."""
        return cls(id=str(uuid4()), channel=channel)

    @property
    def is_open(self) -> bool:
        return self.channel.is_open

    async def send(self, event: Event) -> None:
        async with self._send_lock:
            await self.channel.send_json(event.to_message())


class BroadcastHub:
    """Registry of live subscribers plus fan-out.

    Delivery is best effort: closed subscribers are skipped and nothing is
    buffered for them. A reconnecting client gets a full snapshot instead.
    """

    def __init__(self, store: SnapshotStore, remote_configured: bool = False) -> None:
        """Initialize the hub.

        Args:
            store: Snapshot store supplying the handshake snapshot.
            remote_configured: Reported to clients in the handshake.
        """
        self.store = store
        self.remote_configured = remote_configured
        self._subscribers: dict[str, Subscriber] = {}

    @property
    def subscriber_count(self) -> int:
        """Get the number of registered subscribers."""
        return len(self._subscribers)

    async def connect(self, channel: Channel) -> Subscriber:
        """Register a client and send it the current snapshot.

        The snapshot is taken and the subscriber registered before the first
        await, so the client sees exactly the state at connection time and
        every change after it.
        """
        subscriber = Subscriber.create(channel)
        initial = Event.initial_data(self.store.all(), self.remote_configured)
        self._subscribers[subscriber.id] = subscriber
        logger.info("Subscriber %s connected (%d total)", subscriber.id, self.subscriber_count)
        await self.send_to(subscriber, initial)
        return subscriber

    def disconnect(self, subscriber_id: str) -> None:
        """Remove a subscriber. Unknown ids are ignored."""
        if self._subscribers.pop(subscriber_id, None) is not None:
            logger.info(
                "Subscriber %s disconnected (%d total)", subscriber_id, self.subscriber_count
            )

    async def send_to(self, subscriber: Subscriber, event: Event) -> bool:
        """Send one event to one subscriber.

        Returns:
            True if delivered. A subscriber whose channel fails is dropped.
        """
        if not subscriber.is_open:
            logger.debug("Skipping closed subscriber %s", subscriber.id)
            return False
        try:
            await subscriber.send(event)
        except Exception as e:
            logger.warning(
                "Dropping subscriber %s after failed %s: %s",
                subscriber.id,
                event.event_type.value,
                e,
            )
            self.disconnect(subscriber.id)
            return False
        return True

    async def broadcast(self, event: Event) -> int:
        """Send an event to every open subscriber.

        Returns:
            Number of subscribers the event was delivered to.
        """
        subscribers = list(self._subscribers.values())
        results = await asyncio.gather(*(self.send_to(s, event) for s in subscribers))
        delivered = sum(results)
        logger.debug(
            "Broadcast %s to %d/%d subscriber(s)",
            event.event_type.value,
            delivered,
            len(subscribers),
        )
        return delivered
