"""Broadcast - Subscriber registry and event fan-out."""

from issuehub.broadcast.events import Event, EventType
from issuehub.broadcast.hub import BroadcastHub, Channel, Subscriber, WebSocketChannel

__all__ = [
    "BroadcastHub",
    "Channel",
    "Event",
    "EventType",
    "Subscriber",
    "WebSocketChannel",
]
