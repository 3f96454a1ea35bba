"""WebSocket endpoint carrying the live issue feed."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from issuehub.api.dependencies import CoordinatorDep, HubDep
from issuehub.broadcast import WebSocketChannel
from issuehub.coordinator import MalformedIntentError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["live"])


@router.websocket("/ws")
async def issue_feed(
    websocket: WebSocket,
    hub: HubDep,
    coordinator: CoordinatorDep,
) -> None:
    """Send the current snapshot, then relay client intents and broadcast deltas.

    Bad messages and failed handlers are logged; the connection stays open.
    """
    await websocket.accept()
    subscriber = await hub.connect(WebSocketChannel(websocket))
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning("Ignoring non-JSON message from %s", subscriber.id)
                continue
            try:
                await coordinator.dispatch(message, subscriber)
            except MalformedIntentError as e:
                logger.warning("Ignoring message from %s: %s", subscriber.id, e)
            except Exception:
                logger.exception("Failed to handle message from %s", subscriber.id)
    except WebSocketDisconnect:
        pass
    finally:
        hub.disconnect(subscriber.id)
