"""WebSocket endpoint streaming change notifications to subscribers."""

import asyncio

from fastapi import APIRouter, Depends, WebSocket, status
from loguru import logger

from user_registry.app.api.http.deps import get_app_config, get_notification_hub
from user_registry.app.core.services import NotificationHub
from user_registry.app.core.services.notifications import Subscription
from user_registry.app.runtime.config.config_data import ConfigData

router = APIRouter(tags=["notifications"])


def origin_allowed(origin: str | None, allowed_origins: list[str]) -> bool:
    """Browsers always send ``Origin``; other clients may omit it."""
    if origin is None:
        return True
    return "*" in allowed_origins or origin in allowed_origins


def parse_channels(raw: str | None, default: str) -> list[str]:
    """Split a comma-separated channel list, keeping order and dropping blanks."""
    if not raw:
        return [default]
    channels = [channel.strip() for channel in raw.split(",")]
    return list(dict.fromkeys(channel for channel in channels if channel)) or [default]


async def _forward(websocket: WebSocket, subscription: Subscription) -> None:
    while True:
        message = await subscription.next_message()
        await websocket.send_json(message)


async def _drain(websocket: WebSocket) -> None:
    # Inbound frames carry no meaning; wait for the client to leave
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


@router.websocket("/ws")
async def notifications(
    websocket: WebSocket,
    channels: str | None = None,
    hub: NotificationHub = Depends(get_notification_hub),
    config: ConfigData = Depends(get_app_config),
) -> None:
    origin = websocket.headers.get("origin")
    if not origin_allowed(origin, config.notifications.allowed_origins):
        logger.warning("Rejected WebSocket connection from origin {}", origin)
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    requested = parse_channels(channels, config.notifications.users_channel)

    # Registered before the handshake completes so no publish after the ack is missed
    subscription = hub.subscribe(requested)
    try:
        await websocket.accept()
        await websocket.send_json({"type": "subscribed", "channels": requested})
        logger.info("WebSocket subscribed to {}", requested)

        tasks = {
            asyncio.create_task(_forward(websocket, subscription)),
            asyncio.create_task(_drain(websocket)),
        }
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        for task in done:
            if not task.cancelled() and task.exception() is not None:
                logger.debug("WebSocket closed: {!r}", task.exception())
    finally:
        hub.unsubscribe(subscription)
        logger.info("WebSocket unsubscribed from {}", requested)
