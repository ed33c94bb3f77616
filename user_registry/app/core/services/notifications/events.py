"""User change events."""

from enum import StrEnum

from loguru import logger

from user_registry.app.core.services.notifications.hub import Notifier


class UserEvent(StrEnum):
    ADD = "ADD"
    EDIT = "EDIT"
    DELETE = "DELETE"


class UserEventPublisher:
    """Publishes tagged user events (``{"event": "ADD"}``) on one channel."""

    def __init__(self, notifier: Notifier, channel: str):
        self._notifier = notifier
        self.channel = channel

    def publish(self, event: UserEvent) -> None:
        try:
            self._notifier.publish(self.channel, {"event": event.value})
        except Exception:
            # A failed broadcast must never fail the request that caused it
            logger.exception("Failed to publish {} on {}", event, self.channel)
