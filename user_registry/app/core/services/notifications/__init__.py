"""Change notifications for WebSocket subscribers."""

from .events import UserEvent, UserEventPublisher
from .hub import NotificationHub, Notifier, Subscription

__all__ = [
    "NotificationHub",
    "Notifier",
    "Subscription",
    "UserEvent",
    "UserEventPublisher",
]
