"""Channel-based publish/subscribe for WebSocket clients.

Publishing is fire-and-forget: a publisher hands the message to each
subscriber's queue and returns immediately, whether or not anybody is
listening. Publishers may run on worker threads; every subscriber queue is
only touched from the event loop that owns it.
"""

from __future__ import annotations

import asyncio
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from loguru import logger


class Notifier(ABC):
    """Broadcast interface used by the HTTP layer."""

    @abstractmethod
    def publish(self, channel: str, payload: Any) -> int:
        """Hand ``payload`` to every subscriber of ``channel``.

        Never raises and never blocks on subscribers.

        Returns:
            Number of subscribers the message was handed to
        """


@dataclass(eq=False)
class Subscription:
    """One connected client listening on a set of channels."""

    channels: frozenset[str]
    loop: asyncio.AbstractEventLoop
    queue: asyncio.Queue = field(repr=False)
    dropped: int = 0

    def _put(self, message: dict[str, Any]) -> None:
        try:
            self.queue.put_nowait(message)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(
                "Subscriber queue full; dropped message for {} (total dropped: {})",
                message.get("channel"),
                self.dropped,
            )

    def deliver(self, message: dict[str, Any]) -> None:
        """Schedule ``message`` onto this subscriber's loop. Safe from any thread."""
        self.loop.call_soon_threadsafe(self._put, message)

    async def next_message(self) -> dict[str, Any]:
        return await self.queue.get()


class NotificationHub(Notifier):
    """In-process registry of subscriptions keyed by channel name."""

    def __init__(self, queue_size: int = 100):
        self._queue_size = queue_size
        self._channels: dict[str, set[Subscription]] = {}
        self._lock = threading.Lock()

    def subscribe(self, channels: Iterable[str]) -> Subscription:
        """Register a subscription for the running event loop."""
        subscription = Subscription(
            channels=frozenset(channels),
            loop=asyncio.get_running_loop(),
            queue=asyncio.Queue(maxsize=self._queue_size),
        )
        with self._lock:
            for channel in subscription.channels:
                self._channels.setdefault(channel, set()).add(subscription)
        logger.debug("Subscribed to {}", sorted(subscription.channels))
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            for channel in subscription.channels:
                subscribers = self._channels.get(channel)
                if subscribers is None:
                    continue
                subscribers.discard(subscription)
                if not subscribers:
                    del self._channels[channel]
        logger.debug("Unsubscribed from {}", sorted(subscription.channels))

    def subscriber_count(self, channel: str) -> int:
        with self._lock:
            return len(self._channels.get(channel, ()))

    def publish(self, channel: str, payload: Any) -> int:
        with self._lock:
            subscribers = list(self._channels.get(channel, ()))

        message = {"channel": channel, "payload": payload}
        delivered = 0
        for subscription in subscribers:
            try:
                subscription.deliver(message)
                delivered += 1
            except RuntimeError as exc:
                # Loop already closed: the client went away mid-publish
                logger.warning("Could not deliver to subscriber on {}: {}", channel, exc)
            except Exception:
                logger.exception("Unexpected error delivering to subscriber on {}", channel)

        logger.debug("Published to {} ({} subscribers)", channel, delivered)
        return delivered
