"""
In-process fan-out of menu snapshots to live stream subscribers.

Each subscriber owns a bounded channel. publish() never waits: when a
subscriber's channel is full the snapshot is dropped for that subscriber only.
Snapshots carry the whole menu, so the next delivery that fits brings a lagging
subscriber back up to date.
"""

import asyncio
import logging
import threading
from typing import Optional

from config import DEFAULT_SUBSCRIBER_BUFFER

logger = logging.getLogger(__name__)

_CLOSED = object()


class Subscription:
    """Bounded delivery channel for one stream subscriber.

    Must be consumed on the event loop that publishes to it.
    """

    def __init__(self, subscription_id: int, buffer_size: int):
        self.id = subscription_id
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=buffer_size)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def offer(self, snapshot: str) -> bool:
        """Queue ``snapshot`` without blocking. False if closed or full."""
        if self._closed:
            return False
        try:
            self._queue.put_nowait(snapshot)
        except asyncio.QueueFull:
            return False
        return True

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # Wake a reader blocked on an empty channel. A full channel needs no
        # marker: the reader drains it and then sees the closed flag.
        try:
            self._queue.put_nowait(_CLOSED)
        except asyncio.QueueFull:
            pass

    def get_nowait(self) -> str:
        """Next buffered snapshot. Raises asyncio.QueueEmpty when nothing is pending."""
        item = self._queue.get_nowait()
        if item is _CLOSED:
            raise asyncio.QueueEmpty
        return item

    async def get(self) -> Optional[str]:
        """Wait for the next snapshot. Returns None once closed and drained."""
        if self._closed and self._queue.empty():
            return None
        item = await self._queue.get()
        if item is _CLOSED:
            return None
        return item

    def __aiter__(self):
        return self

    async def __anext__(self) -> str:
        item = await self.get()
        if item is None:
            raise StopAsyncIteration
        return item


class Broadcaster:
    """Registry of live subscriptions, guarded by its own lock."""

    def __init__(self, buffer_size: int = DEFAULT_SUBSCRIBER_BUFFER):
        if buffer_size < 1:
            raise ValueError("buffer_size must be at least 1")
        self.buffer_size = buffer_size
        self._subscribers: dict[int, Subscription] = {}
        self._next_id = 0
        self._lock = threading.Lock()

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def subscribe(self) -> Subscription:
        with self._lock:
            self._next_id += 1
            subscription = Subscription(self._next_id, self.buffer_size)
            self._subscribers[subscription.id] = subscription
        logger.debug("Subscriber %d registered", subscription.id)
        return subscription

    def unsubscribe(self, subscription_id: int) -> None:
        with self._lock:
            subscription = self._subscribers.pop(subscription_id, None)
            if subscription is None:
                return
            subscription.close()
        logger.debug("Subscriber %d removed", subscription_id)

    def publish(self, snapshot: str) -> int:
        """Offer ``snapshot`` to every subscriber. Returns how many accepted it."""
        delivered = 0
        with self._lock:
            for subscription in self._subscribers.values():
                if subscription.offer(snapshot):
                    delivered += 1
                else:
                    logger.debug("Subscriber %d is full, snapshot dropped", subscription.id)
        return delivered
