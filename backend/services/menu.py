"""
Menu mutations: id assignment, persistence, then fan-out.
Publishing happens after the store lock is released and before the caller gets
its result, so a successful response means the broadcast was already attempted.
"""

import logging
import threading
import time
from typing import Callable, Optional

from repositories.base import StoreProtocol
from schemas.menu import MenuEntry
from services.broadcaster import Broadcaster

logger = logging.getLogger(__name__)


class IdGenerator:
    """Decimal nanosecond-clock ids, forced strictly increasing within the process."""

    def __init__(self, clock: Callable[[], int] = time.time_ns):
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            value = self._clock()
            if value <= self._last:
                value = self._last + 1
            self._last = value
        return str(value)


class MenuService:
    def __init__(
        self,
        store: StoreProtocol,
        broadcaster: Broadcaster,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self.store = store
        self.broadcaster = broadcaster
        self.id_factory = id_factory or IdGenerator()

    def list_entries(self) -> list[MenuEntry]:
        return self.store.read()

    def current_snapshot(self) -> str:
        return self.store.snapshot().encoded

    def add_entry(self, dish: str, who: str) -> list[MenuEntry]:
        entry = MenuEntry(id=self.id_factory(), dish=dish, who=who)
        result = self.store.append(entry)
        self._publish(result.encoded)
        return result.entries

    def remove_entry(self, entry_id: str) -> list[MenuEntry]:
        result = self.store.remove(entry_id)
        self._publish(result.encoded)
        return result.entries

    def _publish(self, snapshot: str) -> None:
        delivered = self.broadcaster.publish(snapshot)
        logger.debug(
            "Menu snapshot delivered to %d of %d subscribers",
            delivered,
            self.broadcaster.subscriber_count,
        )
