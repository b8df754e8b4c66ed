"""
Server-sent event framing for menu snapshots.

A multi-line snapshot becomes one event: a single ``event:`` line, one
``data:`` line per snapshot line, and a terminating blank line.
"""

import logging
from typing import AsyncIterator, Callable

from services.broadcaster import Subscription

logger = logging.getLogger(__name__)

MENU_EVENT = "menu"


def format_event(snapshot: str, event: str = MENU_EVENT) -> str:
    lines = [f"event: {event}\n"]
    for line in snapshot.split("\n"):
        lines.append(f"data: {line}\n")
    lines.append("\n")
    return "".join(lines)


async def menu_event_stream(
    subscription: Subscription,
    initial_snapshot: str,
    release: Callable[[int], None],
) -> AsyncIterator[str]:
    """Yield the current menu, then every delivered snapshot until the stream ends.

    ``release`` runs on every exit path: client disconnect (cancellation),
    subscription closed by the broadcaster, or a send failure.
    """
    try:
        yield format_event(initial_snapshot)
        async for snapshot in subscription:
            yield format_event(snapshot)
    finally:
        release(subscription.id)
        logger.info("Menu stream %d closed", subscription.id)
