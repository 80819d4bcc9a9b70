"""In-process change feed for live queue and appointment displays.

Mutating services call `change_feed.publish(...)` after their commit.
Subscribers register per (table, business) and receive a JSON-ready dict.
The feed knows nothing about transports: the WebSocket endpoint is just
one subscriber. A callback that raises is dropped from the feed.
"""

import logging
from collections import defaultdict
from typing import Awaitable, Callable, Optional
from uuid import UUID

logger = logging.getLogger(__name__)

APPOINTMENTS = "appointments"
QUEUE_ENTRIES = "queue_entries"

ChangeCallback = Callable[[dict], Awaitable[None]]


class ChangeFeed:
    """Observer registry: on change of table T in business B, invoke callbacks."""

    def __init__(self):
        self._subscribers: dict[tuple[str, UUID], set[ChangeCallback]] = defaultdict(set)

    def subscribe(self, table: str, business_id: UUID, callback: ChangeCallback) -> Callable[[], None]:
        key = (table, business_id)
        self._subscribers[key].add(callback)

        def unsubscribe() -> None:
            self._subscribers.get(key, set()).discard(callback)
            if key in self._subscribers and not self._subscribers[key]:
                del self._subscribers[key]

        return unsubscribe

    def subscriber_count(self, table: str, business_id: UUID) -> int:
        return len(self._subscribers.get((table, business_id), ()))

    async def publish(self, table: str, business_id: UUID, event: str, record: Optional[dict] = None) -> int:
        """Deliver a change to every subscriber. Returns how many received it."""
        key = (table, business_id)
        message = {
            "table": table,
            "event": event,
            "business_id": str(business_id),
            "record": record,
        }
        delivered = 0
        dead = set()
        for callback in list(self._subscribers.get(key, ())):
            try:
                await callback(message)
                delivered += 1
            except Exception as e:
                logger.warning("Dropping %s subscriber for business %s: %s", table, business_id, e)
                dead.add(callback)
        if dead and key in self._subscribers:
            self._subscribers[key].difference_update(dead)
        return delivered


change_feed = ChangeFeed()
