"""Live disruption feed — in-process fan-out to streaming subscribers.

The feed is empty until something publishes to it. Each subscriber gets its
own bounded queue; a slow subscriber loses events instead of blocking
publishers.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator

from gate_engine.models import DisruptionEvent

logger = logging.getLogger(__name__)

FEED_CAPACITY = 16

_CLOSED = object()


class DisruptionFeed:
    def __init__(self, capacity: int = FEED_CAPACITY) -> None:
        self.capacity = capacity
        self._subscribers: set[asyncio.Queue] = set()
        self._closed = False

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, event: DisruptionEvent) -> int:
        """Hand *event* to every current subscriber. Returns how many got it."""
        delivered = 0
        for queue in list(self._subscribers):
            try:
                queue.put_nowait(event)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning("Feed subscriber full, dropped event %s", event.event_id)
        return delivered

    async def subscribe(self) -> AsyncIterator[DisruptionEvent]:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.capacity)
        if self._closed:
            return
        self._subscribers.add(queue)
        logger.debug("Feed subscriber added (%d total)", len(self._subscribers))
        try:
            while True:
                item = await queue.get()
                if item is _CLOSED:
                    return
                yield item
        finally:
            self._subscribers.discard(queue)
            logger.debug("Feed subscriber removed (%d left)", len(self._subscribers))

    def close(self) -> None:
        self._closed = True
        for queue in list(self._subscribers):
            # Make room so the sentinel always lands
            while queue.full():
                queue.get_nowait()
            queue.put_nowait(_CLOSED)
