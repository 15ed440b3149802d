"""
In-process notification of new orders.

The delivery board used to re-read every order every few seconds. Order
creation now publishes an OrderEvent; the board subscribes and wakes up as
soon as the creating transaction has committed. Polling the order feed keeps
working for clients that cannot hold a connection open.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import AsyncIterator, Optional

from freshpos.config import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderEvent:
    order_id: str
    order_type: str
    status: str
    created_at: datetime


class OrderEventBus:
    """Fan-out of order events to any number of bounded subscriber queues"""

    def __init__(self, queue_size: Optional[int] = None):
        self.queue_size = queue_size or get_settings().ORDER_EVENT_QUEUE_SIZE
        self._subscribers: set[asyncio.Queue] = set()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, event: OrderEvent) -> None:
        for queue in list(self._subscribers):
            if queue.full():
                # Slow subscriber: drop its oldest event
                dropped = queue.get_nowait()
                logger.debug(f"Dropped order event {dropped.order_id} for a slow subscriber")
            queue.put_nowait(event)

    @asynccontextmanager
    async def subscribe(self) -> AsyncIterator[asyncio.Queue]:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
        self._subscribers.add(queue)
        try:
            yield queue
        finally:
            self._subscribers.discard(queue)

    async def wait_for_event(self, timeout: float) -> Optional[OrderEvent]:
        """Block until the next order event, or None after timeout seconds"""
        async with self.subscribe() as queue:
            try:
                return await asyncio.wait_for(queue.get(), timeout=timeout)
            except asyncio.TimeoutError:
                return None


# Global instance
order_events = OrderEventBus()
