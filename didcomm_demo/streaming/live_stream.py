"""Bridges a packet bus subscription to one SSE observer."""

import asyncio
import json
from typing import AsyncIterator

from ..config import KEEPALIVE_INTERVAL_SECONDS
from ..event_bus import Lagged, PacketBus, SubscriptionClosed
from ..logging_config import get_logger

logger = get_logger(__name__)

PACKET_EVENT = "packet"
KEEPALIVE_COMMENT = "ping"


class LiveStream:
    """
    Continuous SSE item stream for one observer.

    Each packet becomes ``{"event": "packet", "id": ..., "data": <json>}``.
    A ``{"comment": "ping"}`` item is emitted after ``keepalive_interval``
    seconds without a packet. Overflow gaps are skipped silently. The
    subscription is opened on first iteration and closed when the
    iteration ends, including cancellation on client disconnect.
    """

    def __init__(
        self,
        bus: PacketBus,
        keepalive_interval: float = KEEPALIVE_INTERVAL_SECONDS,
        capacity: int | None = None,
    ):
        self._bus = bus
        self._keepalive_interval = keepalive_interval
        self._capacity = capacity

    def __aiter__(self) -> AsyncIterator[dict]:
        return self.items()

    async def items(self) -> AsyncIterator[dict]:
        subscription = self._bus.subscribe(self._capacity)
        logger.info("Observer connected (%d active)", self._bus.subscriber_count)
        try:
            while True:
                try:
                    item = await asyncio.wait_for(
                        subscription.recv(), self._keepalive_interval
                    )
                except asyncio.TimeoutError:
                    yield {"comment": KEEPALIVE_COMMENT}
                    continue
                except SubscriptionClosed:
                    return

                if isinstance(item, Lagged):
                    logger.debug("Observer lagged, skipped %d packets", item.missed)
                    continue

                yield {
                    "event": PACKET_EVENT,
                    "id": item.id,
                    "data": json.dumps(item.to_dict()),
                }
        finally:
            subscription.close()
            logger.info("Observer disconnected (%d active)", self._bus.subscriber_count)
