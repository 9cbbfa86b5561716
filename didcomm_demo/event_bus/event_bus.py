"""In-memory broadcast bus for packet events."""

import asyncio
from collections import deque
from dataclasses import dataclass
from typing import AsyncIterator, Protocol

from ..config import PACKET_BUS_CAPACITY
from ..logging_config import get_logger
from ..models import PacketEvent

logger = get_logger(__name__)


@dataclass(frozen=True)
class Lagged:
    """Marker returned by a subscription whose buffer overflowed."""

    missed: int


class SubscriptionClosed(Exception):
    """Raised by recv() once the subscription has been closed."""


class IPacketBus(Protocol):
    """Broadcast of PacketEvents to any number of subscribers."""

    def publish(self, event: PacketEvent) -> int:
        """Hand an event to every current subscriber. Never blocks."""
        ...

    def subscribe(self, capacity: int | None = None) -> "Subscription":
        """Start receiving events published from now on."""
        ...


class Subscription:
    """
    One subscriber's view of the bus.

    Holds a bounded buffer of pending events. When the buffer is full the
    oldest event is dropped and the loss is reported by the next ``recv()``
    as a ``Lagged`` marker, after which delivery resumes with the oldest
    event still buffered.
    """

    def __init__(self, bus: "PacketBus", capacity: int):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._bus = bus
        self._capacity = capacity
        self._buffer: deque[PacketEvent] = deque()
        self._missed = 0
        self._ready = asyncio.Event()
        self._closed = False

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def closed(self) -> bool:
        return self._closed

    def pending(self) -> int:
        """Number of buffered events not yet received."""
        return len(self._buffer)

    def _push(self, event: PacketEvent) -> bool:
        if self._closed:
            return False
        if len(self._buffer) >= self._capacity:
            self._buffer.popleft()
            self._missed += 1
        self._buffer.append(event)
        self._ready.set()
        return True

    async def recv(self) -> PacketEvent | Lagged:
        """Wait for the next event, or a Lagged marker after an overflow."""
        while True:
            if self._closed:
                raise SubscriptionClosed()
            if self._missed:
                missed, self._missed = self._missed, 0
                return Lagged(missed)
            if self._buffer:
                return self._buffer.popleft()
            self._ready.clear()
            await self._ready.wait()

    def close(self) -> None:
        """Detach from the bus and wake any pending recv()."""
        if self._closed:
            return
        self._closed = True
        self._buffer.clear()
        self._bus._detach(self)
        self._ready.set()

    def __aiter__(self) -> AsyncIterator[PacketEvent | Lagged]:
        return self

    async def __anext__(self) -> PacketEvent | Lagged:
        try:
            return await self.recv()
        except SubscriptionClosed:
            raise StopAsyncIteration

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()


class PacketBus:
    """Process-wide packet event bus with per-subscriber bounded buffers."""

    def __init__(self, capacity: int = PACKET_BUS_CAPACITY):
        self._capacity = capacity
        self._subscriptions: list[Subscription] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def publish(self, event: PacketEvent) -> int:
        """Hand an event to every current subscriber. Never blocks."""
        delivered = 0
        for subscription in list(self._subscriptions):
            try:
                if subscription._push(event):
                    delivered += 1
            except Exception as e:
                logger.error("Failed to buffer event %s: %s", event.id, e)
        return delivered

    def subscribe(self, capacity: int | None = None) -> Subscription:
        """Start receiving events published from now on."""
        subscription = Subscription(self, capacity or self._capacity)
        self._subscriptions.append(subscription)
        logger.debug("Subscription opened (%d active)", len(self._subscriptions))
        return subscription

    def close(self) -> None:
        """Close every subscription (application shutdown)."""
        for subscription in list(self._subscriptions):
            subscription.close()

    def _detach(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
            logger.debug("Subscription closed (%d active)", len(self._subscriptions))
