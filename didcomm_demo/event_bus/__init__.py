"""Packet event bus module."""

from .event_bus import IPacketBus, Lagged, PacketBus, Subscription, SubscriptionClosed

__all__ = ["IPacketBus", "Lagged", "PacketBus", "Subscription", "SubscriptionClosed"]
