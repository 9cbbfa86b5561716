"""Shared context handed to flows and routes."""

from dataclasses import dataclass

from .config import Settings
from .event_bus import PacketBus
from .identity import IdentityRegistry
from .messaging import IMessagingClient


@dataclass(frozen=True)
class AppContext:
    """Process-wide state built once by Application.start()."""

    bus: PacketBus
    messaging: IMessagingClient
    identities: IdentityRegistry
    settings: Settings
