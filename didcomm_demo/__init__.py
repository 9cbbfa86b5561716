"""DIDComm packet-inspector demo."""

from .app import Application, IApplication
from .config import Settings
from .context import AppContext
from .event_bus import IPacketBus, Lagged, PacketBus, Subscription, SubscriptionClosed
from .flows import DemoError, FlowError, ValidationError, send_message, trust_ping
from .identity import IdentityRegistry
from .messaging import IMessagingClient, LoopbackMediator, MessagingError
from .models import (
    IdentityInfo,
    PacketDirection,
    PacketEvent,
    PacketStep,
    Participant,
)
from .streaming import LiveStream

__all__ = [
    # Application
    "Application",
    "IApplication",
    "AppContext",
    "Settings",
    # Models
    "IdentityInfo",
    "PacketDirection",
    "PacketEvent",
    "PacketStep",
    "Participant",
    # Components
    "IPacketBus",
    "PacketBus",
    "Subscription",
    "SubscriptionClosed",
    "Lagged",
    "IdentityRegistry",
    "IMessagingClient",
    "LoopbackMediator",
    "MessagingError",
    "LiveStream",
    # Flows
    "send_message",
    "trust_ping",
    "DemoError",
    "FlowError",
    "ValidationError",
]
