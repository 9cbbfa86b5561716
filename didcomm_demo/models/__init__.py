"""Core data models for the DIDComm demo."""

from .identity import IdentityInfo, Participant
from .messaging import DIDCommMessage, PingAck, SendAck, StoredMessage
from .packets import (
    STEP_DISPLAY,
    PacketDirection,
    PacketEvent,
    PacketStep,
    reset_event,
    step_color,
    step_label,
)

__all__ = [
    # Packets
    "PacketDirection",
    "PacketEvent",
    "PacketStep",
    "STEP_DISPLAY",
    "reset_event",
    "step_color",
    "step_label",
    # Identity
    "IdentityInfo",
    "Participant",
    # Messaging
    "DIDCommMessage",
    "PingAck",
    "SendAck",
    "StoredMessage",
]
