"""Packet-annotated DIDComm flows."""

from .common import Endpoints, PacketTrail, resolve_endpoints
from .errors import DemoError, FlowError, ValidationError
from .send_message import send_message
from .trust_ping import trust_ping

__all__ = [
    "DemoError",
    "Endpoints",
    "PacketTrail",
    "FlowError",
    "ValidationError",
    "resolve_endpoints",
    "send_message",
    "trust_ping",
]
