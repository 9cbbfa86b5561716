"""Messaging toolkit boundary."""

from .client import IMessagingClient, MessagingError
from .loopback import DEFAULT_MEDIATOR_DID, LoopbackMediator, LoopbackProfile

__all__ = [
    "DEFAULT_MEDIATOR_DID",
    "IMessagingClient",
    "LoopbackMediator",
    "LoopbackProfile",
    "MessagingError",
]
