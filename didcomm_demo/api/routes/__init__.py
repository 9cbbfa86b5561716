"""API routers."""

from .control import create_control_router
from .identities import create_identities_router
from .messaging import create_messaging_router
from .packets import create_packets_router

__all__ = [
    "create_control_router",
    "create_identities_router",
    "create_messaging_router",
    "create_packets_router",
]
