"""Identity module."""

from .registry import (
    LOOPBACK_IDENTITIES,
    IdentityConfigError,
    IdentityRegistry,
    load_identities,
)

__all__ = [
    "LOOPBACK_IDENTITIES",
    "IdentityConfigError",
    "IdentityRegistry",
    "load_identities",
]
