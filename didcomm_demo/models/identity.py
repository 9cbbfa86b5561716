"""Identity data models."""

from dataclasses import asdict, dataclass, field
from typing import Any

DEFAULT_KEY_TYPES = ["P-256", "Ed25519", "X25519", "secp256k1"]


@dataclass(frozen=True)
class IdentityInfo:
    """Public identity information exposed to observers."""

    alias: str
    did: str
    mediator_did: str | None = None
    # did:peer profiles carry P-256 + Ed25519 for signing, X25519 + secp256k1 for encryption
    key_types: list[str] = field(default_factory=lambda: list(DEFAULT_KEY_TYPES))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Participant:
    """An identity plus the messaging client's profile handle for it."""

    info: IdentityInfo
    profile: Any

    @property
    def alias(self) -> str:
        return self.info.alias.lower()

    @property
    def did(self) -> str:
        return self.info.did

    @property
    def mediator_did(self) -> str:
        return self.info.mediator_did or ""
