"""Boundary to the external DIDComm messaging toolkit."""

from typing import Any, Protocol

from ..models import DIDCommMessage, PingAck, SendAck, StoredMessage


class MessagingError(Exception):
    """A messaging toolkit operation failed."""


class IMessagingClient(Protocol):
    """
    DIDComm messaging toolkit as seen by the flows.

    Implementations must be safe to call from concurrent tasks. Profile
    handles are opaque to callers; they are whatever ``add_profile``
    returned. Failures raise ``MessagingError``.
    """

    # Bootstrap
    async def add_profile(
        self, alias: str, did: str, mediator_did: str | None = None
    ) -> Any:
        """Register an identity and return its profile handle."""
        ...

    async def allow(self, profile: Any, did: str) -> None:
        """Add a DID to the profile's mediator allow list."""
        ...

    async def enable_live_stream(self, profile: Any) -> None:
        """Open the live (WebSocket) pickup channel for a profile."""
        ...

    async def close(self) -> None:
        """Release connections."""
        ...

    # Messaging
    async def declare_intent(
        self,
        kind: str,
        to: str,
        from_: str,
        body: dict,
        created_at: int,
        ttl: int,
    ) -> DIDCommMessage:
        """Build a plaintext protocol message."""
        ...

    async def pack(
        self,
        message: DIDCommMessage,
        recipient: str,
        sender: str | None = None,
        signer: str | None = None,
    ) -> str:
        """Encrypt (and optionally sign) a message for a recipient."""
        ...

    async def wrap_for_relay(
        self,
        sender_profile: Any,
        packed: str,
        relay_id: str,
        final_recipient_id: str,
    ) -> tuple[str, str]:
        """Wrap a packed message in a forward envelope. Returns (id, envelope)."""
        ...

    async def dispatch(
        self, sender_profile: Any, packed: str, message_id: str
    ) -> SendAck:
        """Send a packed message to the sender's mediator."""
        ...

    async def await_next(
        self,
        recipient_profile: Any,
        message_id_hint: str | None,
        timeout: float,
    ) -> DIDCommMessage | None:
        """Wait on the live channel for a message. None on timeout."""
        ...

    async def send_ping(self, sender_profile: Any, target_id: str) -> PingAck:
        """Send a trust-ping requesting a response."""
        ...

    async def fetch_messages(
        self, profile: Any, limit: int = 50
    ) -> list[StoredMessage]:
        """List messages stored for a profile without deleting them."""
        ...
