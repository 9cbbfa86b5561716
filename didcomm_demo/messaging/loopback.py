"""In-process mediator implementing the messaging client boundary.

Messages are wrapped in JWE-shaped envelopes whose ciphertext is plain
base64url. Nothing here is secret; the envelopes only reproduce the shape
of the wire format so the packet inspector has something to show.
"""

import asyncio
import itertools
import base64
import hashlib
import json
import os
import uuid
from collections import deque
from dataclasses import dataclass, field
from typing import Any

from ..logging_config import get_logger
from ..models import DIDCommMessage, PingAck, SendAck, StoredMessage
from .client import MessagingError

logger = get_logger(__name__)

DEFAULT_MEDIATOR_DID = "did:web:localhost:mediator"

FORWARD_TYPE = "https://didcomm.org/routing/2.0/forward"
PING_TYPE = "https://didcomm.org/trust-ping/2.0/ping"
PONG_TYPE = "https://didcomm.org/trust-ping/2.0/ping-response"
ENCRYPTED_TYP = "application/didcomm-encrypted+json"

# oldest messages are dropped once a mailbox is full
MAILBOX_CAPACITY = 100


@dataclass
class LoopbackProfile:
    """Profile handle returned by LoopbackMediator.add_profile()."""

    alias: str
    did: str
    mediator_did: str
    live_stream: bool = False
    allow_list: set[str] | None = None
    mailbox: deque[DIDCommMessage] = field(
        default_factory=lambda: deque(maxlen=MAILBOX_CAPACITY)
    )
    condition: asyncio.Condition = field(default_factory=asyncio.Condition)


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_decode(text: str) -> bytes:
    padding = "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(text + padding)


def _message_from_dict(data: dict) -> DIDCommMessage:
    to = data.get("to") or []
    return DIDCommMessage(
        id=data["id"],
        type=data["type"],
        body=data.get("body", {}),
        to=[to] if isinstance(to, str) else list(to),
        from_=data.get("from"),
        created_time=data.get("created_time"),
        expires_time=data.get("expires_time"),
        thid=data.get("thid"),
    )


class LoopbackMediator:
    """Mediator and DIDComm toolkit living inside this process."""

    def __init__(self, mediator_did: str = DEFAULT_MEDIATOR_DID):
        self._mediator_did = mediator_did
        self._profiles: dict[str, LoopbackProfile] = {}
        self._closed = False

    @property
    def mediator_did(self) -> str:
        return self._mediator_did

    # Bootstrap

    async def add_profile(
        self, alias: str, did: str, mediator_did: str | None = None
    ) -> LoopbackProfile:
        """Register an identity and return its profile handle."""
        if did in self._profiles:
            return self._profiles[did]
        profile = LoopbackProfile(
            alias=alias,
            did=did,
            mediator_did=mediator_did or self._mediator_did,
        )
        self._profiles[did] = profile
        logger.info("Profile %s registered on loopback mediator", alias)
        return profile

    async def allow(self, profile: LoopbackProfile, did: str) -> None:
        """Add a DID to the profile's allow list (switches it to explicit-allow)."""
        if profile.allow_list is None:
            profile.allow_list = set()
        profile.allow_list.add(did)

    async def enable_live_stream(self, profile: LoopbackProfile) -> None:
        profile.live_stream = True

    async def close(self) -> None:
        self._closed = True
        for profile in self._profiles.values():
            async with profile.condition:
                profile.condition.notify_all()

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
        return DIDCommMessage(
            id=str(uuid.uuid4()),
            type=kind,
            body=body,
            to=[to],
            from_=from_,
            created_time=created_at,
            expires_time=created_at + ttl,
        )

    async def pack(
        self,
        message: DIDCommMessage,
        recipient: str,
        sender: str | None = None,
        signer: str | None = None,
    ) -> str:
        """Build an authcrypt-shaped envelope for the recipient."""
        self._ensure_open()
        if recipient not in self._profiles:
            raise MessagingError(f"Unable to resolve DID {recipient}")

        header: dict[str, Any] = {
            "typ": ENCRYPTED_TYP,
            "alg": "ECDH-1PU+A256KW" if sender else "ECDH-ES+A256KW",
            "enc": "A256CBC-HS512",
        }
        if sender:
            header["skid"] = f"{sender}#key-2"
        plaintext = message.to_dict()
        if signer:
            plaintext["signed_by"] = f"{signer}#key-1"

        ciphertext = json.dumps(plaintext).encode("utf-8")
        envelope = {
            "protected": _b64url(json.dumps(header).encode("utf-8")),
            "recipients": [
                {
                    "header": {"kid": f"{recipient}#key-2"},
                    "encrypted_key": _b64url(os.urandom(32)),
                }
            ],
            "iv": _b64url(os.urandom(16)),
            "ciphertext": _b64url(ciphertext),
            "tag": _b64url(hashlib.sha256(ciphertext).digest()[:16]),
        }
        return json.dumps(envelope)

    async def wrap_for_relay(
        self,
        sender_profile: LoopbackProfile,
        packed: str,
        relay_id: str,
        final_recipient_id: str,
    ) -> tuple[str, str]:
        """Wrap a packed message in a routing/2.0 forward envelope."""
        self._ensure_open()
        if not relay_id:
            raise MessagingError(f"No mediator DID for {final_recipient_id}")
        try:
            attachment = json.loads(packed)
        except ValueError as e:
            raise MessagingError(f"Packed message is not JSON: {e}") from e

        forward_id = str(uuid.uuid4())
        forward = {
            "id": forward_id,
            "typ": "application/didcomm-plain+json",
            "type": FORWARD_TYPE,
            "to": [relay_id],
            "from": sender_profile.did,
            "body": {"next": final_recipient_id},
            "attachments": [{"id": str(uuid.uuid4()), "data": {"json": attachment}}],
        }
        return forward_id, json.dumps(forward)

    async def dispatch(
        self, sender_profile: LoopbackProfile, packed: str, message_id: str
    ) -> SendAck:
        """Unwrap a forward envelope and store the inner message for its recipient."""
        self._ensure_open()
        recipient_did, message = self._unwrap(packed)
        recipient = self._profiles.get(recipient_did)
        if recipient is None:
            raise MessagingError(f"Mediator has no account for {recipient_did}")
        if recipient.allow_list is not None and sender_profile.did not in recipient.allow_list:
            raise MessagingError(
                f"{sender_profile.did} is not allowed to message {recipient_did}"
            )

        await self._deliver(recipient, message)
        logger.debug("Stored message %s for %s", message_id, recipient.alias)
        return SendAck(message_id=message_id, stored=True, detail=f"queued for {recipient_did}")

    async def await_next(
        self,
        recipient_profile: LoopbackProfile,
        message_id_hint: str | None,
        timeout: float,
    ) -> DIDCommMessage | None:
        """Take the next matching message off the live channel."""
        self._ensure_open()
        if not recipient_profile.live_stream:
            raise MessagingError(f"Live stream not enabled for {recipient_profile.alias}")

        def matching() -> DIDCommMessage | None:
            for message in recipient_profile.mailbox:
                if message_id_hint is None or message_id_hint in (message.thid, message.id):
                    return message
            return None

        condition = recipient_profile.condition
        async with condition:
            try:
                await asyncio.wait_for(
                    condition.wait_for(lambda: self._closed or matching() is not None),
                    timeout,
                )
            except asyncio.TimeoutError:
                return None
            message = matching()
            if message is not None:
                recipient_profile.mailbox.remove(message)
            return message

    async def send_ping(self, sender_profile: LoopbackProfile, target_id: str) -> PingAck:
        """Send a trust-ping; online targets queue a pong for the sender."""
        self._ensure_open()
        ping = DIDCommMessage(
            id=str(uuid.uuid4()),
            type=PING_TYPE,
            body={"response_requested": True},
            to=[target_id],
            from_=sender_profile.did,
        )
        message_hash = hashlib.sha256(json.dumps(ping.to_dict()).encode("utf-8")).hexdigest()

        target = self._profiles.get(target_id)
        if target is None and target_id != sender_profile.mediator_did:
            raise MessagingError(f"Unable to resolve DID {target_id}")

        # Offline targets never answer; the caller sees a pickup timeout.
        if target is None or target.live_stream:
            pong = DIDCommMessage(
                id=str(uuid.uuid4()),
                type=PONG_TYPE,
                body={},
                to=[sender_profile.did],
                from_=target_id,
                thid=ping.id,
            )
            await self._deliver(sender_profile, pong)

        return PingAck(message_id=ping.id, message_hash=message_hash)

    async def fetch_messages(
        self, profile: LoopbackProfile, limit: int = 50
    ) -> list[StoredMessage]:
        self._ensure_open()
        async with profile.condition:
            messages = list(itertools.islice(profile.mailbox, limit))
        return [
            StoredMessage(msg_id=message.id, msg=json.dumps(message.to_dict()))
            for message in messages
        ]

    def _ensure_open(self) -> None:
        if self._closed:
            raise MessagingError("Messaging client is closed")

    async def _deliver(self, recipient: LoopbackProfile, message: DIDCommMessage) -> None:
        async with recipient.condition:
            recipient.mailbox.append(message)
            recipient.condition.notify_all()

    def _unwrap(self, packed: str) -> tuple[str, DIDCommMessage]:
        try:
            envelope = json.loads(packed)
            if envelope.get("type") == FORWARD_TYPE:
                recipient_did = envelope["body"]["next"]
                envelope = envelope["attachments"][0]["data"]["json"]
            else:
                kid = envelope["recipients"][0]["header"]["kid"]
                recipient_did = kid.split("#", 1)[0]
            plaintext = json.loads(_b64url_decode(envelope["ciphertext"]))
            return recipient_did, _message_from_dict(plaintext)
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise MessagingError(f"Malformed envelope: {e}") from e
