"""Packet event data models."""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class PacketStep(str, Enum):
    """Step within the DIDComm send/receive pipeline."""

    PLAINTEXT_MESSAGE = "plaintext_message"
    SIGNED_ENVELOPE = "signed_envelope"
    ENCRYPTED_PAYLOAD = "encrypted_payload"
    ENCRYPTED_FORWARD = "encrypted_forward"
    MEDIATOR_SEND = "mediator_send"
    MEDIATOR_ACK = "mediator_ack"
    TRUST_PING = "trust_ping"
    TRUST_PONG = "trust_pong"
    MESSAGE_PICKUP = "message_pickup"
    MESSAGE_DELIVERY = "message_delivery"


class PacketDirection(str, Enum):
    """Direction of a packet relative to this server."""

    OUTBOUND = "outbound"
    INBOUND = "inbound"


# (badge label, colour class) per step. Observers key rendering off these.
STEP_DISPLAY: dict[PacketStep, tuple[str, str]] = {
    PacketStep.PLAINTEXT_MESSAGE: ("① Plaintext Message", "blue"),
    PacketStep.SIGNED_ENVELOPE: ("② Signed Envelope", "yellow"),
    PacketStep.ENCRYPTED_PAYLOAD: ("③ Encrypted Payload", "red"),
    PacketStep.ENCRYPTED_FORWARD: ("④ Forward Envelope", "red"),
    PacketStep.MEDIATOR_SEND: ("⑤ Mediator Send", "orange"),
    PacketStep.MEDIATOR_ACK: ("⑤ Mediator ACK", "green"),
    PacketStep.TRUST_PING: ("① Trust Ping", "purple"),
    PacketStep.TRUST_PONG: ("② Trust Pong", "purple"),
    PacketStep.MESSAGE_PICKUP: ("⑥ Message Pickup", "green"),
    PacketStep.MESSAGE_DELIVERY: ("⑥ Message Delivery", "green"),
}


def step_label(step: PacketStep) -> str:
    """Human-readable badge label for a step."""
    return STEP_DISPLAY[PacketStep(step)][0]


def step_color(step: PacketStep) -> str:
    """Colour class hint for a step."""
    return STEP_DISPLAY[PacketStep(step)][1]


def _new_event_id() -> str:
    return str(uuid.uuid4())


def _now_rfc3339() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class PacketEvent:
    """
    A single wire-level step of a DIDComm exchange.

    Records are immutable. Aliases are attached with ``with_aliases``,
    which returns a copy; the copy keeps the original ``id`` and
    ``timestamp``.
    """

    direction: PacketDirection
    from_: str
    to: str
    step: PacketStep
    payload: Any
    correlation_id: str | None = None
    from_alias: str | None = None
    to_alias: str | None = None
    id: str = field(default_factory=_new_event_id)
    timestamp: str = field(default_factory=_now_rfc3339)

    @property
    def label(self) -> str:
        return step_label(self.step)

    @property
    def color(self) -> str:
        return step_color(self.step)

    def with_aliases(self, from_alias: str, to_alias: str) -> "PacketEvent":
        """Return a copy carrying human-readable aliases for from/to."""
        return replace(self, from_alias=from_alias, to_alias=to_alias)

    def to_dict(self) -> dict[str, Any]:
        """Wire form pushed to observers."""
        data: dict[str, Any] = {
            "id": self.id,
            "timestamp": self.timestamp,
            "direction": PacketDirection(self.direction).value,
            "from": self.from_,
            "to": self.to,
        }
        if self.from_alias is not None:
            data["from_alias"] = self.from_alias
        if self.to_alias is not None:
            data["to_alias"] = self.to_alias
        data.update(
            {
                "step": PacketStep(self.step).value,
                "label": self.label,
                "color": self.color,
                "raw_json": self.payload,
                "correlation_id": self.correlation_id,
            }
        )
        return data


def reset_event() -> PacketEvent:
    """Ambient event telling observers to clear their view."""
    return PacketEvent(
        direction=PacketDirection.OUTBOUND,
        from_="system",
        to="all",
        step=PacketStep.PLAINTEXT_MESSAGE,
        payload={"action": "reset"},
    )
