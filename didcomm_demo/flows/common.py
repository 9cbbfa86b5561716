"""Endpoint resolution and event emission shared by both flows."""

import uuid
from dataclasses import dataclass
from typing import Any

from ..context import AppContext
from ..logging_config import get_logger, log_context
from ..models import PacketDirection, PacketEvent, PacketStep, Participant
from .errors import ValidationError

logger = get_logger(__name__)

MEDIATOR = "mediator"


@dataclass(frozen=True)
class Endpoints:
    """Resolved sender and target of one flow run."""

    sender: Participant
    target_alias: str
    target_did: str
    # None when the target is the sender's mediator
    recipient: Participant | None

    @property
    def sender_alias(self) -> str:
        return self.sender.alias

    @property
    def relay_did(self) -> str:
        """Mediator the recipient picks up from."""
        if self.recipient is None:
            return self.target_did
        return self.recipient.mediator_did


def resolve_endpoints(
    ctx: AppContext, from_alias: str, to_alias: str, allow_mediator: bool = False
) -> Endpoints:
    """Map aliases to participants. Never touches the messaging client."""
    sender = ctx.identities.get(from_alias or "")
    if sender is None:
        raise ValidationError(f"Unknown sender: {from_alias}")

    target_key = (to_alias or "").strip().lower()
    if allow_mediator and target_key == MEDIATOR:
        if not sender.mediator_did:
            raise ValidationError(f"{sender.info.alias} has no mediator")
        return Endpoints(
            sender=sender,
            target_alias=MEDIATOR,
            target_did=sender.mediator_did,
            recipient=None,
        )

    recipient = ctx.identities.get(target_key)
    # Messaging yourself is allowed, pinging yourself is not.
    if recipient is None or (allow_mediator and recipient.alias == sender.alias):
        label = "ping target" if allow_mediator else "recipient"
        raise ValidationError(f"Unknown {label}: {to_alias}")

    return Endpoints(
        sender=sender,
        target_alias=recipient.alias,
        target_did=recipient.did,
        recipient=recipient,
    )


class PacketTrail:
    """The events of one flow run, all sharing one correlation id."""

    def __init__(self, ctx: AppContext):
        self._ctx = ctx
        self.correlation_id = str(uuid.uuid4())
        self.events: list[PacketEvent] = []

    @property
    def log_extra(self) -> dict:
        return log_context(correlation_id=self.correlation_id)

    def record(
        self,
        direction: PacketDirection,
        from_: str,
        to: str,
        step: PacketStep,
        payload: Any,
        aliases: tuple[str, str],
    ) -> PacketEvent:
        """Build the step's event, publish it, and append it to the trail."""
        event = PacketEvent(
            direction=direction,
            from_=from_,
            to=to,
            step=step,
            payload=payload,
            correlation_id=self.correlation_id,
        ).with_aliases(*aliases)
        receivers = self._ctx.bus.publish(event)
        self.events.append(event)
        logger.debug("%s published to %d observers", step.value, receivers, extra=self.log_extra)
        return event
