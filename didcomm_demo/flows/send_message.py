"""Annotated send-message flow: sender -> mediator -> recipient.

Each wire-level step is published as a PacketEvent so observers can
inspect exactly what went over the wire.
"""

import json
import time
from dataclasses import asdict
from typing import Any

from ..config import MESSAGE_TTL_SECONDS
from ..context import AppContext
from ..logging_config import get_logger
from ..messaging import MessagingError
from ..models import PacketDirection, PacketEvent, PacketStep
from .common import MEDIATOR, PacketTrail, resolve_endpoints
from .errors import FlowError, ValidationError

logger = get_logger(__name__)

BASIC_MESSAGE_TYPE = "https://didcomm.org/basicmessage/2.0/message"


def _as_json(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        return {"raw": text}


async def send_message(
    ctx: AppContext, from_alias: str, to_alias: str, body: str
) -> list[PacketEvent]:
    """
    Send a basic message and return the events emitted, in order.

    Steps: plaintext_message, encrypted_payload, encrypted_forward,
    mediator_send, mediator_ack, message_delivery. The flow ends once the
    mediator has stored the message; delivery to the recipient happens
    over its live stream and is not awaited here.

    Raises:
        ValidationError: empty body or unknown alias. Nothing is published.
        FlowError: a messaging call failed. Events already published stay
            published; ``step`` names the step that failed.
    """
    if not body or not body.strip():
        raise ValidationError("body cannot be empty")
    endpoints = resolve_endpoints(ctx, from_alias, to_alias)

    sender = endpoints.sender
    recipient = endpoints.recipient
    sender_alias = endpoints.sender_alias
    recipient_alias = endpoints.target_alias
    client = ctx.messaging
    trail = PacketTrail(ctx)

    # Step 1: plaintext message
    now = int(time.time())
    try:
        message = await client.declare_intent(
            BASIC_MESSAGE_TYPE,
            recipient.did,
            sender.did,
            {"content": body},
            now,
            MESSAGE_TTL_SECONDS,
        )
    except MessagingError as e:
        logger.error("declare_intent failed: %s", e, extra=trail.log_extra)
        raise FlowError(f"declare_intent failed: {e}", PacketStep.PLAINTEXT_MESSAGE.value) from e

    trail.record(
        PacketDirection.OUTBOUND,
        sender.did,
        recipient.did,
        PacketStep.PLAINTEXT_MESSAGE,
        message.to_dict(),
        (sender_alias, recipient_alias),
    )
    logger.debug(
        "%s -> %s plaintext %s", sender_alias, recipient_alias, message.id, extra=trail.log_extra
    )

    # Step 2: encrypt and sign for the recipient
    try:
        packed = await client.pack(message, recipient.did, sender.did, sender.did)
    except MessagingError as e:
        logger.error("pack failed: %s", e, extra=trail.log_extra)
        raise FlowError(f"pack_encrypted failed: {e}", PacketStep.ENCRYPTED_PAYLOAD.value) from e

    trail.record(
        PacketDirection.OUTBOUND,
        sender.did,
        recipient.did,
        PacketStep.ENCRYPTED_PAYLOAD,
        _as_json(packed),
        (sender_alias, recipient_alias),
    )
    logger.debug(
        "Encrypted payload for %s: %d bytes", recipient_alias, len(packed), extra=trail.log_extra
    )

    # Step 3: forward envelope addressed to the recipient's mediator
    try:
        _forward_id, forward = await client.wrap_for_relay(
            sender.profile, packed, endpoints.relay_did, recipient.did
        )
    except MessagingError as e:
        logger.error("wrap_for_relay failed: %s", e, extra=trail.log_extra)
        raise FlowError(f"forward_message failed: {e}", PacketStep.ENCRYPTED_FORWARD.value) from e

    trail.record(
        PacketDirection.OUTBOUND,
        sender.did,
        endpoints.relay_did,
        PacketStep.ENCRYPTED_FORWARD,
        _as_json(forward),
        (sender_alias, MEDIATOR),
    )

    # Step 4: hand the envelope to the mediator
    trail.record(
        PacketDirection.OUTBOUND,
        sender.did,
        MEDIATOR,
        PacketStep.MEDIATOR_SEND,
        {"msg_id": message.id, "size_bytes": len(forward.encode("utf-8"))},
        (sender_alias, MEDIATOR),
    )

    # Step 5: mediator acknowledgement
    try:
        ack = await client.dispatch(sender.profile, forward, message.id)
    except MessagingError as e:
        logger.error("send_message failed: %s", e, extra=trail.log_extra)
        raise FlowError(f"send_message failed: {e}", PacketStep.MEDIATOR_ACK.value) from e

    trail.record(
        PacketDirection.INBOUND,
        MEDIATOR,
        sender.did,
        PacketStep.MEDIATOR_ACK,
        {"status": "stored", "response": asdict(ack)},
        (MEDIATOR, sender_alias),
    )
    logger.info("%s sent message %s to mediator", sender_alias, message.id, extra=trail.log_extra)

    # Step 6: stored by the mediator, the recipient's live stream delivers it
    trail.record(
        PacketDirection.INBOUND,
        MEDIATOR,
        recipient.did,
        PacketStep.MESSAGE_DELIVERY,
        {
            "msg_id": message.id,
            "status": "delivered",
            "detail": "Stored by mediator, will be delivered via live stream",
            "body": message.body,
        },
        (sender_alias, recipient_alias),
    )
    logger.info(
        "%s -> %s: message %s delivered to mediator",
        sender_alias,
        recipient_alias,
        message.id,
        extra=trail.log_extra,
    )

    return trail.events
