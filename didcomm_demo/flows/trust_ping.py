"""Trust-ping flow: ping a peer or mediator and capture the pong."""

from typing import Any

from ..context import AppContext
from ..logging_config import get_logger
from ..messaging import MessagingError
from ..models import PacketDirection, PacketEvent, PacketStep
from .common import MEDIATOR, PacketTrail, resolve_endpoints
from .errors import FlowError

logger = get_logger(__name__)

PING_TYPE = "https://didcomm.org/trust-ping/2.0/ping"


async def trust_ping(
    ctx: AppContext,
    from_alias: str,
    to_alias: str,
    timeout: float | None = None,
) -> list[PacketEvent]:
    """
    Send a trust-ping from ``from_alias`` to ``to_alias`` and wait for the pong.

    ``to_alias`` may be the other party or ``"mediator"``. The flow always
    ends with a trust_pong event: the pong itself, ``{"status": "timeout"}``
    when none arrives within ``timeout`` seconds, or ``{"error": ...}`` when
    pickup fails. Only a failed ping send raises FlowError.
    """
    endpoints = resolve_endpoints(ctx, from_alias, to_alias, allow_mediator=True)
    if timeout is None:
        timeout = ctx.settings.pong_timeout

    sender = endpoints.sender
    sender_alias = endpoints.sender_alias
    target_alias = endpoints.target_alias
    target_did = endpoints.target_did
    client = ctx.messaging
    trail = PacketTrail(ctx)

    # Step 1: ping
    trail.record(
        PacketDirection.OUTBOUND,
        sender.did,
        target_did,
        PacketStep.TRUST_PING,
        {
            "type": PING_TYPE,
            "from": sender.did,
            "to": target_did,
            "body": {"response_requested": True},
        },
        (sender_alias, target_alias),
    )

    try:
        ack = await client.send_ping(sender.profile, target_did)
    except MessagingError as e:
        logger.error("send_ping failed: %s", e, extra=trail.log_extra)
        raise FlowError(f"send_ping failed: {e}", PacketStep.TRUST_PING.value) from e

    logger.info(
        "%s -> %s PING sent (hash: %s)",
        sender_alias,
        target_alias,
        ack.message_hash,
        extra=trail.log_extra,
    )
    trail.record(
        PacketDirection.INBOUND,
        MEDIATOR,
        sender.did,
        PacketStep.MEDIATOR_ACK,
        {"message_hash": ack.message_hash, "message_id": ack.message_id},
        (MEDIATOR, sender_alias),
    )

    # Step 2: pong over the live stream
    try:
        pong = await client.await_next(sender.profile, ack.message_id, timeout)
    except MessagingError as e:
        logger.error("Pong pickup failed: %s", e, extra=trail.log_extra)
        payload: Any = {"error": str(e)}
    else:
        if pong is None:
            logger.debug("No pong received within %.1fs", timeout, extra=trail.log_extra)
            payload = {"status": "timeout"}
        else:
            logger.info(
                "%s <- %s PONG received", sender_alias, target_alias, extra=trail.log_extra
            )
            payload = pong.to_dict()

    trail.record(
        PacketDirection.INBOUND,
        target_did,
        sender.did,
        PacketStep.TRUST_PONG,
        payload,
        (target_alias, sender_alias),
    )

    return trail.events
