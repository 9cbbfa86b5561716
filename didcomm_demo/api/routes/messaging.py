"""Messaging API routes: send, trust-ping, stored messages."""

from fastapi import APIRouter

from ...app import IApplication
from ...config import FETCH_LIMIT
from ...flows import FlowError, ValidationError, send_message, trust_ping
from ...logging_config import get_logger
from ...messaging import MessagingError
from ...models import PacketEvent
from ..errors import ApiError
from ..schemas import (
    FlowResponse,
    PingRequest,
    SendMessageRequest,
    StoredMessagesResponse,
)

logger = get_logger(__name__)


def _pong_status(events: list[PacketEvent]) -> str:
    payload = events[-1].payload if events else None
    if isinstance(payload, dict):
        if payload.get("status") == "timeout":
            return "pong_timeout"
        if "error" in payload:
            return "pong_error"
    return "pong_received"


def _flow_response(status: str, events: list[PacketEvent]) -> dict:
    return {
        "status": status,
        "events_count": len(events),
        "correlation_id": events[0].correlation_id if events else None,
    }


def create_messaging_router(app: IApplication) -> APIRouter:
    """Create messaging router."""
    router = APIRouter(prefix="/api", tags=["messaging"])

    @router.post("/messages/send", response_model=FlowResponse)
    async def post_send_message(request: SendMessageRequest) -> dict:
        """Run the annotated send-message flow."""
        try:
            events = await send_message(
                app.context, request.from_, request.to, request.body
            )
        except ValidationError as e:
            raise ApiError.from_error(400, e)
        except FlowError as e:
            logger.error("send_message error: %s", e)
            raise ApiError.from_error(500, e)
        return _flow_response("delivered", events)

    @router.post("/ping", response_model=FlowResponse)
    async def post_ping(request: PingRequest) -> dict:
        """Run the trust-ping flow."""
        try:
            events = await trust_ping(app.context, request.from_, request.to)
        except ValidationError as e:
            raise ApiError.from_error(400, e)
        except FlowError as e:
            logger.error("trust_ping error: %s", e)
            raise ApiError.from_error(500, e)
        return _flow_response(_pong_status(events), events)

    @router.get("/messages/{alias}", response_model=StoredMessagesResponse)
    async def get_stored_messages(alias: str) -> dict:
        """Messages the mediator holds for a participant (not deleted)."""
        participant = app.context.identities.get(alias)
        if participant is None:
            raise ApiError(400, f"Unknown alias: {alias}", category="validation")
        try:
            stored = await app.context.messaging.fetch_messages(
                participant.profile, FETCH_LIMIT
            )
        except MessagingError as e:
            logger.error("fetch_messages error: %s", e)
            raise ApiError(500, str(e), "fetch_messages", category="collaborator")
        return {"messages": [{"msg_id": m.msg_id, "msg": m.msg} for m in stored]}

    return router
