"""Live packet stream and reset routes."""

from fastapi import APIRouter
from sse_starlette.sse import EventSourceResponse

from ...app import IApplication
from ...streaming import LiveStream
from ..schemas import StatusResponse

# LiveStream sends its own keep-alive comments
LIBRARY_PING_SECONDS = 24 * 60 * 60


def create_packets_router(app: IApplication) -> APIRouter:
    """Create packets router."""
    router = APIRouter(prefix="/api", tags=["packets"])

    @router.get("/packets/stream")
    async def packet_stream() -> EventSourceResponse:
        """Subscribe to packet events via SSE."""
        context = app.context
        stream = LiveStream(
            context.bus, keepalive_interval=context.settings.keepalive_interval
        )
        return EventSourceResponse(stream, ping=LIBRARY_PING_SECONDS)

    @router.post("/reset", response_model=StatusResponse)
    async def reset_demo() -> dict:
        """Tell every connected observer to clear its view."""
        await app.reset()
        return {"status": "reset"}

    return router
