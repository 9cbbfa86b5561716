"""FastAPI application setup."""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..app import Application
from .errors import ApiError, api_error_handler
from .routes import (
    create_control_router,
    create_identities_router,
    create_messaging_router,
    create_packets_router,
)


def create_fastapi_app(
    application: Application | None = None,
    sim: Any = None,
) -> FastAPI:
    """Create and configure FastAPI application."""
    application = application or Application()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan."""
        await application.start()
        yield
        if sim is not None:
            await sim.stop()
        await application.stop()

    fastapi_app = FastAPI(
        title="DIDComm Demo API",
        description="Annotated DIDComm exchange between Alice and Bob",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.state.application = application

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=application.settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    fastapi_app.add_exception_handler(ApiError, api_error_handler)

    fastapi_app.include_router(create_identities_router(application))
    fastapi_app.include_router(create_messaging_router(application))
    fastapi_app.include_router(create_packets_router(application))
    fastapi_app.include_router(create_control_router(sim))

    return fastapi_app
