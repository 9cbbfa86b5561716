"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import httpx
import pytest
import pytest_asyncio

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def settings(tmp_path):
    """Settings with short timeouts and no environments.json."""
    from didcomm_demo.config import Settings

    return Settings(
        environments_path=tmp_path / "environments.json",
        pong_timeout=0.2,
        keepalive_interval=0.05,
    )


@pytest.fixture
def bus():
    """Create an empty packet bus."""
    from didcomm_demo.event_bus import PacketBus

    return PacketBus()


@pytest_asyncio.fixture
async def mediator():
    """Create loopback mediator."""
    from didcomm_demo.messaging import LoopbackMediator

    m = LoopbackMediator()
    yield m
    await m.close()


@pytest_asyncio.fixture
async def identities(mediator):
    """Alice and Bob registered on the loopback mediator."""
    from didcomm_demo.identity import LOOPBACK_IDENTITIES, IdentityRegistry

    return await IdentityRegistry.bootstrap(mediator, dict(LOOPBACK_IDENTITIES))


@pytest.fixture
def context(bus, mediator, identities, settings):
    """Shared context wired to the loopback mediator."""
    from didcomm_demo.context import AppContext

    return AppContext(
        bus=bus,
        messaging=mediator,
        identities=identities,
        settings=settings,
    )


@pytest_asyncio.fixture
async def application(settings):
    """Started application."""
    from didcomm_demo.app import Application

    app = Application(settings=settings)
    await app.start()
    yield app
    await app.stop()


@pytest_asyncio.fixture
async def api_client(application):
    """HTTP client talking to the FastAPI app in-process."""
    from didcomm_demo.api import create_fastapi_app

    fastapi_app = create_fastapi_app(application)
    transport = httpx.ASGITransport(app=fastapi_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
