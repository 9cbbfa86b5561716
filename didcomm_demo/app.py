"""Application bootstrap and lifecycle management."""

from typing import Protocol

from .config import Settings
from .context import AppContext
from .event_bus import PacketBus
from .identity import IdentityRegistry, load_identities
from .logging_config import get_logger
from .messaging import IMessagingClient, LoopbackMediator
from .models import PacketEvent, reset_event

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    async def reset(self) -> PacketEvent:
        """Tell every observer to clear its view."""
        ...

    @property
    def context(self) -> AppContext:
        """Shared context for flows and routes."""
        ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        settings: Settings | None = None,
        messaging: IMessagingClient | None = None,
    ):
        self._settings = settings or Settings.from_env()
        self._messaging: IMessagingClient | None = messaging

        # Components (will be initialized in start())
        self._bus: PacketBus | None = None
        self._identities: IdentityRegistry | None = None
        self._context: AppContext | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Packet bus (no dependencies)
        self._bus = PacketBus(capacity=self._settings.packet_bus_capacity)
        logger.info("Packet bus initialized")

        # 2. Messaging client
        if self._messaging is None:
            self._messaging = LoopbackMediator()
            logger.info("Using loopback mediator")

        # 3. Identities (depends on messaging client for profiles, ACLs, live streams)
        identities = load_identities(
            self._settings.environments_path, self._settings.environment_name
        )
        self._identities = await IdentityRegistry.bootstrap(self._messaging, identities)
        logger.info("Identities ready: %s", ", ".join(self._identities.aliases()))

        self._context = AppContext(
            bus=self._bus,
            messaging=self._messaging,
            identities=self._identities,
            settings=self._settings,
        )
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._bus:
            self._bus.close()
            logger.info("Packet bus closed")
        if self._messaging:
            await self._messaging.close()
            logger.info("Messaging client closed")
        self._context = None

    async def reset(self) -> PacketEvent:
        """Publish the reset signal to every observer."""
        event = reset_event()
        receivers = self.context.bus.publish(event)
        logger.info("Reset signal sent to %d observers", receivers)
        return event

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def context(self) -> AppContext:
        """Get the shared context."""
        if not self._context:
            raise RuntimeError("Application not started")
        return self._context

    @property
    def bus(self) -> PacketBus:
        """Get packet bus instance."""
        if not self._bus:
            raise RuntimeError("Application not started")
        return self._bus

    @property
    def identities(self) -> IdentityRegistry:
        """Get identity registry."""
        if not self._identities:
            raise RuntimeError("Application not started")
        return self._identities
