"""Tests for Application."""

import json

import pytest

from didcomm_demo.app import Application
from didcomm_demo.config import Settings
from didcomm_demo.identity import IdentityConfigError
from didcomm_demo.messaging import LoopbackMediator


class TestApplicationStart:
    """Tests for Application.start()."""

    @pytest.mark.asyncio
    async def test_start_initializes_components(self, application):
        """Test that start wires the shared context."""
        context = application.context

        assert context.bus is application.bus
        assert context.identities is application.identities
        assert isinstance(context.messaging, LoopbackMediator)
        assert context.settings is application.settings

    @pytest.mark.asyncio
    async def test_start_uses_given_client(self, settings):
        """Test that an injected messaging client is used."""
        client = LoopbackMediator(mediator_did="did:web:example:mediator")
        app = Application(settings=settings, messaging=client)
        await app.start()

        assert app.context.messaging is client
        await app.stop()

    @pytest.mark.asyncio
    async def test_start_reads_environments(self, tmp_path):
        """Test identities come from environments.json when present."""
        path = tmp_path / "environments.json"
        path.write_text(
            json.dumps(
                {
                    "local": {
                        "profiles": {
                            "Alice": {"did": "did:peer:2.a", "mediator": "did:web:m"},
                            "Bob": {"did": "did:peer:2.b", "mediator": "did:web:m"},
                        }
                    }
                }
            ),
            encoding="utf-8",
        )
        app = Application(Settings(environments_path=path, environment_name="local"))
        await app.start()

        assert app.identities.get("alice").did == "did:peer:2.a"
        await app.stop()

    @pytest.mark.asyncio
    async def test_start_fails_on_bad_environments(self, tmp_path):
        """Test that a broken environments.json stops startup."""
        path = tmp_path / "environments.json"
        path.write_text("[", encoding="utf-8")
        app = Application(Settings(environments_path=path))

        with pytest.raises(IdentityConfigError):
            await app.start()

    @pytest.mark.asyncio
    async def test_capacity_from_settings(self, tmp_path):
        """Test subscription buffers use the configured capacity."""
        app = Application(
            Settings(environments_path=tmp_path / "none.json", packet_bus_capacity=8)
        )
        await app.start()

        assert app.bus.subscribe().capacity == 8
        await app.stop()


class TestApplicationStop:
    """Tests for Application.stop()."""

    @pytest.mark.asyncio
    async def test_stop_closes_subscriptions(self, settings):
        """Test that stop ends every open subscription."""
        app = Application(settings=settings)
        await app.start()
        subscription = app.bus.subscribe()

        await app.stop()

        assert subscription.closed
        with pytest.raises(RuntimeError, match="not started"):
            _ = app.context


class TestApplicationReset:
    """Tests for Application.reset()."""

    @pytest.mark.asyncio
    async def test_reset_publishes_signal(self, application):
        """Test reset publishes exactly one reset event."""
        subscription = application.bus.subscribe()

        event = await application.reset()

        assert subscription.pending() == 1
        assert await subscription.recv() is event
        assert event.payload == {"action": "reset"}


class TestApplicationProperties:
    """Tests for Application properties."""

    @pytest.mark.parametrize("name", ["context", "bus", "identities"])
    def test_property_raises_when_not_started(self, settings, name):
        """Test that component properties raise before start."""
        app = Application(settings=settings)

        with pytest.raises(RuntimeError, match="not started"):
            getattr(app, name)


class TestSettings:
    """Tests for Settings.from_env()."""

    def test_defaults(self, monkeypatch):
        """Test defaults with an empty environment."""
        for name in (
            "API_HOST",
            "API_PORT",
            "PORT",
            "TDK_ENVIRONMENT",
            "CORS_ORIGINS",
            "PONG_TIMEOUT",
            "PACKET_BUS_CAPACITY",
            "KEEPALIVE_INTERVAL",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = Settings.from_env()

        assert settings.api_port == 3000
        assert settings.environment_name == "default"
        assert settings.cors_origins == ["*"]
        assert settings.pong_timeout == 10.0
        assert settings.packet_bus_capacity == 256
        assert settings.keepalive_interval == 15.0

    def test_overrides(self, monkeypatch):
        """Test environment overrides."""
        monkeypatch.delenv("API_PORT", raising=False)
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
        monkeypatch.setenv("PONG_TIMEOUT", "2.5")
        monkeypatch.setenv("PACKET_BUS_CAPACITY", "32")
        monkeypatch.setenv("KEEPALIVE_INTERVAL", "5")

        settings = Settings.from_env()

        assert settings.api_port == 8080
        assert settings.cors_origins == ["http://a.test", "http://b.test"]
        assert settings.pong_timeout == 2.5
        assert settings.packet_bus_capacity == 32
        assert settings.keepalive_interval == 5.0
