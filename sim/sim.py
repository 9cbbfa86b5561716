"""SIM implementation - scripted Alice/Bob conversation over the HTTP API."""

import asyncio
import random
from typing import Protocol

import httpx

from didcomm_demo.logging_config import get_logger

logger = get_logger(__name__)

# (kind, from, to, body)
SCENARIO: list[tuple[str, str, str, str | None]] = [
    ("ping", "alice", "mediator", None),
    ("send", "alice", "bob", "Hi Bob, are you on the mediator yet?"),
    ("send", "bob", "alice", "Hey Alice! Yes, just connected."),
    ("ping", "bob", "alice", None),
    ("send", "alice", "bob", "Great, sending you the document next."),
    ("send", "bob", "alice", "Got it, thanks!"),
]


class ISim(Protocol):
    """Generate demo traffic against the running API."""

    async def start(self) -> None:
        """Start the scripted scenario."""
        ...

    async def stop(self) -> None:
        """Stop the scenario."""
        ...


class Sim:
    """SIM with a hardcoded Alice/Bob scenario."""

    def __init__(
        self,
        api_url: str = "http://localhost:3000",
        min_delay: float = 1.0,
        max_delay: float = 3.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._api_url = api_url
        self._min_delay = min_delay
        self._max_delay = max_delay
        self._running = False
        self._task: asyncio.Task | None = None
        self._client = client
        self._owns_client = client is None
        self.completed: list[dict] = []

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the scripted scenario."""
        if self._running:
            return

        self._running = True
        self.completed = []
        if self._client is None:
            self._client = httpx.AsyncClient()

        self._task = asyncio.create_task(self._run_scenario())

    async def stop(self) -> None:
        """Stop the scenario."""
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def wait(self) -> None:
        """Wait for the scenario to finish on its own."""
        if self._task:
            await self._task

    async def _run_scenario(self) -> None:
        """Run the hardcoded scenario once."""
        try:
            for kind, from_alias, to_alias, body in SCENARIO:
                if not self._running:
                    break

                if kind == "send":
                    await self._post(
                        "/api/messages/send",
                        {"from": from_alias, "to": to_alias, "body": body},
                    )
                else:
                    await self._post("/api/ping", {"from": from_alias, "to": to_alias})

                await asyncio.sleep(random.uniform(self._min_delay, self._max_delay))

        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error("SIM scenario error: %s", e)
        finally:
            self._running = False

    async def _post(self, path: str, payload: dict) -> None:
        """Trigger one flow via HTTP API."""
        if not self._client:
            return

        try:
            response = await self._client.post(
                f"{self._api_url}{path}",
                json=payload,
                timeout=30.0,
            )
        except httpx.HTTPError as e:
            logger.error("SIM: Failed to call %s: %s", path, e)
            return

        if response.status_code == 200:
            data = response.json()
            self.completed.append(data)
            logger.info(
                "SIM: %s -> %s %s (%s events)",
                payload["from"],
                payload["to"],
                data.get("status"),
                data.get("events_count"),
            )
        else:
            logger.error("SIM: %s returned %s: %s", path, response.status_code, response.text)
