"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent
LOGS_DIR = PROJECT_ROOT / "logs"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"
DEFAULT_ENVIRONMENTS_PATH = PROJECT_ROOT / "environments.json"

# Packet pipeline tunables
PACKET_BUS_CAPACITY = 256
KEEPALIVE_INTERVAL_SECONDS = 15.0
PONG_TIMEOUT_SECONDS = 10.0
MESSAGE_TTL_SECONDS = 300
FETCH_LIMIT = 50

DEFAULT_API_HOST = "0.0.0.0"
DEFAULT_API_PORT = 3000
DEFAULT_ENVIRONMENT = "default"
DEFAULT_CORS_ORIGINS = "*"


PathLike = Union[str, Path]


def resolve_environments_path(env_value: PathLike | None = None) -> Path:
    """Resolve ENVIRONMENTS_PATH to an absolute path."""
    if not env_value:
        return DEFAULT_ENVIRONMENTS_PATH

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def parse_cors_origins(value: str | None) -> list[str]:
    """Split a comma-separated CORS_ORIGINS value."""
    if not value or value.strip() == DEFAULT_CORS_ORIGINS:
        return [DEFAULT_CORS_ORIGINS]
    return [origin.strip() for origin in value.split(",") if origin.strip()]


@dataclass
class Settings:
    """Runtime settings read from the environment."""

    api_host: str = DEFAULT_API_HOST
    api_port: int = DEFAULT_API_PORT
    environment_name: str = DEFAULT_ENVIRONMENT
    environments_path: Path = DEFAULT_ENVIRONMENTS_PATH
    cors_origins: list[str] = field(default_factory=lambda: [DEFAULT_CORS_ORIGINS])
    pong_timeout: float = PONG_TIMEOUT_SECONDS
    packet_bus_capacity: int = PACKET_BUS_CAPACITY
    keepalive_interval: float = KEEPALIVE_INTERVAL_SECONDS

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        port = os.getenv("API_PORT") or os.getenv("PORT") or str(DEFAULT_API_PORT)
        return cls(
            api_host=os.getenv("API_HOST", DEFAULT_API_HOST),
            api_port=int(port),
            environment_name=os.getenv("TDK_ENVIRONMENT", DEFAULT_ENVIRONMENT),
            environments_path=resolve_environments_path(os.getenv("ENVIRONMENTS_PATH")),
            cors_origins=parse_cors_origins(os.getenv("CORS_ORIGINS")),
            pong_timeout=float(os.getenv("PONG_TIMEOUT", str(PONG_TIMEOUT_SECONDS))),
            packet_bus_capacity=int(os.getenv("PACKET_BUS_CAPACITY", str(PACKET_BUS_CAPACITY))),
            keepalive_interval=float(
                os.getenv("KEEPALIVE_INTERVAL", str(KEEPALIVE_INTERVAL_SECONDS))
            ),
        )
