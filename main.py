"""Main entry point for the DIDComm demo server."""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from didcomm_demo.api import create_fastapi_app
from didcomm_demo.app import Application
from didcomm_demo.config import Settings
from didcomm_demo.logging_config import get_logger, setup_logging
from sim import Sim


def main():
    """Run the application."""
    project_root = Path(__file__).resolve().parent
    load_dotenv(project_root / ".env")
    setup_logging()
    logger = get_logger(__name__)

    settings = Settings.from_env()
    api_host = "localhost" if settings.api_host == "0.0.0.0" else settings.api_host
    api_url = f"http://{api_host}:{settings.api_port}"

    sim = Sim(api_url=api_url)
    app = create_fastapi_app(Application(settings), sim=sim)

    logger.info("Server listening on %s", api_url)
    logger.info("SSE stream: %s/api/packets/stream", api_url)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
