"""Command-line entry point that serves the ingest app with uvicorn.

Run with:
    debugsink
    PORT=8080 debugsink

Endpoints:
    /analytics      - POST any JSON object; printed as-is
    /observability  - POST a structured log or an OTLP span export
"""

import logging

import uvicorn

from debugsink.adapters.console import StdoutConsole
from debugsink.adapters.frameworks.asgi import (
    ANALYTICS_PATH,
    OBSERVABILITY_PATH,
    ASGIApp,
    create_asgi_app,
)
from debugsink.adapters.logging import configure_logging
from debugsink.config import Settings, get_settings

logger = logging.getLogger(__name__)


def build_app(settings: Settings) -> ASGIApp:
    """Wire the console sink and logging, then create the ASGI app."""
    console = StdoutConsole()
    configure_logging(console, settings.log_level)
    return create_asgi_app(console)


def main() -> None:
    settings = get_settings()
    app = build_app(settings)

    logger.info("Starting debug sink server on port %d...", settings.port)
    for path in (ANALYTICS_PATH, OBSERVABILITY_PATH):
        logger.info("Send events to http://localhost:%d%s", settings.port, path)

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        lifespan="off",
    )


if __name__ == "__main__":
    main()
