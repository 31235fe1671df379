"""Shared test fixtures for all test modules."""

import logging
from collections.abc import AsyncGenerator, Generator
from typing import Any

import httpx
import pytest

from debugsink.adapters.console import InMemoryConsole
from debugsink.adapters.frameworks.asgi import Receive, Scope, create_asgi_app
from debugsink.adapters.logging import ROOT_LOGGER_NAME, configure_logging


@pytest.fixture
def console() -> InMemoryConsole:
    """Fixture providing an empty in-memory console."""
    return InMemoryConsole()


@pytest.fixture
def log_console() -> Generator[InMemoryConsole]:
    """Capture debugsink process logs in a separate in-memory console.

    Restores the logger configuration afterwards so tests stay isolated.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    saved = (list(logger.handlers), logger.level, logger.propagate)
    sink = InMemoryConsole()
    configure_logging(sink, "DEBUG")
    yield sink
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


# === ASGI Test Fixtures ===


@pytest.fixture
def asgi_scope():
    """Factory fixture for creating ASGI scope dicts.

    Used in tests to create scope dicts with customizable method/path/headers.
    """

    def _scope(
        method: str = "POST",
        path: str = "/observability",
        headers: dict[str, str] | None = None,
    ) -> Scope:
        return {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": b"",
            "client": ("127.0.0.1", 54321),
            "headers": [
                (k.lower().encode(), v.encode()) for k, v in (headers or {}).items()
            ],
        }

    return _scope


@pytest.fixture
def asgi_receive():
    """Factory fixture that replays a list of ASGI receive messages."""

    def _receive(*messages: dict[str, Any]) -> Receive:
        queue = list(messages)

        async def receive() -> dict[str, Any]:
            return queue.pop(0)

        return receive

    return _receive


@pytest.fixture
def asgi_send_capture():
    """Fixture that returns a send callable and a responses list for capture.

    Returns a tuple of (send_func, responses_list) for recording ASGI messages.
    """

    responses: list[dict[str, object]] = []

    async def send(message: dict[str, object]) -> None:
        """Capture ASGI messages."""
        responses.append(message)

    return send, responses


@pytest.fixture
def asgi_test_client():
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Usage:
        async def test_something(asgi_test_client, console):
            app = create_asgi_app(console)
            async with asgi_test_client(app) as client:
                response = await client.post("/analytics", json={})
    """

    def _get_client(app):
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client


@pytest.fixture
async def sink_client(
    console: InMemoryConsole, asgi_test_client
) -> AsyncGenerator[tuple[httpx.AsyncClient, InMemoryConsole]]:
    """Fixture combining an in-memory console and an ASGI test client.

    Usage:
        async def test_something(sink_client):
            client, console = sink_client
            response = await client.post("/observability", json={...})
    """
    app = create_asgi_app(console)
    async with asgi_test_client(app) as client:
        yield client, console


# === Payload Fixtures ===


@pytest.fixture
def structured_log_body() -> dict[str, Any]:
    """Minimal structured log body with only the required fields."""
    return {
        "type": "structured_log",
        "timestamp": "t",
        "level": "info",
        "message": "m",
        "service": "s",
    }


@pytest.fixture
def span_bundle_body() -> dict[str, Any]:
    """OTLP span export with one resource, one scope and two spans."""
    return {
        "resourceSpans": [
            {
                "resource": {
                    "attributes": [
                        {"key": "service.name", "value": {"stringValue": "checkout"}},
                        {"key": "process.pid", "value": {"intValue": 4242}},
                    ],
                    "droppedAttributesCount": 0,
                },
                "scopeSpans": [
                    {
                        "scope": {"name": "checkout-tracer", "version": "1.2.0"},
                        "spans": [
                            {
                                "traceId": "5b8efff798038103d269b633813fc60c",
                                "spanId": "eee19b7ec3c1b174",
                                "name": "GET /cart",
                                "kind": 2,
                                "startTimeUnixNano": "1700000000000000000",
                                "endTimeUnixNano": "1700000000250000000",
                                "attributes": [
                                    {"key": "http.method", "value": {"stringValue": "GET"}},
                                    {"key": "http.status_code", "value": {"intValue": 200}},
                                ],
                                "status": {"code": 1},
                                "events": [],
                                "links": [],
                            },
                            {
                                "traceId": "5b8efff798038103d269b633813fc60c",
                                "spanId": "eee19b7ec3c1b175",
                                "parentSpanId": "eee19b7ec3c1b174",
                                "name": "SELECT carts",
                                "kind": 3,
                                "startTimeUnixNano": "1700000000010000000",
                                "endTimeUnixNano": "1700000000020000000",
                                "attributes": [],
                                "status": {"code": 2, "message": "timeout"},
                                "events": [
                                    {
                                        "name": "exception",
                                        "timeUnixNano": "1700000000015000000",
                                    }
                                ],
                                "links": [],
                                "droppedEventsCount": 3,
                            },
                        ],
                    }
                ],
            }
        ]
    }
