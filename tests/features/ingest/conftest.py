"""BDD step definitions for ingest features."""

import asyncio
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest
from pytest_bdd import given, parsers, then, when

from debugsink.adapters.console import InMemoryConsole
from debugsink.adapters.frameworks.asgi import ASGIApp, create_asgi_app


@dataclass
class IngestScenarioContext:
    """Mutable state shared between the steps of one scenario."""

    console: InMemoryConsole = field(default_factory=InMemoryConsole)
    app: ASGIApp | None = None
    response: httpx.Response | None = None


def run_async(coro: Any) -> Any:
    """Run a coroutine in a new event loop (steps are synchronous)."""
    return asyncio.run(coro)


async def post(app: ASGIApp, path: str, content: bytes) -> httpx.Response:
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test"
    ) as client:
        return await client.post(
            path, content=content, headers={"content-type": "application/json"}
        )


@pytest.fixture
def ctx() -> IngestScenarioContext:
    """Fresh scenario context for each test."""
    return IngestScenarioContext()


# === Background Steps ===
@given("an in-memory console")
def given_in_memory_console(ctx: IngestScenarioContext) -> None:
    ctx.console = InMemoryConsole()


@given("the debug sink app")
def given_debug_sink_app(ctx: IngestScenarioContext) -> None:
    ctx.app = create_asgi_app(ctx.console)


# === Request Steps ===
@when(parsers.parse('the client posts to "{path}":'))
def when_client_posts(ctx: IngestScenarioContext, path: str, docstring: str) -> None:
    assert ctx.app is not None
    ctx.response = run_async(post(ctx.app, path, docstring.encode()))


@when(parsers.parse('the client posts an empty body to "{path}"'))
def when_client_posts_empty(ctx: IngestScenarioContext, path: str) -> None:
    assert ctx.app is not None
    ctx.response = run_async(post(ctx.app, path, b""))


# === Assertion Steps ===
@then(parsers.parse("the response status is {code:d}"))
def then_status(ctx: IngestScenarioContext, code: int) -> None:
    assert ctx.response is not None
    assert ctx.response.status_code == code


@then(parsers.parse("the response body is exactly '{body}'"))
def then_body_exact(ctx: IngestScenarioContext, body: str) -> None:
    assert ctx.response is not None
    assert ctx.response.text == body


@then("the response body is not empty")
def then_body_not_empty(ctx: IngestScenarioContext) -> None:
    assert ctx.response is not None
    assert ctx.response.text.strip()


@then(parsers.re(r"the console shows (?P<quote>[\"'])(?P<line>.*)(?P=quote)$"))
def then_console_shows(ctx: IngestScenarioContext, line: str) -> None:
    assert line in ctx.console.lines


@then("the console shows no span lines")
def then_no_span_lines(ctx: IngestScenarioContext) -> None:
    assert not any(line.startswith("Span:") for line in ctx.console.lines)
