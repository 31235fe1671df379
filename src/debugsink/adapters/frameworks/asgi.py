"""ASGI adapter for the analytics and observability ingest endpoints.

This adapter provides a framework-agnostic ASGI application that can be used
with any ASGI server (uvicorn, hypercorn, daphne). Each request is read,
decoded, printed and acknowledged on its own; nothing is kept between
requests.
"""

import json
import logging
from collections.abc import Callable, Coroutine
from datetime import datetime
from typing import Any

from debugsink.core.classify import classify, payload_label
from debugsink.core.errors import (
    BodyReadError,
    EmptyBodyError,
    JSONParseError,
    MethodNotAllowedError,
    ProcessingError,
    SinkError,
)
from debugsink.core.ports import ConsolePort
from debugsink.core.rendering import pretty_json, render_payload

logger = logging.getLogger(__name__)

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]
Headers = list[tuple[bytes, bytes]]
Handler = Callable[[Scope, Receive, ConsolePort], Coroutine[Any, Any, None]]

ANALYTICS_PATH = "/analytics"
OBSERVABILITY_PATH = "/observability"

ACK_BODY = json.dumps({"status": "ok"}, separators=(",", ":"))
ERROR_CONTENT_TYPE = "text/plain; charset=utf-8"
# @tra: Adapter.ASGI.CORS
CORS_ALLOW_METHODS = b"POST, OPTIONS"
CORS_ALLOW_HEADERS = b"Content-Type, Authorization"


def _get_header(scope: Scope, header_name: str) -> str:
    """Return a request header value from ASGI scope, or "" if absent.

    Args:
        scope: ASGI scope dictionary containing request metadata.
        header_name: Header to search for (case-insensitive).

    Returns:
        Header value decoded as latin-1, or an empty string when missing.
    """
    # @tra: Adapter.ASGI.RequestMetadata
    header_bytes = header_name.lower().encode()
    headers: Headers = scope.get("headers", [])
    for name, value in headers:
        if name.lower() == header_bytes:
            return value.decode("latin-1")
    return ""


def _client_address(scope: Scope) -> str:
    """Format the peer address from ASGI scope as host:port."""
    client = scope.get("client")
    if not client:
        return "unknown"
    host, port = client
    return f"{host}:{port}"


def _get_log_level_for_status(status_code: int) -> int:
    """Determine the logging level for an error response status.

    Maps status codes to log levels:
    - 400-499 (4xx) → WARNING
    - 500-599 (5xx) → ERROR
    - Other → INFO (default)
    """
    if 400 <= status_code < 500:
        return logging.WARNING
    if 500 <= status_code < 600:
        return logging.ERROR
    return logging.INFO


def _analytics_cors_headers(scope: Scope) -> Headers:
    """CORS headers for the analytics endpoint: any origin, no credentials."""
    # @tra: Adapter.ASGI.Analytics.CORS
    return [
        (b"access-control-allow-origin", b"*"),
        (b"access-control-allow-methods", CORS_ALLOW_METHODS),
        (b"access-control-allow-headers", CORS_ALLOW_HEADERS),
    ]


def _observability_cors_headers(scope: Scope) -> Headers:
    """CORS headers for the observability endpoint.

    The request Origin is echoed back (omitted when the request has none)
    and credentials are allowed.
    """
    # @tra: Adapter.ASGI.Observability.CORS
    headers: Headers = []
    origin = _get_header(scope, "Origin")
    if origin:
        headers.append((b"access-control-allow-origin", origin.encode("latin-1")))
    headers += [
        (b"access-control-allow-methods", CORS_ALLOW_METHODS),
        (b"access-control-allow-headers", CORS_ALLOW_HEADERS),
        (b"access-control-allow-credentials", b"true"),
    ]
    return headers


async def _send_response(
    send: Send,
    status: int,
    content_type: str | None,
    body: str,
    extra_headers: Headers | None = None,
) -> None:
    """Send an HTTP response with headers and body.

    Args:
        send: ASGI send callable for writing response.
        status: HTTP status code.
        content_type: Content-Type header value, or None to omit it.
        body: Response body as string (will be encoded to bytes).
        extra_headers: Additional raw headers (e.g., CORS).
    """
    # @tra: Adapter.ASGI.SendResponse.Headers
    headers: Headers = []
    if content_type is not None:
        headers.append((b"content-type", content_type.encode()))
    headers += extra_headers or []
    await send({"type": "http.response.start", "status": status, "headers": headers})
    # @tra: Adapter.ASGI.SendResponse.Body
    await send({"type": "http.response.body", "body": body.encode()})


async def _read_body(receive: Receive) -> bytes:
    """Read the full request body from ASGI receive messages.

    Raises:
        BodyReadError: The client disconnected mid-body.
    """
    # @tra: Adapter.ASGI.ReadBody.Chunks
    chunks: list[bytes] = []
    while True:
        message = await receive()
        # @tra: Adapter.ASGI.ReadBody.Disconnect
        if message["type"] == "http.disconnect":
            raise BodyReadError()
        chunks.append(message.get("body", b""))
        if not message.get("more_body", False):
            return b"".join(chunks)


def _reject_constant(name: str) -> Any:
    """Refuse the NaN and Infinity literals the json module accepts by default."""
    raise ValueError(f"invalid JSON literal {name}")


def _decode_json_object(body: bytes) -> dict[str, Any]:
    """Decode a request body that must be a JSON object.

    Raises:
        EmptyBodyError: The body is empty or whitespace.
        JSONParseError: The body is not valid JSON, nests too deeply, or is
            not an object.
    """
    # @tra: Adapter.ASGI.DecodeJSON
    if not body.strip():
        raise EmptyBodyError()
    try:
        data = json.loads(body, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors.
        logger.warning("Error parsing JSON: %s", e)
        raise JSONParseError() from e
    if not isinstance(data, dict):
        logger.warning("Error parsing JSON: expected an object, got %s", type(data).__name__)
        raise JSONParseError()
    return data


def _log_request(scope: Scope, include_origin: bool = False) -> None:
    # @tra: Adapter.ASGI.Analytics.RequestLog
    # @tra: Adapter.ASGI.Observability.RequestLog
    logger.info("Received %s request from %s", scope["method"], _client_address(scope))
    logger.info("User-Agent: %s", _get_header(scope, "User-Agent"))
    if include_origin:
        logger.info("Origin: %s", _get_header(scope, "Origin"))


def _received_banner(kind: str) -> None:
    timestamp = datetime.now().astimezone().isoformat(timespec="seconds")
    logger.info("=== %s Event Received at %s ===", kind, timestamp)


def _print_body(console: ConsolePort, data: dict[str, Any]) -> None:
    console.write("")
    console.write(pretty_json(data, sort_keys=True))


async def _handle_analytics(scope: Scope, receive: Receive, console: ConsolePort) -> None:
    """Print an analytics body. Any JSON object is accepted."""
    # @tra: Adapter.ASGI.Analytics.EmptyBody
    # @tra: Adapter.ASGI.Analytics.MalformedJSON
    data = _decode_json_object(await _read_body(receive))
    _received_banner("Analytics")
    events = data.get("events")
    if isinstance(events, list):
        logger.info("Batch of %d analytics event(s)", len(events))
    # @tra: Adapter.ASGI.Analytics.PrettyPrint
    _print_body(console, data)


async def _handle_observability(
    scope: Scope, receive: Receive, console: ConsolePort
) -> None:
    """Print, classify and render an observability body."""
    body = await _read_body(receive)
    _received_banner("Observability")
    # @tra: Adapter.ASGI.Observability.EmptyBody
    # @tra: Adapter.ASGI.Observability.MalformedJSON
    data = _decode_json_object(body)
    # @tra: Adapter.ASGI.Observability.PrettyPrint
    _print_body(console, data)

    # @tra: Adapter.ASGI.Observability.UnknownType
    # @tra: Adapter.ASGI.Observability.StructuredLogParseError
    # @tra: Adapter.ASGI.Observability.OTLPParseError
    payload = classify(data)
    # @tra: Adapter.ASGI.Observability.StructuredLog
    # @tra: Adapter.ASGI.Observability.Spans
    try:
        render_payload(payload, console)
    except Exception as e:
        # @tra: Adapter.ASGI.Observability.ProcessingError
        raise ProcessingError(f"Error processing {payload_label(payload)}") from e


async def _handle_endpoint(
    scope: Scope,
    receive: Receive,
    send: Send,
    handler: Handler,
    console: ConsolePort,
    cors_headers: Headers,
) -> None:
    """Run an ingest handler and send the acknowledgement or error.

    Args:
        scope: ASGI scope of the request.
        receive: ASGI receive callable.
        send: ASGI send callable for writing response.
        handler: Coroutine that reads, prints and renders the body.
        console: Sink the handler writes to.
        cors_headers: CORS headers added to every response.
    """
    try:
        # @tra: Adapter.ASGI.Analytics.Preflight
        # @tra: Adapter.ASGI.Observability.Preflight
        if scope["method"] == "OPTIONS":
            await _send_response(send, 200, None, "", cors_headers)
            return
        # @tra: Adapter.ASGI.Analytics.Methods
        # @tra: Adapter.ASGI.Observability.Methods
        if scope["method"] != "POST":
            raise MethodNotAllowedError()
        await handler(scope, receive, console)
    except SinkError as e:
        logger.log(
            _get_log_level_for_status(e.status),
            "%s %s failed: %s",
            scope["method"],
            scope["path"],
            e.message,
            exc_info=e.__cause__ if e.status >= 500 else None,
        )
        await _send_response(send, e.status, ERROR_CONTENT_TYPE, e.message, cors_headers)
        return
    except Exception:
        # @tra: Adapter.ASGI.UnhandledError
        logger.exception("Unhandled error on %s %s", scope["method"], scope["path"])
        await _send_response(
            send, 500, ERROR_CONTENT_TYPE, "Internal Server Error", cors_headers
        )
        return
    # @tra: Adapter.ASGI.Analytics.Ack
    await _send_response(send, 200, "application/json", ACK_BODY, cors_headers)


def create_asgi_app(console: ConsolePort) -> ASGIApp:
    """Create an ASGI app with /analytics and /observability endpoints.

    Args:
        console: Sink for pretty-printed bodies and rendered payloads.

    Returns:
        ASGI application callable.
    """
    # @tra: Adapter.ASGI.Independence
    routes: dict[str, tuple[Handler, Callable[[Scope], Headers]]] = {
        ANALYTICS_PATH: (_handle_analytics, _analytics_cors_headers),
        OBSERVABILITY_PATH: (_handle_observability, _observability_cors_headers),
    }

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        # @tra: Adapter.ASGI.NonHTTPScope
        if scope["type"] != "http":
            return

        route = routes.get(scope["path"])
        # @tra: Adapter.ASGI.RoutingUnknownPath
        if route is None:
            await _send_response(send, 404, ERROR_CONTENT_TYPE, "Not Found")
            return

        handler, cors = route
        _log_request(scope, include_origin=scope["path"] == OBSERVABILITY_PATH)
        await _handle_endpoint(scope, receive, send, handler, console, cors(scope))

    return app
