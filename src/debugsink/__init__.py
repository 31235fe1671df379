"""Local debug sink for analytics events and observability telemetry."""

from debugsink.adapters.console import InMemoryConsole, StdoutConsole
from debugsink.adapters.frameworks.asgi import create_asgi_app
from debugsink.adapters.logging import ConsoleLogHandler, configure_logging
from debugsink.core.classify import classify
from debugsink.core.models import Payload, SpanBundle, StructuredLog
from debugsink.core.ports import ConsolePort
from debugsink.core.rendering import render_payload, resolve_attribute_value

__all__ = [
    "ConsoleLogHandler",
    "ConsolePort",
    "InMemoryConsole",
    "Payload",
    "SpanBundle",
    "StdoutConsole",
    "StructuredLog",
    "classify",
    "configure_logging",
    "create_asgi_app",
    "render_payload",
    "resolve_attribute_value",
]
