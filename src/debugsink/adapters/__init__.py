"""Adapters implementing core ports and serving the HTTP surface."""

from debugsink.adapters.console import InMemoryConsole, StdoutConsole
from debugsink.adapters.logging import ConsoleLogHandler, configure_logging

__all__ = [
    "ConsoleLogHandler",
    "InMemoryConsole",
    "StdoutConsole",
    "configure_logging",
]
