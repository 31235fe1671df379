"""Console adapters implementing ConsolePort."""

import sys
import threading
from typing import TextIO


class StdoutConsole:
    """Process console implementation of ConsolePort.

    Writes go to a text stream, stdout by default. Each write is
    flushed immediately so output shows up while the server runs.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._lock = threading.Lock()

    def write(self, text: str) -> None:
        """Write text followed by a newline."""
        stream = self._stream or sys.stdout
        with self._lock:
            stream.write(text + "\n")
            stream.flush()


class InMemoryConsole:
    """In-memory implementation of ConsolePort.

    Keeps every written line in a list. Suitable for tests that need
    to assert on rendered output.
    """

    def __init__(self) -> None:
        self._lines: list[str] = []

    def write(self, text: str) -> None:
        """Record text, splitting embedded newlines into separate lines."""
        self._lines.extend(text.split("\n"))

    @property
    def lines(self) -> list[str]:
        """Return a copy of all recorded lines."""
        return list(self._lines)

    @property
    def text(self) -> str:
        """Return all recorded output joined by newlines."""
        return "\n".join(self._lines)

    def clear(self) -> None:
        self._lines.clear()
