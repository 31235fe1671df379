"""Port interfaces for output adapters.

Rendering code depends only on these protocols, never on the process
console directly, so tests can capture what would be printed.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ConsolePort(Protocol):
    """Port for human-readable console output.

    Adapters implementing this protocol receive rendered text.
    Examples: StdoutConsole, InMemoryConsole.
    """

    def write(self, text: str) -> None:
        """Write text as one or more lines.

        Args:
            text: Text without a trailing newline. Embedded newlines
                  are kept, so multi-line blocks are written in one call.
        """
        ...
