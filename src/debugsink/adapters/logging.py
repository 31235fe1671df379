"""Python logging handler adapter for debugsink.

This adapter bridges Python's standard library logging module to a
ConsolePort, so request metadata logged by the server lands in the same
sink as the rendered payloads.
"""

import logging
import traceback

from debugsink.core.ports import ConsolePort

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

DEFAULT_FORMAT = "%(asctime)s %(message)s"
DEFAULT_DATEFMT = "%Y/%m/%d %H:%M:%S"
ROOT_LOGGER_NAME = "debugsink"


class ConsoleLogHandler(logging.Handler):
    """Logging handler that writes formatted records to a ConsolePort.

    Example:
        ```python
        from debugsink.adapters.console import StdoutConsole

        handler = ConsoleLogHandler(StdoutConsole())
        logging.getLogger("debugsink").addHandler(handler)
        ```
    """

    def __init__(self, console: ConsolePort, include_extra: bool = True) -> None:
        """Initialize the handler with a console sink.

        Args:
            console: Sink implementing ConsolePort.
            include_extra: Append extra attributes passed via the logging
                call as key=value pairs.
        """
        super().__init__()
        self._console = console
        self._include_extra = include_extra
        self.setFormatter(logging.Formatter(DEFAULT_FORMAT, DEFAULT_DATEFMT))

    def _extra_fields(self, record: logging.LogRecord) -> dict[str, str | int | float | bool]:
        return {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_LOGRECORD_ATTRS
            and isinstance(value, (str, int, float, bool))
        }

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record to the console sink.

        Args:
            record: The log record to emit.
        """
        try:
            # formatMessage leaves out the traceback, which goes after the extra fields
            formatter = self.formatter or logging.Formatter(DEFAULT_FORMAT, DEFAULT_DATEFMT)
            record.message = record.getMessage()
            if formatter.usesTime():
                record.asctime = formatter.formatTime(record, formatter.datefmt)
            line = formatter.formatMessage(record)

            if self._include_extra:
                extra = self._extra_fields(record)
                if extra:
                    pairs = " ".join(f"{k}={v}" for k, v in extra.items())
                    line = f"{line} {pairs}"

            if record.exc_info:
                exc_type, exc_value, exc_tb = record.exc_info
                line += "\n" + "".join(
                    traceback.format_exception(exc_type, exc_value, exc_tb)
                ).rstrip("\n")

            self._console.write(line)
        except Exception:
            self.handleError(record)


def configure_logging(console: ConsolePort, level: str = "INFO") -> ConsoleLogHandler:
    """Route the debugsink logger hierarchy to a console sink.

    Replaces any ConsoleLogHandler installed by an earlier call.

    Args:
        console: Sink implementing ConsolePort.
        level: Minimum log level name (e.g., "INFO", "DEBUG").

    Returns:
        The installed handler.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for existing in list(logger.handlers):
        if isinstance(existing, ConsoleLogHandler):
            logger.removeHandler(existing)
    handler = ConsoleLogHandler(console)
    logger.addHandler(handler)
    logger.setLevel(level.upper())
    logger.propagate = False
    return handler
