"""Error taxonomy for ingest requests.

Each error carries the HTTP status and the short plaintext message the
ASGI adapter answers with. Nothing is retried.
"""


class SinkError(Exception):
    """Base class for request failures surfaced as HTTP errors."""

    status: int = 500
    message: str = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class BodyReadError(SinkError):
    """The client disconnected before the body was fully received."""

    status = 400
    message = "Error reading request body"


class EmptyBodyError(SinkError):
    status = 400
    message = "Empty request body"


class JSONParseError(SinkError):
    """The body is not valid JSON or is not a JSON object."""

    status = 400
    message = "Error parsing JSON"


class ShapeClassificationError(SinkError):
    """The body is neither a structured log nor an OTLP span bundle."""

    status = 400
    message = "Unknown data type"


class StructuredLogParseError(SinkError):
    """Tagged as a structured log but missing or mistyping its fields."""

    status = 400
    message = "Error parsing structured log"


class OTLPParseError(SinkError):
    status = 400
    message = "Error parsing OTLP spans"


class ProcessingError(SinkError):
    """Rendering a parsed payload failed."""

    status = 500
    message = "Error processing payload"


class MethodNotAllowedError(SinkError):
    status = 405
    message = "Method not allowed"
