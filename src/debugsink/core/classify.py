"""Payload classification for observability bodies.

A body is sniffed by its type tag first, then by the presence of the
OTLP ``resourceSpans`` key. Once classified, the body must parse into
that shape; a failed parse is reported as a parse error of that shape
and is never reclassified.
"""

from typing import Any, assert_never

from pydantic import ValidationError

from debugsink.core.errors import (
    OTLPParseError,
    ShapeClassificationError,
    StructuredLogParseError,
)
from debugsink.core.models import Payload, SpanBundle, StructuredLog

STRUCTURED_LOG_TYPE = "structured_log"
RESOURCE_SPANS_KEY = "resourceSpans"


def is_structured_log(data: dict[str, Any]) -> bool:
    """Check whether the body carries the structured log type tag."""
    return data.get("type") == STRUCTURED_LOG_TYPE


def is_span_bundle(data: dict[str, Any]) -> bool:
    """Check whether the body has a resourceSpans key, whatever its value."""
    return RESOURCE_SPANS_KEY in data


def classify(data: dict[str, Any]) -> Payload:
    """Classify and parse a decoded JSON object.

    Args:
        data: Decoded request body.

    Returns:
        StructuredLog or SpanBundle.

    Raises:
        ShapeClassificationError: Neither shape matches.
        StructuredLogParseError: Tagged as a structured log but malformed.
        OTLPParseError: Has resourceSpans but is malformed.
    """
    if is_structured_log(data):
        try:
            return StructuredLog.model_validate(data)
        except ValidationError as e:
            raise StructuredLogParseError() from e
    if is_span_bundle(data):
        try:
            return SpanBundle.model_validate(data)
        except ValidationError as e:
            raise OTLPParseError() from e
    raise ShapeClassificationError()


def payload_label(payload: Payload) -> str:
    """Short human name of a payload's shape, used in error messages."""
    match payload:
        case StructuredLog():
            return "structured log"
        case SpanBundle():
            return "OTLP spans"
        case _:
            assert_never(payload)
