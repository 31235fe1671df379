"""Core domain models for telemetry payloads.

All models are frozen: a payload is parsed once from a request body,
rendered, and discarded. Field names follow the wire's camelCase via
aliases while Python attributes stay snake_case.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StrictBool, StrictInt


def _none_as_empty(value: Any) -> Any:
    """Treat an explicit JSON null sequence the same as a missing one."""
    return [] if value is None else value


def _none_as_default(value: Any) -> Any:
    """Treat an explicit JSON null object the same as a missing one."""
    return {} if value is None else value


def _reject_bool(value: Any) -> Any:
    """Keep JSON true/false out of integer slots that otherwise coerce."""
    if isinstance(value, bool):
        raise ValueError("expected an integer, got a boolean")
    return value


class _WireModel(BaseModel):
    """Base for models parsed from camelCase JSON."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class LogError(_WireModel):
    """Error details attached to a structured log.

    Attributes:
        name: Exception class name (e.g., TypeError).
        message: Error message.
        stack: Optional stack trace text.
    """

    name: str
    message: str
    stack: str | None = None


class StructuredLog(_WireModel):
    """A leveled, timestamped, service-tagged log record.

    Attributes:
        type: Discriminator, always "structured_log".
        timestamp: Timestamp as sent by the client (kept as text).
        level: Log level (e.g., info, ERROR).
        message: The log message.
        service: Name of the emitting service.
        metadata: Opaque JSON context, never interpreted.
        error: Optional error details.
        trace_id: Optional correlated trace ID.
        span_id: Optional correlated span ID.
    """

    type: Literal["structured_log"]
    timestamp: str
    level: str
    message: str
    service: str
    metadata: Any = None
    error: LogError | None = None
    trace_id: str | None = Field(default=None, alias="traceId")
    span_id: str | None = Field(default=None, alias="spanId")


class AttributeValue(_WireModel):
    """Value slots of an OTLP attribute.

    Unset slots hold their zero value, matching how loosely-typed clients
    send them. An int64 sent as a decimal string is accepted; every other
    slot takes only its own JSON type.
    """

    string_value: str = Field(default="", alias="stringValue")
    int_value: Annotated[int, BeforeValidator(_reject_bool)] = Field(
        default=0, alias="intValue"
    )
    bool_value: StrictBool = Field(default=False, alias="boolValue")


class Attribute(_WireModel):
    """A key plus its typed value."""

    key: str
    value: Annotated[AttributeValue, BeforeValidator(_none_as_default)] = Field(
        default_factory=AttributeValue
    )


AttributeList = Annotated[list[Attribute], BeforeValidator(_none_as_empty)]
RawJSONList = Annotated[list[Any], BeforeValidator(_none_as_empty)]
DroppedCount = Annotated[StrictInt, Field(ge=0)]


class Resource(_WireModel):
    """Entity producing the telemetry."""

    attributes: AttributeList = Field(default_factory=list)
    dropped_attributes_count: DroppedCount = Field(
        default=0, alias="droppedAttributesCount"
    )


class InstrumentationScope(_WireModel):
    """Instrumentation library identity."""

    name: str = ""
    version: str = ""


class SpanStatus(_WireModel):
    """Span outcome: numeric code plus optional message."""

    code: StrictInt = 0
    message: str = ""


class Span(_WireModel):
    """A single traced operation.

    Start and end times are nanoseconds since the epoch held as strings.
    They can exceed float precision, so they are never converted.
    Events and links are opaque JSON passed through unchanged.
    """

    trace_id: str = Field(default="", alias="traceId")
    span_id: str = Field(default="", alias="spanId")
    parent_span_id: str = Field(default="", alias="parentSpanId")
    name: str = ""
    kind: StrictInt = 0
    start_time_unix_nano: str = Field(default="", alias="startTimeUnixNano")
    end_time_unix_nano: str = Field(default="", alias="endTimeUnixNano")
    attributes: AttributeList = Field(default_factory=list)
    status: Annotated[SpanStatus, BeforeValidator(_none_as_default)] = Field(
        default_factory=SpanStatus
    )
    events: RawJSONList = Field(default_factory=list)
    links: RawJSONList = Field(default_factory=list)
    dropped_attributes_count: DroppedCount = Field(
        default=0, alias="droppedAttributesCount"
    )
    dropped_events_count: DroppedCount = Field(default=0, alias="droppedEventsCount")
    dropped_links_count: DroppedCount = Field(default=0, alias="droppedLinksCount")


class ScopeSpans(_WireModel):
    """Spans grouped by instrumentation scope."""

    scope: Annotated[InstrumentationScope, BeforeValidator(_none_as_default)] = Field(
        default_factory=InstrumentationScope
    )
    spans: Annotated[list[Span], BeforeValidator(_none_as_empty)] = Field(
        default_factory=list
    )


class ResourceSpans(_WireModel):
    """Scope groups belonging to one resource."""

    resource: Annotated[Resource, BeforeValidator(_none_as_default)] = Field(
        default_factory=Resource
    )
    scope_spans: Annotated[list[ScopeSpans], BeforeValidator(_none_as_empty)] = Field(
        default_factory=list, alias="scopeSpans"
    )


class SpanBundle(_WireModel):
    """An OTLP trace export: ResourceSpans -> ScopeSpans -> Spans."""

    resource_spans: Annotated[list[ResourceSpans], BeforeValidator(_none_as_empty)] = (
        Field(default_factory=list, alias="resourceSpans")
    )


# Result of classifying an observability body.
Payload = StructuredLog | SpanBundle
