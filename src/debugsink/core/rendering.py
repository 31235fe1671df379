"""Human-readable rendering of parsed payloads.

Renderers write through a ConsolePort and return nothing. Output follows
input order exactly: resource, scope, span, then attributes, events and
links. Nothing is sorted.
"""

import json
import textwrap
from typing import Any, assert_never

from debugsink.core.models import (
    Attribute,
    AttributeValue,
    Payload,
    ResourceSpans,
    ScopeSpans,
    Span,
    SpanBundle,
    StructuredLog,
)
from debugsink.core.ports import ConsolePort

UNNAMED_SCOPE = "unnamed"
_BLOCK_INDENT = "    "


def pretty_json(data: Any, sort_keys: bool = False) -> str:
    """Format JSON with two-space indentation.

    Args:
        data: Any JSON-serializable value.
        sort_keys: Sort object keys (used for whole request bodies).

    Returns:
        Indented JSON text without a trailing newline.
    """
    return json.dumps(data, indent=2, sort_keys=sort_keys, ensure_ascii=False)


def resolve_attribute_value(value: AttributeValue) -> str:
    """Resolve an attribute value to text, first match wins.

    A non-empty string wins, then a non-zero integer, then a true
    boolean. Zero values do not count as set, so an empty string, a
    zero integer and a false boolean all resolve to "".

    Args:
        value: The attribute's value slots.

    Returns:
        Text for the first slot holding a non-zero value, else "".
    """
    if value.string_value != "":
        return value.string_value
    if value.int_value != 0:
        return str(value.int_value)
    if value.bool_value:
        return "true"
    return ""


def _span_attribute_text(value: AttributeValue) -> str:
    # Span attributes fall back to the boolean slot, so an unmatched value prints "false".
    return resolve_attribute_value(value) or "false"


def _attribute_lines(
    attributes: list[Attribute], indent: str, span_level: bool = False
) -> list[str]:
    resolve = _span_attribute_text if span_level else resolve_attribute_value
    return [f"{indent}{attr.key}: {resolve(attr.value)}" for attr in attributes]


def _json_block(items: list[Any]) -> list[str]:
    return [textwrap.indent(pretty_json(item), _BLOCK_INDENT) for item in items]


def render_structured_log(log: StructuredLog, console: ConsolePort) -> None:
    """Write a structured log as a headline plus detail lines.

    Args:
        log: Parsed structured log.
        console: Output sink.
    """
    console.write(f"Processing structured log: {log.level} - {log.message}")
    console.write(f"  Service: {log.service}")
    console.write(f"  Timestamp: {log.timestamp}")
    if log.trace_id:
        console.write(f"  TraceID: {log.trace_id}")
    if log.span_id:
        console.write(f"  SpanID: {log.span_id}")
    if log.error is not None:
        console.write(f"  Error: {log.error.name}: {log.error.message}")
        if log.error.stack:
            console.write(textwrap.indent(log.error.stack, _BLOCK_INDENT))


def _render_span(span: Span, console: ConsolePort) -> None:
    lines = [
        "",
        f"Span: {span.name}",
        f"  TraceID: {span.trace_id}",
        f"  SpanID: {span.span_id}",
    ]
    if span.parent_span_id:
        lines.append(f"  ParentSpanID: {span.parent_span_id}")
    # @tra: Adapter.ASGI.Observability.VerbatimTimestamps
    lines += [
        f"  Kind: {span.kind}",
        f"  Start Time: {span.start_time_unix_nano}",
        f"  End Time: {span.end_time_unix_nano}",
        f"  Status Code: {span.status.code}",
    ]
    if span.status.message:
        lines.append(f"  Status Message: {span.status.message}")
    if span.attributes:
        lines.append("  Attributes:")
        lines += _attribute_lines(span.attributes, "    ", span_level=True)
    if span.dropped_attributes_count > 0:
        lines.append(f"  Dropped Attributes: {span.dropped_attributes_count}")
    if span.dropped_events_count > 0:
        lines.append(f"  Dropped Events: {span.dropped_events_count}")
    if span.dropped_links_count > 0:
        lines.append(f"  Dropped Links: {span.dropped_links_count}")
    if span.events:
        lines.append("  Events:")
        lines += _json_block(span.events)
    if span.links:
        lines.append("  Links:")
        lines += _json_block(span.links)
    for line in lines:
        console.write(line)


def _render_scope_spans(scope_spans: ScopeSpans, console: ConsolePort) -> None:
    scope = scope_spans.scope
    name = scope.name or UNNAMED_SCOPE
    console.write("")
    if scope.version:
        console.write(f"=== Scope: {name} (Version: {scope.version}) ===")
    else:
        console.write(f"=== Scope: {name} ===")
    for span in scope_spans.spans:
        _render_span(span, console)


def _render_resource_spans(resource_spans: ResourceSpans, console: ConsolePort) -> None:
    console.write("")
    console.write("=== Resource ===")
    console.write("Resource Attributes:")
    for line in _attribute_lines(resource_spans.resource.attributes, "  "):
        console.write(line)
    for scope_spans in resource_spans.scope_spans:
        _render_scope_spans(scope_spans, console)


def render_span_bundle(bundle: SpanBundle, console: ConsolePort) -> None:
    """Write every resource, scope and span of an OTLP export.

    An empty bundle writes nothing.

    Args:
        bundle: Parsed span bundle.
        console: Output sink.
    """
    # @tra: Adapter.ASGI.Observability.EmptySpans
    for resource_spans in bundle.resource_spans:
        _render_resource_spans(resource_spans, console)


def render_payload(payload: Payload, console: ConsolePort) -> None:
    """Dispatch a classified payload to its renderer."""
    match payload:
        case StructuredLog():
            render_structured_log(payload, console)
        case SpanBundle():
            render_span_bundle(payload, console)
        case _:
            assert_never(payload)
