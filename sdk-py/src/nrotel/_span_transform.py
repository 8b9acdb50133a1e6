"""Span transformation into the New Relic data model."""

from __future__ import annotations

from nrotel._attributes import (
    COLLECTOR_NAME_KEY,
    COLLECTOR_NAME_VALUE,
    ERROR_CODE_KEY,
    ERROR_MESSAGE_KEY,
    INSTRUMENTATION_PROVIDER_KEY,
    INSTRUMENTATION_PROVIDER_VALUE,
    SERVICE_NAME_KEY,
    SPAN_KIND_KEY,
    Scalar,
)
from nrotel._telemetry import Span
from nrotel._types import SpanKind, SpanSnapshot, StatusModel


def hex_id(raw: bytes) -> str:
    """Lowercase hex of an id, or "" for the all-zero invalid id."""
    if not any(raw):
        return ""
    return raw.hex()


def transform_span(
    service_name: str,
    span: SpanSnapshot,
    *,
    status_model: StatusModel = StatusModel.OK_ONLY,
) -> Span:
    """Transform a span snapshot into a New Relic Span.

    The service name is taken, in increasing precedence, from the
    ``service_name`` argument, the resource and the span attributes. Span
    attributes overwrite resource attributes with the same key. The
    ``instrumentation.provider`` and ``collector.name`` attributes are written
    after both and cannot be overridden.
    """
    attrs: dict[str, Scalar] = {}

    for kv in span.resource:
        if kv.key == SERVICE_NAME_KEY:
            name = kv.value.as_string()
            if name:
                service_name = name
        attrs[kv.key] = kv.value.as_scalar()

    for kv in span.attributes:
        if kv.key == SERVICE_NAME_KEY:
            name = kv.value.as_string()
            if name:
                service_name = name
        attrs[kv.key] = kv.value.as_scalar()

    if span.kind is not SpanKind.UNSPECIFIED:
        attrs[SPAN_KIND_KEY] = span.kind.name

    attrs[INSTRUMENTATION_PROVIDER_KEY] = INSTRUMENTATION_PROVIDER_VALUE
    attrs[COLLECTOR_NAME_KEY] = COLLECTOR_NAME_VALUE

    if status_model.is_error(span.status.code):
        attrs[ERROR_CODE_KEY] = int(span.status.code)
        attrs[ERROR_MESSAGE_KEY] = span.status.message

    return Span(
        id=hex_id(span.span_id),
        trace_id=hex_id(span.trace_id),
        parent_id=hex_id(span.parent_span_id),
        name=span.name,
        timestamp_ns=span.start_time_ns,
        duration_ns=span.end_time_ns - span.start_time_ns,
        service_name=service_name,
        attributes=attrs,
    )
