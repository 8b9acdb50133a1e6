"""Core types: enums and the span snapshot consumed by the exporter."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from nrotel._attributes import KeyValue, Resource

INVALID_TRACE_ID = bytes(16)
INVALID_SPAN_ID = bytes(8)


class SpanKind(enum.Enum):
    """Role of a span in a trace."""

    UNSPECIFIED = "unspecified"
    INTERNAL = "internal"
    SERVER = "server"
    CLIENT = "client"
    PRODUCER = "producer"
    CONSUMER = "consumer"


class StatusCode(enum.IntEnum):
    """Span status code. Values match OpenTelemetry."""

    UNSET = 0
    OK = 1
    ERROR = 2


class StatusModel(enum.Enum):
    """Which status codes are reported to the backend as errors.

    ``OK_ONLY``: every code other than OK is an error, UNSET included.
    ``ERROR_ONLY``: only ERROR is an error.
    """

    OK_ONLY = "ok_only"
    ERROR_ONLY = "error_only"

    def is_error(self, code: StatusCode) -> bool:
        if self is StatusModel.ERROR_ONLY:
            return code is StatusCode.ERROR
        return code is not StatusCode.OK


@dataclass(frozen=True)
class Status:
    """Final status of a span."""

    code: StatusCode = StatusCode.UNSET
    message: str = ""


@dataclass(frozen=True)
class SpanSnapshot:
    """Immutable snapshot of a completed span, as handed over by the SDK."""

    trace_id: bytes
    span_id: bytes
    name: str
    start_time_ns: int
    end_time_ns: int
    parent_span_id: bytes = INVALID_SPAN_ID
    status: Status = field(default_factory=Status)
    kind: SpanKind = SpanKind.UNSPECIFIED
    attributes: tuple[KeyValue, ...] = ()
    resource: Resource = field(default_factory=Resource)

    def __post_init__(self) -> None:
        if len(self.trace_id) != 16:
            raise ValueError(f"trace_id must be 16 bytes, got {len(self.trace_id)}")
        if len(self.span_id) != 8:
            raise ValueError(f"span_id must be 8 bytes, got {len(self.span_id)}")
        if len(self.parent_span_id) != 8:
            raise ValueError(
                f"parent_span_id must be 8 bytes, got {len(self.parent_span_id)}"
            )
        if self.end_time_ns < self.start_time_ns:
            raise ValueError("span ends before it starts")
        object.__setattr__(self, "attributes", tuple(self.attributes))
