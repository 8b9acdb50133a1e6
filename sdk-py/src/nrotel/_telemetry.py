"""Records in the New Relic data model, handed to the transport client."""

from __future__ import annotations

from dataclasses import dataclass, field

from nrotel._attributes import Scalar


@dataclass(frozen=True)
class Span:
    """A New Relic span."""

    id: str
    trace_id: str
    name: str
    timestamp_ns: int
    duration_ns: int
    service_name: str
    parent_id: str = ""
    attributes: dict[str, Scalar] = field(default_factory=dict)

    @property
    def timestamp_ms(self) -> int:
        return self.timestamp_ns // 1_000_000

    @property
    def duration_ms(self) -> float:
        return self.duration_ns / 1_000_000


@dataclass(frozen=True)
class Count:
    """A delta count metric, produced from a Sum aggregation."""

    name: str
    value: float
    attributes: dict[str, Scalar] = field(default_factory=dict)


@dataclass(frozen=True)
class Summary:
    """A summary metric, produced from a MinMaxSumCount aggregation."""

    name: str
    count: float
    sum: float
    min: float
    max: float
    attributes: dict[str, Scalar] = field(default_factory=dict)


Metric = Count | Summary
