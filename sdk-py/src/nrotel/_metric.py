"""Instrument descriptors and metric records consumed by the exporter."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from nrotel._aggregation import Aggregation
from nrotel._attributes import LabelSet, Resource
from nrotel._number import NumberKind


class InstrumentKind(enum.Enum):
    """Kind of metric instrument."""

    COUNTER = "counter"
    UP_DOWN_COUNTER = "up_down_counter"
    VALUE_RECORDER = "value_recorder"
    VALUE_OBSERVER = "value_observer"
    SUM_OBSERVER = "sum_observer"
    UP_DOWN_SUM_OBSERVER = "up_down_sum_observer"


class ExportKind(enum.Enum):
    """Aggregation window an exporter asks the metric controller for."""

    CUMULATIVE = "cumulative"
    DELTA = "delta"


@dataclass(frozen=True)
class Descriptor:
    """Describes a metric instrument."""

    name: str
    instrument_kind: InstrumentKind
    number_kind: NumberKind = NumberKind.INT64
    unit: str = ""
    description: str = ""

    def __post_init__(self) -> None:
        if self.number_kind not in (NumberKind.INT64, NumberKind.FLOAT64):
            raise ValueError(
                f"instruments record int64 or float64, not {self.number_kind.value}"
            )


@dataclass(frozen=True)
class MetricRecord:
    """One checkpointed aggregation for an instrument and label set."""

    descriptor: Descriptor
    aggregation: Aggregation
    labels: LabelSet = field(default_factory=LabelSet)
    resource: Resource = field(default_factory=Resource)
