"""nrotel: New Relic exporter for OpenTelemetry spans and metrics."""

from __future__ import annotations

from nrotel._aggregation import (
    Aggregation,
    AggregationKind,
    MinMaxSumCountAggregator,
    SumAggregator,
)
from nrotel._attributes import (
    AttributeType,
    AttributeValue,
    KeyValue,
    LabelSet,
    Resource,
)
from nrotel._config import ExporterConfig
from nrotel._errors import (
    AggregationReadError,
    BatchExportError,
    ConfigError,
    HarvesterClosedError,
    NrotelError,
    ServiceNameRequiredError,
    UnimplementedAggregationError,
)
from nrotel._exporter import Exporter, OptionalExporter, new_exporter
from nrotel._harvester import HarvestBatch, Harvester, TransportClient
from nrotel._metric import Descriptor, ExportKind, InstrumentKind, MetricRecord
from nrotel._metric_transform import transform_record
from nrotel._number import Number, NumberKind
from nrotel._otel import (
    NewRelicMetricExporter,
    NewRelicSpanExporter,
    records_from_metrics_data,
    snapshot_from_readable_span,
)
from nrotel._pipeline import ExportPipeline, new_export_pipeline
from nrotel._span_transform import transform_span
from nrotel._telemetry import Count, Metric, Span, Summary
from nrotel._types import SpanKind, SpanSnapshot, Status, StatusCode, StatusModel

__version__ = "0.1.0"

__all__ = [
    "Aggregation",
    "AggregationKind",
    "AggregationReadError",
    "AttributeType",
    "AttributeValue",
    "BatchExportError",
    "ConfigError",
    "Count",
    "Descriptor",
    "ExportKind",
    "ExportPipeline",
    "Exporter",
    "ExporterConfig",
    "HarvestBatch",
    "Harvester",
    "HarvesterClosedError",
    "InstrumentKind",
    "KeyValue",
    "LabelSet",
    "Metric",
    "MetricRecord",
    "MinMaxSumCountAggregator",
    "NewRelicMetricExporter",
    "NewRelicSpanExporter",
    "NrotelError",
    "Number",
    "NumberKind",
    "OptionalExporter",
    "Resource",
    "ServiceNameRequiredError",
    "Span",
    "SpanKind",
    "SpanSnapshot",
    "Status",
    "StatusCode",
    "StatusModel",
    "Summary",
    "SumAggregator",
    "TransportClient",
    "UnimplementedAggregationError",
    "__version__",
    "new_export_pipeline",
    "new_exporter",
    "records_from_metrics_data",
    "snapshot_from_readable_span",
    "transform_record",
    "transform_span",
]
