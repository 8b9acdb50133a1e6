"""Adapters from the OpenTelemetry Python SDK span and metric models."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any

from opentelemetry.sdk.metrics import (
    Counter,
    Histogram,
    ObservableCounter,
    ObservableGauge,
    ObservableUpDownCounter,
    UpDownCounter,
)
from opentelemetry.sdk.metrics.export import (
    AggregationTemporality,
    ExponentialHistogram,
    Gauge,
    HistogramDataPoint,
    MetricExporter,
    MetricExportResult,
    MetricsData,
    Sum,
)
from opentelemetry.sdk.metrics.export import Histogram as HistogramData
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult

from nrotel._aggregation import Aggregation, AggregationKind
from nrotel._attributes import AttributeValue, KeyValue, LabelSet, Resource
from nrotel._errors import AggregationReadError, UnimplementedAggregationError
from nrotel._exporter import Exporter
from nrotel._metric import Descriptor, ExportKind, InstrumentKind, MetricRecord
from nrotel._number import Number, NumberKind
from nrotel._types import (
    INVALID_SPAN_ID,
    INVALID_TRACE_ID,
    SpanKind,
    SpanSnapshot,
    Status,
    StatusCode,
)

logger = logging.getLogger("nrotel.otel")


def _key_values(attributes: Mapping[str, Any] | None) -> Iterable[KeyValue]:
    for key, value in (attributes or {}).items():
        converted = AttributeValue.from_python(value)
        if converted is None:
            logger.debug(
                "Dropping attribute %r with unsupported type %s",
                key,
                type(value).__name__,
            )
            continue
        yield KeyValue(key, converted)


def snapshot_from_readable_span(span: ReadableSpan) -> SpanSnapshot:
    """Convert a finished OpenTelemetry span into a SpanSnapshot."""
    trace_id, span_id = INVALID_TRACE_ID, INVALID_SPAN_ID
    if span.context is not None:
        trace_id = span.context.trace_id.to_bytes(16, "big")
        span_id = span.context.span_id.to_bytes(8, "big")
    parent_span_id = INVALID_SPAN_ID
    if span.parent is not None:
        parent_span_id = span.parent.span_id.to_bytes(8, "big")

    start = span.start_time or 0
    end = span.end_time if span.end_time is not None else start

    status = Status(
        code=StatusCode[span.status.status_code.name],
        message=span.status.description or "",
    )
    resource_attrs = span.resource.attributes if span.resource is not None else None

    return SpanSnapshot(
        trace_id=trace_id,
        span_id=span_id,
        parent_span_id=parent_span_id,
        name=span.name,
        start_time_ns=start,
        end_time_ns=max(end, start),
        status=status,
        kind=SpanKind[span.kind.name],
        attributes=tuple(_key_values(span.attributes)),
        resource=Resource(_key_values(resource_attrs)),
    )


class NewRelicSpanExporter(SpanExporter):
    """OpenTelemetry SpanExporter backed by an Exporter.

    Failures are logged but never raised, as the SDK's span processors
    expect. With ``shutdown_exporter=False`` the Exporter is left running
    on shutdown, for an Exporter shared with a metric exporter.
    """

    def __init__(self, exporter: Exporter, *, shutdown_exporter: bool = True) -> None:
        self._exporter = exporter
        self._shutdown_exporter = shutdown_exporter

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        if not spans:
            return SpanExportResult.SUCCESS
        try:
            self._exporter.export_spans(
                snapshot_from_readable_span(span) for span in spans
            )
        except Exception:  # noqa: BLE001
            logger.debug("Failed to export %d spans", len(spans), exc_info=True)
            return SpanExportResult.FAILURE
        return SpanExportResult.SUCCESS

    def shutdown(self) -> None:
        if self._shutdown_exporter:
            self._exporter.shutdown()

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return _flush(self._exporter)


def _flush(exporter: Exporter) -> bool:
    harvest = getattr(exporter.harvester, "harvest", None)
    if callable(harvest):
        harvest()
    return True


# Metrics

_TEMPORALITY = {
    ExportKind.DELTA: AggregationTemporality.DELTA,
    ExportKind.CUMULATIVE: AggregationTemporality.CUMULATIVE,
}

_INSTRUMENTS = (
    Counter,
    UpDownCounter,
    Histogram,
    ObservableCounter,
    ObservableUpDownCounter,
    ObservableGauge,
)

_UNSUPPORTED_KINDS: dict[type, AggregationKind] = {
    Gauge: AggregationKind.LAST_VALUE,
    ExponentialHistogram: AggregationKind.HISTOGRAM,
}


def _number_kind(value: int | float) -> NumberKind:
    if isinstance(value, int) and not isinstance(value, bool):
        return NumberKind.INT64
    return NumberKind.FLOAT64


class _SumPoint:
    """A Sum data point read as a SUM aggregation."""

    kind = AggregationKind.SUM

    def __init__(self, value: int | float) -> None:
        self._value = value

    def sum(self) -> Number:
        return Number(_number_kind(self._value), self._value)


class _HistogramPoint:
    """A Histogram data point read as a MIN_MAX_SUM_COUNT aggregation."""

    kind = AggregationKind.MIN_MAX_SUM_COUNT

    def __init__(self, point: HistogramDataPoint) -> None:
        self._point = point
        self._number_kind = _number_kind(point.sum)

    def _bound(self, field: str, value: float) -> Number:
        if not self._point.count or not math.isfinite(value):
            raise AggregationReadError("no data recorded", {"field": field})
        return Number(self._number_kind, value)

    def min(self) -> Number:
        return self._bound("min", self._point.min)

    def max(self) -> Number:
        return self._bound("max", self._point.max)

    def sum(self) -> Number:
        return Number(self._number_kind, self._point.sum)

    def count(self) -> int:
        return self._point.count


class _UnsupportedPoint:
    def __init__(self, kind: AggregationKind) -> None:
        self.kind = kind


def _descriptor(
    metric: Any, instrument_kind: InstrumentKind, number_kind: NumberKind
) -> Descriptor:
    return Descriptor(
        metric.name,
        instrument_kind,
        number_kind,
        unit=metric.unit or "",
        description=metric.description or "",
    )


def records_from_metrics_data(metrics_data: MetricsData) -> Iterator[MetricRecord]:
    """Yield one MetricRecord per data point of an SDK collection.

    Sum points become SUM aggregations and Histogram points become
    MIN_MAX_SUM_COUNT aggregations. Other point types are yielded with
    an aggregation kind that transform_record does not implement.
    """
    for resource_metrics in metrics_data.resource_metrics:
        resource = Resource(_key_values(resource_metrics.resource.attributes))
        for scope_metrics in resource_metrics.scope_metrics:
            for metric in scope_metrics.metrics:
                data = metric.data
                for point in data.data_points:
                    labels = LabelSet(_key_values(point.attributes))
                    aggregation: Aggregation
                    if isinstance(data, Sum):
                        instrument_kind = (
                            InstrumentKind.COUNTER
                            if data.is_monotonic
                            else InstrumentKind.UP_DOWN_COUNTER
                        )
                        number_kind = _number_kind(point.value)
                        aggregation = _SumPoint(point.value)
                    elif isinstance(data, HistogramData):
                        instrument_kind = InstrumentKind.VALUE_RECORDER
                        number_kind = _number_kind(point.sum)
                        aggregation = _HistogramPoint(point)
                    else:
                        instrument_kind = InstrumentKind.VALUE_OBSERVER
                        number_kind = NumberKind.FLOAT64
                        aggregation = _UnsupportedPoint(
                            _UNSUPPORTED_KINDS.get(type(data), AggregationKind.EXACT)
                        )
                    yield MetricRecord(
                        _descriptor(metric, instrument_kind, number_kind),
                        aggregation,
                        labels=labels,
                        resource=resource,
                    )


class NewRelicMetricExporter(MetricExporter):
    """OpenTelemetry MetricExporter backed by an Exporter.

    Asks the SDK for the Exporter's export kind on every instrument. Points
    of an unimplemented aggregation kind are skipped with a debug log; any
    other failure stops the export and is reported as FAILURE.
    """

    def __init__(self, exporter: Exporter, *, shutdown_exporter: bool = True) -> None:
        temporality = _TEMPORALITY[exporter.export_kind()]
        super().__init__(
            preferred_temporality={
                instrument: temporality for instrument in _INSTRUMENTS
            }
        )
        self._exporter = exporter
        self._shutdown_exporter = shutdown_exporter

    def export(
        self,
        metrics_data: MetricsData,
        timeout_millis: float = 10_000,
        **kwargs: Any,
    ) -> MetricExportResult:
        for record in records_from_metrics_data(metrics_data):
            try:
                self._exporter.export_metrics([record])
            except UnimplementedAggregationError as exc:
                logger.debug("Skipping metric %r: %s", record.descriptor.name, exc)
            except Exception:  # noqa: BLE001
                logger.debug(
                    "Failed to export metric %r",
                    record.descriptor.name,
                    exc_info=True,
                )
                return MetricExportResult.FAILURE
        return MetricExportResult.SUCCESS

    def force_flush(self, timeout_millis: float = 10_000) -> bool:
        return _flush(self._exporter)

    def shutdown(self, timeout_millis: float = 30_000, **kwargs: Any) -> None:
        if self._shutdown_exporter:
            self._exporter.shutdown()
