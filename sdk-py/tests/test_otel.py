"""Tests for the OpenTelemetry SDK adapters."""

from __future__ import annotations

from collections.abc import Callable

from opentelemetry.metrics import CallbackOptions, Meter, Observation
from opentelemetry.sdk.metrics import Counter, Histogram, MeterProvider
from opentelemetry.sdk.metrics.export import (
    AggregationTemporality,
    InMemoryMetricReader,
    MetricExportResult,
    MetricsData,
)
from opentelemetry.sdk.resources import Resource as OTelResource
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExportResult
from opentelemetry.trace import SpanContext
from opentelemetry.trace import SpanKind as OTelSpanKind
from opentelemetry.trace import Status as OTelStatus
from opentelemetry.trace import StatusCode as OTelStatusCode

from nrotel._aggregation import AggregationKind
from nrotel._attributes import AttributeType, AttributeValue
from nrotel._exporter import Exporter
from nrotel._metric import InstrumentKind
from nrotel._number import Number, NumberKind
from nrotel._otel import (
    NewRelicMetricExporter,
    NewRelicSpanExporter,
    records_from_metrics_data,
    snapshot_from_readable_span,
)
from nrotel._telemetry import Count, Metric, Span, Summary
from nrotel._types import SpanKind, StatusCode

TRACE_ID = 0x4BF92F3577B34DA6A3CE929D0E0E4736
SPAN_ID = 0x00F067AA0BA902B7
PARENT_ID = 0x83887E5D7DA921BA


def _make_readable_span(**overrides: object) -> ReadableSpan:
    """Create a ReadableSpan with sensible defaults."""
    defaults: dict[str, object] = {
        "name": "otel-span",
        "context": SpanContext(trace_id=TRACE_ID, span_id=SPAN_ID, is_remote=False),
        "parent": None,
        "resource": OTelResource({"service.name": "otel-svc"}),
        "attributes": {"http.method": "GET", "retries": 2},
        "kind": OTelSpanKind.SERVER,
        "status": OTelStatus(OTelStatusCode.UNSET),
        "start_time": 1_000_000_000,
        "end_time": 1_500_000_000,
    }
    defaults.update(overrides)
    return ReadableSpan(**defaults)  # type: ignore[arg-type]


class _RecordingClient:
    def __init__(self) -> None:
        self.spans: list[Span] = []
        self.metrics: list[Metric] = []
        self.shutdown_calls = 0
        self.harvests = 0
        self.fail = False

    def record_span(self, span: Span) -> None:
        if self.fail:
            raise RuntimeError("transport down")
        self.spans.append(span)

    def record_metric(self, metric: Metric) -> None:
        if self.fail:
            raise RuntimeError("transport down")
        self.metrics.append(metric)

    def harvest(self) -> None:
        self.harvests += 1

    def shutdown(self) -> None:
        self.shutdown_calls += 1


class TestSnapshotFromReadableSpan:
    def test_identifiers(self) -> None:
        sd = snapshot_from_readable_span(
            _make_readable_span(
                parent=SpanContext(
                    trace_id=TRACE_ID, span_id=PARENT_ID, is_remote=False
                )
            )
        )
        assert sd.trace_id.hex() == "4bf92f3577b34da6a3ce929d0e0e4736"
        assert sd.span_id.hex() == "00f067aa0ba902b7"
        assert sd.parent_span_id.hex() == "83887e5d7da921ba"

    def test_no_parent(self) -> None:
        sd = snapshot_from_readable_span(_make_readable_span())
        assert sd.parent_span_id == bytes(8)

    def test_timing_and_name(self) -> None:
        sd = snapshot_from_readable_span(_make_readable_span())
        assert sd.name == "otel-span"
        assert sd.start_time_ns == 1_000_000_000
        assert sd.end_time_ns == 1_500_000_000

    def test_unended_span_has_zero_duration(self) -> None:
        sd = snapshot_from_readable_span(_make_readable_span(end_time=None))
        assert sd.end_time_ns == sd.start_time_ns

    def test_kind_and_status(self) -> None:
        sd = snapshot_from_readable_span(
            _make_readable_span(
                kind=OTelSpanKind.CLIENT,
                status=OTelStatus(OTelStatusCode.ERROR, "boom"),
            )
        )
        assert sd.kind is SpanKind.CLIENT
        assert sd.status.code is StatusCode.ERROR
        assert sd.status.message == "boom"

    def test_attributes(self) -> None:
        sd = snapshot_from_readable_span(_make_readable_span())
        attrs = {kv.key: kv.value for kv in sd.attributes}
        assert attrs["http.method"] == AttributeValue(AttributeType.STRING, "GET")
        assert attrs["retries"] == AttributeValue(AttributeType.INT64, 2)

    def test_sequence_attributes_are_dropped(self) -> None:
        sd = snapshot_from_readable_span(
            _make_readable_span(attributes={"tags": ("a", "b"), "ok": True})
        )
        assert [kv.key for kv in sd.attributes] == ["ok"]

    def test_resource(self) -> None:
        sd = snapshot_from_readable_span(_make_readable_span())
        assert sd.resource.get("service.name") == AttributeValue(
            AttributeType.STRING, "otel-svc"
        )


class TestNewRelicSpanExporter:
    def test_export_success(self) -> None:
        client = _RecordingClient()
        exporter = NewRelicSpanExporter(Exporter("svc", client))

        result = exporter.export([_make_readable_span()])

        assert result is SpanExportResult.SUCCESS
        assert len(client.spans) == 1
        span = client.spans[0]
        assert span.service_name == "otel-svc"
        assert span.attributes["span.kind"] == "SERVER"
        assert span.attributes["http.method"] == "GET"

    def test_export_empty(self) -> None:
        client = _RecordingClient()
        result = NewRelicSpanExporter(Exporter("svc", client)).export([])
        assert result is SpanExportResult.SUCCESS
        assert client.spans == []

    def test_export_failure_is_reported_not_raised(self) -> None:
        client = _RecordingClient()
        client.fail = True
        result = NewRelicSpanExporter(Exporter("svc", client)).export(
            [_make_readable_span()]
        )
        assert result is SpanExportResult.FAILURE

    def test_force_flush_harvests(self) -> None:
        client = _RecordingClient()
        assert NewRelicSpanExporter(Exporter("svc", client)).force_flush() is True
        assert client.harvests == 1

    def test_shutdown(self) -> None:
        client = _RecordingClient()
        NewRelicSpanExporter(Exporter("svc", client)).shutdown()
        assert client.shutdown_calls == 1

    def test_shutdown_can_leave_exporter_running(self) -> None:
        client = _RecordingClient()
        exporter = Exporter("svc", client)
        NewRelicSpanExporter(exporter, shutdown_exporter=False).shutdown()
        assert client.shutdown_calls == 0


def _collect(record: Callable[[Meter], None]) -> MetricsData:
    """Record measurements on a fresh meter and collect them once."""
    reader = InMemoryMetricReader()
    provider = MeterProvider(
        metric_readers=[reader],
        resource=OTelResource({"service.name": "otel-svc"}),
        shutdown_on_exit=False,
    )
    record(provider.get_meter("tests"))
    data = reader.get_metrics_data()
    provider.shutdown()
    assert data is not None
    return data


def _requests_and_latency(meter: Meter) -> None:
    counter = meter.create_counter("requests", description="Handled requests")
    counter.add(3, {"route": "/a"})
    counter.add(2, {"route": "/a"})
    histogram = meter.create_histogram("latency", unit="ms")
    histogram.record(10)
    histogram.record(30)


def _temperature(options: CallbackOptions) -> list[Observation]:
    return [Observation(21.5)]


class TestRecordsFromMetricsData:
    def test_counter_becomes_sum(self) -> None:
        records = {
            r.descriptor.name: r
            for r in records_from_metrics_data(_collect(_requests_and_latency))
        }
        record = records["requests"]
        assert record.descriptor.instrument_kind is InstrumentKind.COUNTER
        assert record.descriptor.number_kind is NumberKind.INT64
        assert record.descriptor.description == "Handled requests"
        assert record.aggregation.kind is AggregationKind.SUM
        assert record.aggregation.sum() == Number.int64(5)  # type: ignore[attr-defined]
        assert record.labels.get("route") == AttributeValue(AttributeType.STRING, "/a")
        assert record.resource.get("service.name") == AttributeValue(
            AttributeType.STRING, "otel-svc"
        )

    def test_up_down_counter(self) -> None:
        def record(meter: Meter) -> None:
            meter.create_up_down_counter("queue.depth").add(-1.5)

        (rec,) = records_from_metrics_data(_collect(record))
        assert rec.descriptor.instrument_kind is InstrumentKind.UP_DOWN_COUNTER
        assert rec.descriptor.number_kind is NumberKind.FLOAT64
        assert rec.aggregation.sum() == Number.float64(-1.5)  # type: ignore[attr-defined]

    def test_histogram_becomes_min_max_sum_count(self) -> None:
        records = {
            r.descriptor.name: r
            for r in records_from_metrics_data(_collect(_requests_and_latency))
        }
        record = records["latency"]
        agg = record.aggregation
        assert record.descriptor.instrument_kind is InstrumentKind.VALUE_RECORDER
        assert record.descriptor.unit == "ms"
        assert agg.kind is AggregationKind.MIN_MAX_SUM_COUNT
        assert agg.min() == Number.int64(10)  # type: ignore[attr-defined]
        assert agg.max() == Number.int64(30)  # type: ignore[attr-defined]
        assert agg.sum() == Number.int64(40)  # type: ignore[attr-defined]
        assert agg.count() == 2  # type: ignore[attr-defined]

    def test_gauge_is_last_value(self) -> None:
        def record(meter: Meter) -> None:
            meter.create_observable_gauge("temperature", callbacks=[_temperature])

        (rec,) = records_from_metrics_data(_collect(record))
        assert rec.aggregation.kind is AggregationKind.LAST_VALUE


class TestNewRelicMetricExporter:
    def test_prefers_delta_temporality(self) -> None:
        exporter = NewRelicMetricExporter(Exporter("svc", _RecordingClient()))
        preferred = exporter._preferred_temporality
        assert preferred is not None
        assert preferred[Counter] is AggregationTemporality.DELTA
        assert preferred[Histogram] is AggregationTemporality.DELTA

    def test_export_counter_and_histogram(self) -> None:
        client = _RecordingClient()
        exporter = NewRelicMetricExporter(Exporter("svc", client))

        result = exporter.export(_collect(_requests_and_latency))

        assert result is MetricExportResult.SUCCESS
        metrics = {m.name: m for m in client.metrics}
        count = metrics["requests"]
        assert isinstance(count, Count)
        assert count.value == 5.0
        assert count.attributes["route"] == "/a"
        assert count.attributes["service.name"] == "otel-svc"
        assert count.attributes["description"] == "Handled requests"
        summary = metrics["latency"]
        assert isinstance(summary, Summary)
        assert (summary.min, summary.max, summary.sum, summary.count) == (
            10.0,
            30.0,
            40.0,
            2.0,
        )
        assert summary.attributes["unit"] == "ms"

    def test_unimplemented_aggregation_is_skipped(self) -> None:
        def record(meter: Meter) -> None:
            meter.create_observable_gauge("temperature", callbacks=[_temperature])
            meter.create_counter("requests").add(1)

        client = _RecordingClient()
        result = NewRelicMetricExporter(Exporter("svc", client)).export(
            _collect(record)
        )

        assert result is MetricExportResult.SUCCESS
        assert [m.name for m in client.metrics] == ["requests"]

    def test_export_failure_is_reported_not_raised(self) -> None:
        client = _RecordingClient()
        client.fail = True
        result = NewRelicMetricExporter(Exporter("svc", client)).export(
            _collect(_requests_and_latency)
        )
        assert result is MetricExportResult.FAILURE

    def test_force_flush_harvests(self) -> None:
        client = _RecordingClient()
        assert NewRelicMetricExporter(Exporter("svc", client)).force_flush() is True
        assert client.harvests == 1

    def test_shutdown(self) -> None:
        client = _RecordingClient()
        NewRelicMetricExporter(Exporter("svc", client)).shutdown()
        assert client.shutdown_calls == 1

    def test_shutdown_can_leave_exporter_running(self) -> None:
        client = _RecordingClient()
        exporter = NewRelicMetricExporter(
            Exporter("svc", client), shutdown_exporter=False
        )
        exporter.shutdown()
        assert client.shutdown_calls == 0
