"""Exporter façade: transforms SDK spans and metrics and forwards them."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from nrotel._config import ExporterConfig
from nrotel._errors import BatchExportError, ServiceNameRequiredError
from nrotel._harvester import (
    Harvester,
    HarvestHandler,
    TransportClient,
)
from nrotel._metric import ExportKind
from nrotel._metric_transform import transform_record
from nrotel._span_transform import transform_span
from nrotel._types import StatusModel

if TYPE_CHECKING:
    from nrotel._metric import MetricRecord
    from nrotel._types import SpanSnapshot


class Exporter:
    """Exports spans and metrics to New Relic through a transport client.

    Spans are exported best effort: every span of a batch is submitted and
    the submission failures are reported together in one BatchExportError.
    Metrics fail fast: the first error aborts the batch and is raised as is.
    """

    def __init__(
        self,
        service_name: str,
        harvester: TransportClient,
        *,
        status_model: StatusModel = StatusModel.OK_ONLY,
    ) -> None:
        self._service_name = service_name
        self._harvester = harvester
        self._status_model = status_model

    @property
    def service_name(self) -> str:
        return self._service_name

    @property
    def harvester(self) -> TransportClient:
        return self._harvester

    def export_kind(self) -> ExportKind:
        """Metrics are expected as deltas over the collection interval."""
        return ExportKind.DELTA

    def export_span(self, span: SpanSnapshot) -> None:
        """Transform and submit a single span."""
        self._harvester.record_span(
            transform_span(self._service_name, span, status_model=self._status_model)
        )

    def export_spans(self, spans: Iterable[SpanSnapshot]) -> None:
        """Transform and submit every span, then report all failures at once."""
        errors: list[str] = []
        for span in spans:
            try:
                self.export_span(span)
            except Exception as exc:  # noqa: BLE001
                errors.append(str(exc))
        if errors:
            raise BatchExportError(errors)

    def export_metrics(self, records: Iterable[MetricRecord]) -> None:
        """Transform and submit metric records, stopping at the first error."""
        for record in records:
            self._harvester.record_metric(transform_record(self._service_name, record))

    def shutdown(self) -> None:
        """Shut down the transport client if it supports it."""
        shutdown = getattr(self._harvester, "shutdown", None)
        if callable(shutdown):
            shutdown()


class OptionalExporter:
    """An exporter that may not have been created.

    Lets the SDK keep calling the export interface after exporter
    construction failed upstream. Calls on an empty wrapper return at once
    without touching any transport client.
    """

    def __init__(self, exporter: Exporter | None = None) -> None:
        self._exporter = exporter

    @property
    def is_initialized(self) -> bool:
        return self._exporter is not None

    @property
    def exporter(self) -> Exporter | None:
        return self._exporter

    def export_kind(self) -> ExportKind:
        return ExportKind.DELTA

    def export_spans(self, spans: Iterable[SpanSnapshot]) -> None:
        if self._exporter is None:
            return
        self._exporter.export_spans(spans)

    def export_metrics(self, records: Iterable[MetricRecord]) -> None:
        if self._exporter is None:
            return
        self._exporter.export_metrics(records)

    def shutdown(self) -> None:
        if self._exporter is None:
            return
        self._exporter.shutdown()


def new_exporter(
    service_name: str = "",
    *,
    harvester: TransportClient | None = None,
    handler: HarvestHandler | None = None,
    config: ExporterConfig | None = None,
) -> Exporter:
    """Create an Exporter.

    The service name falls back to ``config.service_name``. Without an
    explicit harvester, a Harvester delivering to ``handler`` is built from
    ``config`` and started.
    """
    config = config or ExporterConfig(service_name=service_name)
    service_name = service_name or config.service_name
    if not service_name:
        raise ServiceNameRequiredError()
    if harvester is None:
        owned = Harvester(
            handler,
            batch_size=config.batch_size,
            harvest_period_ms=config.harvest_period_ms,
            buffer_size=config.buffer_size,
        )
        owned.start()
        harvester = owned
    return Exporter(service_name, harvester, status_model=config.status_model)
