"""Builds OpenTelemetry tracer and meter providers exporting to New Relic."""

from __future__ import annotations

import atexit
import threading
from collections.abc import Mapping
from typing import Any

from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource as OTelResource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from nrotel._attributes import SERVICE_NAME_KEY
from nrotel._config import ExporterConfig
from nrotel._exporter import Exporter, new_exporter
from nrotel._harvester import HarvestHandler, TransportClient
from nrotel._otel import NewRelicMetricExporter, NewRelicSpanExporter
from nrotel._types import StatusModel


class ExportPipeline:
    """Tracer and meter providers sharing one Exporter."""

    def __init__(
        self,
        tracer_provider: TracerProvider,
        meter_provider: MeterProvider,
        exporter: Exporter,
    ) -> None:
        self.tracer_provider = tracer_provider
        self.meter_provider = meter_provider
        self.exporter = exporter
        self._lock = threading.Lock()
        self._is_shutdown = False

    def shutdown(self) -> None:
        """Flush both providers, then deliver what the exporter still holds.

        Safe to call more than once; also runs at interpreter exit.
        """
        with self._lock:
            if self._is_shutdown:
                return
            self._is_shutdown = True
        atexit.unregister(self.shutdown)
        self.tracer_provider.shutdown()
        self.meter_provider.shutdown()
        self.exporter.shutdown()


def new_export_pipeline(
    service_name: str = "",
    *,
    harvester: TransportClient | None = None,
    handler: HarvestHandler | None = None,
    config: ExporterConfig | None = None,
    resource_attributes: Mapping[str, Any] | None = None,
) -> ExportPipeline:
    """Create tracer and meter providers whose data is exported to New Relic.

    Without a config, only ERROR statuses are reported as errors. Metrics
    are collected every ``harvest_period_ms`` as delta aggregations. Nothing
    is installed globally; pass the providers to
    ``opentelemetry.trace.set_tracer_provider`` and
    ``opentelemetry.metrics.set_meter_provider`` yourself if wanted.
    """
    if config is None:
        # OpenTelemetry leaves the status of successful spans UNSET.
        config = ExporterConfig(
            service_name=service_name, status_model=StatusModel.ERROR_ONLY
        )
    exporter = new_exporter(
        service_name, harvester=harvester, handler=handler, config=config
    )
    attributes: dict[str, Any] = {SERVICE_NAME_KEY: exporter.service_name}
    attributes.update(resource_attributes or {})
    resource = OTelResource.create(attributes)

    tracer_provider = TracerProvider(resource=resource, shutdown_on_exit=False)
    tracer_provider.add_span_processor(
        BatchSpanProcessor(NewRelicSpanExporter(exporter, shutdown_exporter=False))
    )
    reader = PeriodicExportingMetricReader(
        NewRelicMetricExporter(exporter, shutdown_exporter=False),
        export_interval_millis=config.harvest_period_ms,
    )
    meter_provider = MeterProvider(
        resource=resource, metric_readers=[reader], shutdown_on_exit=False
    )

    pipeline = ExportPipeline(tracer_provider, meter_provider, exporter)
    atexit.register(pipeline.shutdown)
    return pipeline
