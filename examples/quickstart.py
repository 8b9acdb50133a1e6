"""nrotel Quick Start: trace and meter with OpenTelemetry, export to New Relic."""

import logging

from nrotel import HarvestBatch, new_export_pipeline

logging.basicConfig(level=logging.DEBUG)


def deliver(batch: HarvestBatch) -> None:
    """Stand-in for a real delivery client."""
    for span in batch.spans:
        print(f"span   {span.name:20s} {span.duration_ms:8.3f}ms {span.attributes}")
    for metric in batch.metrics:
        print(f"metric {metric.name:20s} {metric}")


# 1. Build tracer and meter providers exporting to New Relic (nothing is set globally)
pipeline = new_export_pipeline(
    "my-inference-service",
    handler=deliver,
    resource_attributes={"environment": "development"},
)
tracer = pipeline.tracer_provider.get_tracer("quickstart")
meter = pipeline.meter_provider.get_meter("quickstart")
requests = meter.create_counter("inference.requests")
latency = meter.create_histogram("inference.latency", unit="ms")

# 2. Trace an operation and record its metrics
with tracer.start_as_current_span("image-generation") as span:
    span.set_attribute("ai.model.name", "stable-diffusion-xl")
    with tracer.start_as_current_span("preprocessing") as child:
        child.set_attribute("step", "tokenize")
    for value in (12, 48, 30):
        requests.add(1, {"model": "stable-diffusion-xl"})
        latency.record(value, {"model": "stable-diffusion-xl"})

# 3. Shutdown (flushes remaining spans and metrics)
pipeline.shutdown()
