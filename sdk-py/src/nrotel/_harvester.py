"""In-process transport client: buffers records and hands batches to a handler.

The handler owns delivery (serialization, compression, network I/O, retries).
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from nrotel._buffer import RingBuffer
from nrotel._errors import HarvesterClosedError
from nrotel._processor import BackgroundProcessor
from nrotel._telemetry import Metric, Span

logger = logging.getLogger("nrotel.harvester")


class TransportClient(Protocol):
    """What the exporter needs from a transport client."""

    def record_span(self, span: Span) -> None: ...

    def record_metric(self, metric: Metric) -> None: ...


@dataclass(frozen=True)
class HarvestBatch:
    """Records drained from the harvester in one harvest."""

    spans: list[Span] = field(default_factory=list)
    metrics: list[Metric] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.spans or self.metrics)


HarvestHandler = Callable[[HarvestBatch], None]


def _noop_handler(batch: HarvestBatch) -> None:
    """Default handler that discards the batch."""
    logger.debug(
        "Discarding %d spans and %d metrics", len(batch.spans), len(batch.metrics)
    )


class Harvester:
    """Buffers spans and metrics and periodically passes them to a handler.

    Handler failures are logged and never raised: a broken delivery path must
    not affect the instrumented application.
    """

    def __init__(
        self,
        handler: HarvestHandler | None = None,
        *,
        batch_size: int = 512,
        harvest_period_ms: int = 5000,
        buffer_size: int = 8192,
    ) -> None:
        self._handler = handler or _noop_handler
        self._batch_size = batch_size
        self._spans: RingBuffer[Span] = RingBuffer(buffer_size)
        self._metrics: RingBuffer[Metric] = RingBuffer(buffer_size)
        self._processor = BackgroundProcessor(
            self.harvest, interval_ms=harvest_period_ms
        )
        self._closed = False
        self._state_lock = threading.Lock()
        self._harvest_lock = threading.Lock()

    def record_span(self, span: Span) -> None:
        """Queue a span for the next harvest."""
        with self._state_lock:
            if self._closed:
                raise HarvesterClosedError(
                    "harvester is shut down", {"span": span.id}
                )
            self._spans.enqueue(span)

    def record_metric(self, metric: Metric) -> None:
        """Queue a metric for the next harvest."""
        with self._state_lock:
            if self._closed:
                raise HarvesterClosedError(
                    "harvester is shut down", {"metric": metric.name}
                )
            self._metrics.enqueue(metric)

    def harvest(self) -> HarvestBatch:
        """Drain up to batch_size spans and metrics and deliver them."""
        with self._harvest_lock:
            batch = HarvestBatch(
                spans=self._spans.drain(self._batch_size),
                metrics=self._metrics.drain(self._batch_size),
            )
            if batch:
                try:
                    self._handler(batch)
                except Exception:  # noqa: BLE001
                    logger.debug(
                        "Failed to deliver %d spans and %d metrics",
                        len(batch.spans),
                        len(batch.metrics),
                        exc_info=True,
                    )
        return batch

    def start(self) -> None:
        """Start periodic harvesting in a daemon thread."""
        with self._state_lock:
            if self._closed:
                raise HarvesterClosedError("harvester is shut down")
            self._processor.start()

    def shutdown(self) -> None:
        """Stop harvesting and deliver what is left in the buffers.

        Records accepted before this call are all delivered; later ones are
        rejected with HarvesterClosedError.
        """
        with self._state_lock:
            if self._closed:
                return
            self._closed = True
        self._processor.stop()
        while self.harvest():
            pass

    @property
    def is_running(self) -> bool:
        return self._processor.is_running

    @property
    def pending(self) -> tuple[int, int]:
        """Number of buffered (spans, metrics)."""
        return len(self._spans), len(self._metrics)

    @property
    def drop_count(self) -> int:
        """Records dropped because a buffer overflowed."""
        return self._spans.drop_count + self._metrics.drop_count
