#!/usr/bin/env python3
"""Export-path overhead benchmark.

Measures the per-item cost of:
  1. transform_span   (attribute merge + id encoding)
  2. transform_record (attribute merge + aggregation read)
  3. Harvester.record_span (ring buffer enqueue)

Usage:
    python sdk-py/benchmarks/bench_overhead.py
"""

from __future__ import annotations

import time

from nrotel._aggregation import MinMaxSumCountAggregator
from nrotel._attributes import KeyValue, LabelSet, Resource
from nrotel._harvester import Harvester
from nrotel._metric import Descriptor, InstrumentKind, MetricRecord
from nrotel._metric_transform import transform_record
from nrotel._span_transform import transform_span
from nrotel._types import SpanKind, SpanSnapshot, Status, StatusCode

RESOURCE = Resource(
    [
        KeyValue.string("service.name", "bench"),
        KeyValue.string("host.name", "worker-01"),
        KeyValue.string("telemetry.sdk.language", "python"),
    ]
)


def _snapshot() -> SpanSnapshot:
    return SpanSnapshot(
        trace_id=bytes.fromhex("0123456789abcdef0123456789abcdef"),
        span_id=bytes.fromhex("abcdef0123456789"),
        parent_span_id=bytes.fromhex("1234567890abcdef"),
        name="bench",
        start_time_ns=1000,
        end_time_ns=2000,
        status=Status(StatusCode.ERROR, "boom"),
        kind=SpanKind.SERVER,
        attributes=tuple(KeyValue.int64(f"attr.{i}", i) for i in range(8)),
        resource=RESOURCE,
    )


def bench_transform_span(iterations: int = 200_000) -> float:
    """Benchmark: span transform with 8 attributes and 3 resource attributes."""
    sd = _snapshot()

    # Warmup
    for _ in range(5000):
        transform_span("bench", sd)

    start = time.perf_counter_ns()
    for _ in range(iterations):
        transform_span("bench", sd)
    elapsed = time.perf_counter_ns() - start

    return elapsed / iterations


def bench_transform_record(iterations: int = 200_000) -> float:
    """Benchmark: MinMaxSumCount record transform."""
    agg = MinMaxSumCountAggregator()
    for value in (1, 10, 100):
        agg.update(value)
    record = MetricRecord(
        Descriptor("bench.latency", InstrumentKind.VALUE_RECORDER, unit="ms"),
        agg,
        labels=LabelSet([KeyValue.string("route", "/infer")]),
        resource=RESOURCE,
    )

    # Warmup
    for _ in range(5000):
        transform_record("bench", record)

    start = time.perf_counter_ns()
    for _ in range(iterations):
        transform_record("bench", record)
    elapsed = time.perf_counter_ns() - start

    return elapsed / iterations


def bench_record_span(iterations: int = 500_000) -> float:
    """Benchmark: harvester enqueue cost only."""
    harvester = Harvester(buffer_size=iterations + 1000)
    span = transform_span("bench", _snapshot())

    # Warmup
    for _ in range(5000):
        harvester.record_span(span)

    start = time.perf_counter_ns()
    for _ in range(iterations):
        harvester.record_span(span)
    elapsed = time.perf_counter_ns() - start

    return elapsed / iterations


def main() -> None:
    print("=" * 60)
    print("nrotel Export Overhead Benchmark")
    print("=" * 60)

    results: list[tuple[str, float, str]] = []

    ns = bench_record_span()
    status = "PASS" if ns < 500 else "WARN" if ns < 2000 else "FAIL"
    results.append(("Harvester record_span", ns, f"{status} (target < 500ns)"))

    ns = bench_transform_span()
    status = "PASS" if ns < 10000 else "WARN" if ns < 20000 else "FAIL"
    results.append(("transform_span (8 attrs)", ns, f"{status} (target < 10μs)"))

    ns = bench_transform_record()
    status = "PASS" if ns < 10000 else "WARN" if ns < 20000 else "FAIL"
    results.append(("transform_record (summary)", ns, f"{status} (target < 10μs)"))

    print()
    for name, ns_val, note in results:
        if ns_val >= 1000:
            display = f"{ns_val / 1000:.2f}μs"
        else:
            display = f"{ns_val:.0f}ns"
        print(f"  {name:40s}  {display:>10s}   {note}")

    print()
    all_pass = all("PASS" in r[2] or "WARN" in r[2] for r in results)
    if all_pass:
        print("All benchmarks within acceptable range.")
    else:
        print("WARNING: Some benchmarks exceeded target. Review above.")


if __name__ == "__main__":
    main()
