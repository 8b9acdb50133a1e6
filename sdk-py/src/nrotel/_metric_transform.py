"""Metric record transformation into New Relic Count and Summary metrics.

Attribute precedence, lowest first: resource, labels, instrument unit and
description. ``service.name`` is then set from the exporter's service name
only when neither the resource nor the labels provided one, so unlike spans
the exporter argument is a fallback here. The ``instrumentation.provider`` and
``collector.name`` attributes are always written last.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar, cast

from nrotel._aggregation import (
    AggregationKind,
    MinMaxSumCountAggregation,
    SumAggregation,
)
from nrotel._attributes import (
    COLLECTOR_NAME_KEY,
    COLLECTOR_NAME_VALUE,
    DESCRIPTION_KEY,
    INSTRUMENTATION_PROVIDER_KEY,
    INSTRUMENTATION_PROVIDER_VALUE,
    SERVICE_NAME_KEY,
    UNIT_KEY,
    LabelSet,
    Resource,
    Scalar,
)
from nrotel._errors import AggregationReadError, UnimplementedAggregationError
from nrotel._metric import Descriptor, MetricRecord
from nrotel._number import Number, NumberKind
from nrotel._telemetry import Count, Metric, Summary

T = TypeVar("T")


def metric_attributes(
    service_name: str,
    resource: Resource,
    descriptor: Descriptor | None,
    labels: LabelSet,
) -> dict[str, Scalar]:
    attrs: dict[str, Scalar] = {}
    for kv in resource:
        attrs[kv.key] = kv.value.as_scalar()
    # Labels take precedence over resource attributes with the same key.
    for kv in labels:
        attrs[kv.key] = kv.value.as_scalar()

    if descriptor is not None:
        if descriptor.unit:
            attrs[UNIT_KEY] = descriptor.unit
        if descriptor.description:
            attrs[DESCRIPTION_KEY] = descriptor.description

    if service_name and SERVICE_NAME_KEY not in attrs:
        attrs[SERVICE_NAME_KEY] = service_name

    attrs[INSTRUMENTATION_PROVIDER_KEY] = INSTRUMENTATION_PROVIDER_VALUE
    attrs[COLLECTOR_NAME_KEY] = COLLECTOR_NAME_VALUE
    return attrs


def _read(field: str, accessor: Callable[[], T]) -> T:
    try:
        return accessor()
    except AggregationReadError:
        raise
    except Exception as exc:  # noqa: BLE001
        raise AggregationReadError(
            f"failed to read {field}", {"error": exc}
        ) from exc


def _coerce(field: str, number: Number, kind: NumberKind) -> float:
    try:
        return number.coerce_to_float64(kind)
    except (TypeError, ValueError) as exc:
        raise AggregationReadError(
            f"{field} is not a valid {kind.value} number", {"error": exc}
        ) from exc


def _sum(
    descriptor: Descriptor, attrs: dict[str, Scalar], agg: SumAggregation
) -> Count:
    total = _read("sum", agg.sum)
    return Count(
        name=descriptor.name,
        attributes=attrs,
        value=_coerce("sum", total, descriptor.number_kind),
    )


def _min_max_sum_count(
    descriptor: Descriptor,
    attrs: dict[str, Scalar],
    agg: MinMaxSumCountAggregation,
) -> Summary:
    minimum = _read("min", agg.min)
    maximum = _read("max", agg.max)
    total = _read("sum", agg.sum)
    count = _read("count", agg.count)
    kind = descriptor.number_kind
    return Summary(
        name=descriptor.name,
        attributes=attrs,
        count=float(count),
        sum=_coerce("sum", total, kind),
        min=_coerce("min", minimum, kind),
        max=_coerce("max", maximum, kind),
    )


def transform_record(service_name: str, record: MetricRecord) -> Metric:
    """Transform a metric record into a Count or Summary.

    Raises UnimplementedAggregationError for aggregation kinds other than
    SUM and MIN_MAX_SUM_COUNT, and AggregationReadError when a value cannot
    be read from the aggregation.
    """
    descriptor = record.descriptor
    agg = record.aggregation
    kind = agg.kind

    if kind is AggregationKind.SUM:
        attrs = metric_attributes(
            service_name, record.resource, descriptor, record.labels
        )
        return _sum(descriptor, attrs, cast(SumAggregation, agg))
    if kind is AggregationKind.MIN_MAX_SUM_COUNT:
        attrs = metric_attributes(
            service_name, record.resource, descriptor, record.labels
        )
        return _min_max_sum_count(
            descriptor, attrs, cast(MinMaxSumCountAggregation, agg)
        )
    raise UnimplementedAggregationError(kind)
