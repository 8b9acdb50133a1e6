"""Aggregation kinds and the Sum / MinMaxSumCount aggregators."""

from __future__ import annotations

import enum
import threading
from typing import Protocol

from nrotel._errors import AggregationReadError
from nrotel._number import Number, NumberKind, check_number


class AggregationKind(enum.Enum):
    """Discriminant of an aggregation snapshot."""

    SUM = "sum"
    MIN_MAX_SUM_COUNT = "min_max_sum_count"
    LAST_VALUE = "last_value"
    HISTOGRAM = "histogram"
    EXACT = "exact"


class Aggregation(Protocol):
    """Anything carrying an aggregation kind."""

    @property
    def kind(self) -> AggregationKind: ...


class SumAggregation(Aggregation, Protocol):
    def sum(self) -> Number: ...


class MinMaxSumCountAggregation(Aggregation, Protocol):
    def min(self) -> Number: ...

    def max(self) -> Number: ...

    def sum(self) -> Number: ...

    def count(self) -> int: ...


class SumAggregator:
    """Running sum of recorded values."""

    def __init__(self, number_kind: NumberKind = NumberKind.INT64) -> None:
        self._number_kind = number_kind
        self._lock = threading.Lock()
        self._reset()

    def _reset(self) -> None:
        self._sum: int | float = 0.0 if self._number_kind is NumberKind.FLOAT64 else 0
        self._recorded = False

    @property
    def kind(self) -> AggregationKind:
        return AggregationKind.SUM

    def update(self, value: int | float) -> None:
        value = check_number(self._number_kind, value)
        with self._lock:
            self._sum += value
            self._recorded = True

    def sum(self) -> Number:
        with self._lock:
            if not self._recorded:
                raise AggregationReadError("no data recorded", {"field": "sum"})
            return Number(self._number_kind, self._sum)

    def checkpoint(self) -> SumAggregator:
        """Move the current state into a new aggregator and reset this one."""
        snapshot = SumAggregator(self._number_kind)
        with self._lock:
            snapshot._sum = self._sum
            snapshot._recorded = self._recorded
            self._reset()
        return snapshot


class MinMaxSumCountAggregator:
    """Tracks the minimum, maximum, sum and count of recorded values."""

    def __init__(self, number_kind: NumberKind = NumberKind.INT64) -> None:
        self._number_kind = number_kind
        self._lock = threading.Lock()
        self._reset()

    def _reset(self) -> None:
        self._count = 0
        self._sum: int | float = 0.0 if self._number_kind is NumberKind.FLOAT64 else 0
        self._min: int | float | None = None
        self._max: int | float | None = None

    @property
    def kind(self) -> AggregationKind:
        return AggregationKind.MIN_MAX_SUM_COUNT

    def update(self, value: int | float) -> None:
        value = check_number(self._number_kind, value)
        with self._lock:
            self._count += 1
            self._sum += value
            if self._min is None or value < self._min:
                self._min = value
            if self._max is None or value > self._max:
                self._max = value

    def min(self) -> Number:
        with self._lock:
            if self._min is None:
                raise AggregationReadError("no data recorded", {"field": "min"})
            return Number(self._number_kind, self._min)

    def max(self) -> Number:
        with self._lock:
            if self._max is None:
                raise AggregationReadError("no data recorded", {"field": "max"})
            return Number(self._number_kind, self._max)

    def sum(self) -> Number:
        with self._lock:
            return Number(self._number_kind, self._sum)

    def count(self) -> int:
        with self._lock:
            return self._count

    def checkpoint(self) -> MinMaxSumCountAggregator:
        """Move the current state into a new aggregator and reset this one."""
        snapshot = MinMaxSumCountAggregator(self._number_kind)
        with self._lock:
            snapshot._count = self._count
            snapshot._sum = self._sum
            snapshot._min = self._min
            snapshot._max = self._max
            self._reset()
        return snapshot
