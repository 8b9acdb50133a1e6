"""Numeric kinds and the coercion of tagged numbers to float64."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass


class NumberKind(enum.Enum):
    """Storage kind of a number."""

    INT32 = "int32"
    INT64 = "int64"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"


INTEGER_KINDS = frozenset(
    {NumberKind.INT32, NumberKind.INT64, NumberKind.UINT32, NumberKind.UINT64}
)

_INTEGER_RANGES: dict[NumberKind, tuple[int, int]] = {
    NumberKind.INT32: (-(2**31), 2**31 - 1),
    NumberKind.INT64: (-(2**63), 2**63 - 1),
    NumberKind.UINT32: (0, 2**32 - 1),
    NumberKind.UINT64: (0, 2**64 - 1),
}


def to_float32(value: float) -> float:
    """Round a float to single precision and widen it back."""
    try:
        return float(struct.unpack("<f", struct.pack("<f", value))[0])
    except OverflowError:
        raise ValueError(f"{value!r} does not fit in a float32") from None


def check_number(kind: NumberKind, value: object) -> int | float:
    """Validate that *value* is representable as *kind* and normalize it."""
    if isinstance(value, bool):
        raise TypeError(f"bool is not a valid {kind.value} number")
    if kind in INTEGER_KINDS:
        if not isinstance(value, int):
            raise TypeError(f"{kind.value} number requires int, got {type(value).__name__}")
        low, high = _INTEGER_RANGES[kind]
        if not low <= value <= high:
            raise ValueError(f"{value} is out of range for {kind.value}")
        return value
    if not isinstance(value, (int, float)):
        raise TypeError(f"{kind.value} number requires float, got {type(value).__name__}")
    if kind is NumberKind.FLOAT32:
        return to_float32(float(value))
    return float(value)


@dataclass(frozen=True)
class Number:
    """A number tagged with the kind it was recorded as."""

    kind: NumberKind
    value: int | float

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", check_number(self.kind, self.value))

    @classmethod
    def int64(cls, value: int) -> Number:
        return cls(NumberKind.INT64, value)

    @classmethod
    def float64(cls, value: float) -> Number:
        return cls(NumberKind.FLOAT64, value)

    def coerce_to_float64(self, kind: NumberKind | None = None) -> float:
        """Widen to float64, reading the value as *kind*.

        *kind* defaults to the number's own tag. A value that is not
        representable as *kind* raises TypeError or ValueError. Integers
        beyond 2**53 lose precision.
        """
        kind = kind or self.kind
        value = self.value if kind is self.kind else check_number(kind, self.value)
        if kind in INTEGER_KINDS:
            return float(int(value))
        # float32 values were rounded by check_number, widening is exact.
        return float(value)
