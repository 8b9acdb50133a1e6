"""Tagged attribute values, key/value pairs and attribute sets."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from nrotel._number import NumberKind, check_number

Scalar = bool | int | float | str

SERVICE_NAME_KEY = "service.name"
SPAN_KIND_KEY = "span.kind"
ERROR_CODE_KEY = "error.code"
ERROR_MESSAGE_KEY = "error.message"
UNIT_KEY = "unit"
DESCRIPTION_KEY = "description"

INSTRUMENTATION_PROVIDER_KEY = "instrumentation.provider"
INSTRUMENTATION_PROVIDER_VALUE = "opentelemetry"
COLLECTOR_NAME_KEY = "collector.name"
COLLECTOR_NAME_VALUE = "newrelic-opentelemetry-exporter"


class AttributeType(enum.Enum):
    """Type tag of an attribute value."""

    BOOL = "bool"
    INT32 = "int32"
    INT64 = "int64"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    STRING = "string"


_NUMBER_KINDS: dict[AttributeType, NumberKind] = {
    AttributeType.INT32: NumberKind.INT32,
    AttributeType.INT64: NumberKind.INT64,
    AttributeType.UINT32: NumberKind.UINT32,
    AttributeType.UINT64: NumberKind.UINT64,
    AttributeType.FLOAT32: NumberKind.FLOAT32,
    AttributeType.FLOAT64: NumberKind.FLOAT64,
}


@dataclass(frozen=True)
class AttributeValue:
    """A closed tagged union over the supported attribute value types."""

    type: AttributeType
    value: Scalar

    def __post_init__(self) -> None:
        if self.type is AttributeType.BOOL:
            if not isinstance(self.value, bool):
                raise TypeError(f"bool attribute requires bool, got {type(self.value).__name__}")
        elif self.type is AttributeType.STRING:
            if not isinstance(self.value, str):
                raise TypeError(f"string attribute requires str, got {type(self.value).__name__}")
        else:
            normalized = check_number(_NUMBER_KINDS[self.type], self.value)
            object.__setattr__(self, "value", normalized)

    @classmethod
    def from_python(cls, value: object) -> AttributeValue | None:
        """Infer the tag of a plain Python value.

        Returns None for values of any other type (sequences, None, bytes...).
        """
        # bool first: it is a subclass of int.
        if isinstance(value, bool):
            return cls(AttributeType.BOOL, value)
        if isinstance(value, int):
            if -(2**63) <= value < 2**63:
                return cls(AttributeType.INT64, value)
            if 0 <= value < 2**64:
                return cls(AttributeType.UINT64, value)
            return None
        if isinstance(value, float):
            return cls(AttributeType.FLOAT64, value)
        if isinstance(value, str):
            return cls(AttributeType.STRING, value)
        return None

    def as_scalar(self) -> Scalar:
        """Coerce to the scalar type the backend accepts for this tag."""
        kind = self.type
        if kind is AttributeType.BOOL:
            return bool(self.value)
        if kind in (
            AttributeType.INT32,
            AttributeType.INT64,
            AttributeType.UINT32,
            AttributeType.UINT64,
        ):
            return int(self.value)
        if kind in (AttributeType.FLOAT32, AttributeType.FLOAT64):
            return float(self.value)
        return str(self.value)

    def as_string(self) -> str:
        if self.type is AttributeType.STRING:
            return str(self.value)
        if self.type is AttributeType.BOOL:
            return "true" if self.value else "false"
        return str(self.as_scalar())


@dataclass(frozen=True)
class KeyValue:
    """A single attribute."""

    key: str
    value: AttributeValue

    @classmethod
    def boolean(cls, key: str, value: bool) -> KeyValue:
        return cls(key, AttributeValue(AttributeType.BOOL, value))

    @classmethod
    def int32(cls, key: str, value: int) -> KeyValue:
        return cls(key, AttributeValue(AttributeType.INT32, value))

    @classmethod
    def int64(cls, key: str, value: int) -> KeyValue:
        return cls(key, AttributeValue(AttributeType.INT64, value))

    @classmethod
    def uint32(cls, key: str, value: int) -> KeyValue:
        return cls(key, AttributeValue(AttributeType.UINT32, value))

    @classmethod
    def uint64(cls, key: str, value: int) -> KeyValue:
        return cls(key, AttributeValue(AttributeType.UINT64, value))

    @classmethod
    def float32(cls, key: str, value: float) -> KeyValue:
        return cls(key, AttributeValue(AttributeType.FLOAT32, value))

    @classmethod
    def float64(cls, key: str, value: float) -> KeyValue:
        return cls(key, AttributeValue(AttributeType.FLOAT64, value))

    @classmethod
    def string(cls, key: str, value: str) -> KeyValue:
        return cls(key, AttributeValue(AttributeType.STRING, value))


class AttributeSet:
    """Immutable, unordered set of attributes with unique keys.

    When a key is given twice the last value wins. Iteration is in sorted key
    order.
    """

    __slots__ = ("_attrs",)

    def __init__(self, attributes: Iterable[KeyValue] = ()) -> None:
        unique: dict[str, KeyValue] = {}
        for kv in attributes:
            unique[kv.key] = kv
        self._attrs: tuple[KeyValue, ...] = tuple(
            unique[key] for key in sorted(unique)
        )

    def __iter__(self) -> Iterator[KeyValue]:
        return iter(self._attrs)

    def __len__(self) -> int:
        return len(self._attrs)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._attrs == other._attrs  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._attrs))

    def __repr__(self) -> str:
        items = ", ".join(f"{kv.key}={kv.value.value!r}" for kv in self._attrs)
        return f"{type(self).__name__}({items})"

    def get(self, key: str) -> AttributeValue | None:
        for kv in self._attrs:
            if kv.key == key:
                return kv.value
        return None


class Resource(AttributeSet):
    """Attributes describing the process or service emitting telemetry."""

    __slots__ = ()


class LabelSet(AttributeSet):
    """Labels attached to a metric at recording time."""

    __slots__ = ()
