"""Exporter error hierarchy."""

from __future__ import annotations

from typing import Any


class NrotelError(Exception):
    """Base exception for all exporter errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ServiceNameRequiredError(NrotelError, ValueError):
    """Raised when an exporter is built without a service name."""

    def __init__(self) -> None:
        super().__init__("service name is required")


class ConfigError(NrotelError, ValueError):
    """Raised when configuration values are invalid."""


class UnimplementedAggregationError(NrotelError):
    """Raised for aggregation kinds the transform layer does not support."""

    def __init__(self, kind: object) -> None:
        super().__init__("unimplemented aggregation", {"kind": kind})
        self.kind = kind


class AggregationReadError(NrotelError):
    """Raised when a value cannot be read out of an aggregation."""


class HarvesterClosedError(NrotelError):
    """Raised when a record is submitted to a harvester that was shut down."""


class BatchExportError(NrotelError):
    """One or more items of a span batch could not be submitted.

    Only the failure messages are kept, not the identity of the failed items.
    """

    def __init__(self, messages: list[str]) -> None:
        self.messages = list(messages)
        super().__init__("; ".join(self.messages))
