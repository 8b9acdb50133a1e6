"""Exporter configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from nrotel._errors import ConfigError
from nrotel._types import StatusModel

ENV_SERVICE_NAME = "NEW_RELIC_SERVICE_NAME"
ENV_HARVEST_PERIOD_MS = "NEW_RELIC_HARVEST_PERIOD_MS"
ENV_BATCH_SIZE = "NEW_RELIC_BATCH_SIZE"
ENV_BUFFER_SIZE = "NEW_RELIC_BUFFER_SIZE"
ENV_SPAN_STATUS_MODEL = "NEW_RELIC_SPAN_STATUS_MODEL"


def _positive_int(name: str, raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError("not an integer", {"variable": name, "value": raw}) from None
    if value <= 0:
        raise ConfigError("must be positive", {"variable": name, "value": raw})
    return value


@dataclass(frozen=True)
class ExporterConfig:
    """Immutable exporter configuration."""

    service_name: str = ""
    harvest_period_ms: int = 5000
    batch_size: int = 512
    buffer_size: int = 8192
    status_model: StatusModel = StatusModel.OK_ONLY

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, **overrides: Any
    ) -> ExporterConfig:
        """Build a config from NEW_RELIC_* variables, then apply overrides."""
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        if ENV_SERVICE_NAME in env:
            values["service_name"] = env[ENV_SERVICE_NAME]
        if ENV_HARVEST_PERIOD_MS in env:
            values["harvest_period_ms"] = _positive_int(
                ENV_HARVEST_PERIOD_MS, env[ENV_HARVEST_PERIOD_MS]
            )
        if ENV_BATCH_SIZE in env:
            values["batch_size"] = _positive_int(ENV_BATCH_SIZE, env[ENV_BATCH_SIZE])
        if ENV_BUFFER_SIZE in env:
            values["buffer_size"] = _positive_int(ENV_BUFFER_SIZE, env[ENV_BUFFER_SIZE])
        if ENV_SPAN_STATUS_MODEL in env:
            raw = env[ENV_SPAN_STATUS_MODEL]
            try:
                values["status_model"] = StatusModel(raw.strip().lower())
            except ValueError:
                raise ConfigError(
                    "unknown span status model",
                    {"variable": ENV_SPAN_STATUS_MODEL, "value": raw},
                ) from None
        return replace(cls(**values), **overrides)
