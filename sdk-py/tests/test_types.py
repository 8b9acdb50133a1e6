"""Tests for _types module."""

import pytest

from nrotel._types import (
    SpanKind,
    SpanSnapshot,
    Status,
    StatusCode,
    StatusModel,
)


def _make_snapshot(**overrides: object) -> SpanSnapshot:
    defaults: dict[str, object] = {
        "trace_id": bytes(range(16)),
        "span_id": bytes(range(8)),
        "name": "test-span",
        "start_time_ns": 1000,
        "end_time_ns": 2000,
    }
    defaults.update(overrides)
    return SpanSnapshot(**defaults)  # type: ignore[arg-type]


def test_status_code_values() -> None:
    assert StatusCode.UNSET == 0
    assert StatusCode.OK == 1
    assert StatusCode.ERROR == 2


def test_snapshot_defaults() -> None:
    sd = _make_snapshot()
    assert sd.parent_span_id == bytes(8)
    assert sd.status == Status(StatusCode.UNSET, "")
    assert sd.kind is SpanKind.UNSPECIFIED
    assert sd.attributes == ()
    assert len(sd.resource) == 0


def test_snapshot_is_frozen() -> None:
    sd = _make_snapshot()
    try:
        sd.name = "changed"  # type: ignore[misc]
        assert False, "Should have raised"
    except AttributeError:
        pass


def test_attributes_list_becomes_tuple() -> None:
    sd = _make_snapshot(attributes=[])
    assert sd.attributes == ()


@pytest.mark.parametrize(
    "overrides",
    [
        {"trace_id": bytes(8)},
        {"span_id": bytes(16)},
        {"parent_span_id": bytes(4)},
        {"start_time_ns": 2000, "end_time_ns": 1000},
    ],
)
def test_snapshot_validation(overrides: dict[str, object]) -> None:
    with pytest.raises(ValueError):
        _make_snapshot(**overrides)


@pytest.mark.parametrize(
    ("model", "code", "is_error"),
    [
        (StatusModel.OK_ONLY, StatusCode.OK, False),
        (StatusModel.OK_ONLY, StatusCode.UNSET, True),
        (StatusModel.OK_ONLY, StatusCode.ERROR, True),
        (StatusModel.ERROR_ONLY, StatusCode.OK, False),
        (StatusModel.ERROR_ONLY, StatusCode.UNSET, False),
        (StatusModel.ERROR_ONLY, StatusCode.ERROR, True),
    ],
)
def test_status_model(model: StatusModel, code: StatusCode, is_error: bool) -> None:
    assert model.is_error(code) is is_error
