"""Tests for _processor module."""

import time

from nrotel._processor import BackgroundProcessor


def test_start_and_stop() -> None:
    proc = BackgroundProcessor(lambda: None, interval_ms=50)
    proc.start()
    assert proc.is_running
    proc.stop()
    assert not proc.is_running


def test_tick_called_periodically() -> None:
    ticks: list[float] = []
    proc = BackgroundProcessor(lambda: ticks.append(time.monotonic()), interval_ms=20)
    proc.start()
    time.sleep(0.2)
    proc.stop()
    assert len(ticks) >= 2


def test_tick_exception_does_not_crash() -> None:
    calls: list[int] = []

    def bad_tick() -> None:
        calls.append(1)
        raise RuntimeError("tick exploded")

    proc = BackgroundProcessor(bad_tick, interval_ms=20)
    proc.start()
    time.sleep(0.15)
    assert proc.is_running
    proc.stop()
    assert len(calls) >= 2


def test_thread_is_daemon() -> None:
    proc = BackgroundProcessor(lambda: None, interval_ms=50)
    proc.start()
    assert proc._thread is not None
    assert proc._thread.daemon is True
    proc.stop()


def test_double_start_is_idempotent() -> None:
    proc = BackgroundProcessor(lambda: None, interval_ms=50)
    proc.start()
    thread1 = proc._thread
    proc.start()
    assert proc._thread is thread1
    proc.stop()
