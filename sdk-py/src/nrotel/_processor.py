"""Background thread that runs a harvest callback periodically."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger("nrotel.processor")


class BackgroundProcessor:
    """Daemon thread calling ``tick`` every ``interval_ms`` milliseconds."""

    def __init__(self, tick: Callable[[], None], *, interval_ms: int = 5000) -> None:
        self._tick = tick
        self._interval_s = interval_ms / 1000.0
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start the background loop."""
        if self._thread is not None:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name="nrotel-harvester", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        """Signal stop and wait for the loop to exit."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5.0)
            self._thread = None

    def _run(self) -> None:
        while not self._stop_event.wait(timeout=self._interval_s):
            try:
                self._tick()
            except Exception:  # noqa: BLE001
                logger.debug("Harvest tick failed", exc_info=True)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
