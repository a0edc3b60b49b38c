"""Cancellable one-second countdown driving ExamSession.tick."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class Countdown:
    """
    Repeating timer on a daemon thread.

    Once cancelled it never starts another tick.
    """

    def __init__(self, on_tick: Callable[[], None], interval: float = 1.0) -> None:
        self._on_tick = on_tick
        self._interval = interval
        self._cancelled = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self.cancelled

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("Countdown already started")

        def _worker() -> None:
            while not self._cancelled.wait(self._interval):
                try:
                    self._on_tick()
                except Exception:
                    logger.exception("Countdown tick failed")
                    self._cancelled.set()

        self._thread = threading.Thread(target=_worker, name="exam_countdown", daemon=True)
        self._thread.start()

    def cancel(self) -> None:
        """Stop ticking. Safe to call from the tick callback itself."""
        self._cancelled.set()

    def join(self, timeout: float | None = None) -> None:
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
