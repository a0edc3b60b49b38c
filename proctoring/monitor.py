"""Violation monitor: turns environment signals into violation tags."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from proctoring.environment import (
    BEFORE_UNLOAD,
    CONTEXT_MENU,
    FULLSCREEN_CHANGE,
    VISIBILITY_CHANGE,
    SignalEvent,
    SignalHandler,
    SignalSource,
)

logger = logging.getLogger(__name__)

# Tag literals are matched by substring in the policy; keep them verbatim.
TAB_SWITCH = "Tab switch detected"
EXITED_FULLSCREEN = "Exited fullscreen"
RIGHT_CLICK = "Right click attempt"

ViolationCallback = Callable[[str], None]
StopMonitoring = Callable[[], None]


class ViolationMonitor:
    """
    Watches a signal source for behaviour that breaks exam rules.

    The monitor holds no state besides its listener registrations. It does
    not decide termination; every signal is reported to the owner.
    """

    def __init__(self, source: SignalSource) -> None:
        self._source = source

    def start_monitoring(self, on_violation: ViolationCallback) -> StopMonitoring:
        """Register all listeners.

        Returns:
            Callable that removes every listener registered by this call.
        """
        source = self._source

        def handle_visibility(event: SignalEvent) -> None:
            if source.hidden:
                on_violation(TAB_SWITCH)

        def handle_fullscreen(event: SignalEvent) -> None:
            if not source.fullscreen_active:
                on_violation(EXITED_FULLSCREEN)

        def handle_context_menu(event: SignalEvent) -> None:
            event.prevent_default()
            on_violation(RIGHT_CLICK)

        def handle_before_unload(event: SignalEvent) -> None:
            event.prevent_default()

        registrations: list[tuple[str, SignalHandler]] = [
            (VISIBILITY_CHANGE, handle_visibility),
            (FULLSCREEN_CHANGE, handle_fullscreen),
            (CONTEXT_MENU, handle_context_menu),
            (BEFORE_UNLOAD, handle_before_unload),
        ]
        for event_type, handler in registrations:
            source.add_listener(event_type, handler)
        logger.debug("Monitoring started (%d listeners)", len(registrations))

        def stop_monitoring() -> None:
            while registrations:
                event_type, handler = registrations.pop()
                source.remove_listener(event_type, handler)
            logger.debug("Monitoring stopped")

        return stop_monitoring

    @contextmanager
    def monitoring(self, on_violation: ViolationCallback) -> Iterator[None]:
        """Monitor for the duration of a with-block."""
        stop = self.start_monitoring(on_violation)
        try:
            yield
        finally:
            stop()

    def enter_fullscreen_mode(self) -> None:
        """Request fullscreen. Failure leaves the exam running without it."""
        try:
            self._source.request_fullscreen()
        except Exception as e:
            logger.debug(f"Fullscreen request ignored: {e}")
