"""
Environment signal sources.

The monitor never touches a real browser or terminal directly. It registers
handlers on a SignalSource, which delivers visibility, fullscreen, context
menu and unload events.
"""

from __future__ import annotations

import logging
import re
import signal
import sys
import threading
from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from typing import TextIO

from proctoring.errors import FullscreenUnavailable

logger = logging.getLogger(__name__)

VISIBILITY_CHANGE = "visibilitychange"
FULLSCREEN_CHANGE = "fullscreenchange"
CONTEXT_MENU = "contextmenu"
BEFORE_UNLOAD = "beforeunload"

SIGNAL_TYPES = (VISIBILITY_CHANGE, FULLSCREEN_CHANGE, CONTEXT_MENU, BEFORE_UNLOAD)


@dataclass
class SignalEvent:
    """Event delivered to a signal handler."""

    type: str
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


SignalHandler = Callable[[SignalEvent], None]


class SignalSource(ABC):
    """Capability the violation monitor depends on."""

    @property
    @abstractmethod
    def hidden(self) -> bool:
        """Whether the exam document is currently hidden."""

    @property
    @abstractmethod
    def fullscreen_active(self) -> bool:
        """Whether the exam is currently shown in fullscreen mode."""

    @abstractmethod
    def add_listener(self, event_type: str, handler: SignalHandler) -> None:
        """Register a handler for an event type."""

    @abstractmethod
    def remove_listener(self, event_type: str, handler: SignalHandler) -> None:
        """Remove a previously registered handler. Unknown handlers are ignored."""

    @abstractmethod
    def request_fullscreen(self) -> None:
        """Ask the environment to enter fullscreen mode.

        Raises:
            FullscreenUnavailable: if the environment cannot or will not comply.
        """


class InMemorySignalSource(SignalSource):
    """
    Deterministic signal source driven by method calls.

    Used by tests and as the base of the terminal source.
    """

    def __init__(self, fullscreen_supported: bool = True) -> None:
        self._listeners: dict[str, list[SignalHandler]] = defaultdict(list)
        self._hidden = False
        self._fullscreen = False
        self.fullscreen_supported = fullscreen_supported

    @property
    def hidden(self) -> bool:
        return self._hidden

    @property
    def fullscreen_active(self) -> bool:
        return self._fullscreen

    def add_listener(self, event_type: str, handler: SignalHandler) -> None:
        if event_type not in SIGNAL_TYPES:
            raise ValueError(f"Unknown signal type: {event_type}")
        self._listeners[event_type].append(handler)

    def remove_listener(self, event_type: str, handler: SignalHandler) -> None:
        handlers = self._listeners.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def listener_count(self, event_type: str | None = None) -> int:
        """Number of registered handlers, for one event type or all of them."""
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return sum(len(handlers) for handlers in self._listeners.values())

    def request_fullscreen(self) -> None:
        if not self.fullscreen_supported:
            raise FullscreenUnavailable("Fullscreen is not supported here")
        if not self._fullscreen:
            self._fullscreen = True
            self._dispatch(SignalEvent(FULLSCREEN_CHANGE))

    def set_hidden(self, hidden: bool) -> None:
        """Change document visibility and notify listeners."""
        self._hidden = hidden
        self._dispatch(SignalEvent(VISIBILITY_CHANGE))

    def switch_tab(self) -> None:
        """Hide the document, then show it again."""
        self.set_hidden(True)
        self.set_hidden(False)

    def exit_fullscreen(self) -> None:
        self._fullscreen = False
        self._dispatch(SignalEvent(FULLSCREEN_CHANGE))

    def right_click(self) -> SignalEvent:
        return self._dispatch(SignalEvent(CONTEXT_MENU))

    def attempt_unload(self) -> bool:
        """Simulate leaving the page.

        Returns:
            True if a handler asked for an exit confirmation.
        """
        event = self._dispatch(SignalEvent(BEFORE_UNLOAD))
        return event.default_prevented

    def _dispatch(self, event: SignalEvent) -> SignalEvent:
        # Handlers may deregister while the event is being delivered.
        for handler in list(self._listeners.get(event.type, [])):
            handler(event)
        logger.debug("Dispatched %s (prevented=%s)", event.type, event.default_prevented)
        return event


FOCUS_REPORTING_ON = "\x1b[?1004h"
FOCUS_REPORTING_OFF = "\x1b[?1004l"
FOCUS_IN = "\x1b[I"
FOCUS_OUT = "\x1b[O"

_FOCUS_SEQUENCE = re.compile(r"\x1b\[([IO])")


class TerminalSignalSource(InMemorySignalSource):
    """
    Signal source backed by an xterm-compatible terminal.

    While attached, the terminal reports focus changes as escape sequences in
    the input stream. Lines read by the host go through feed(), which turns
    focus-out into a hidden document and focus-in into a visible one. A
    suspend request (Ctrl+Z) is refused and reported as the exam being hidden.
    Terminals have no fullscreen mode.
    """

    def __init__(self, output: TextIO | None = None, handle_suspend: bool = True) -> None:
        super().__init__(fullscreen_supported=False)
        self.output = output if output is not None else sys.stdout
        self.handle_suspend = handle_suspend
        self._previous_suspend_handler = None
        self._suspend_installed = False
        self._attached = False

    def __enter__(self) -> TerminalSignalSource:
        self.attach()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.detach()

    @property
    def attached(self) -> bool:
        return self._attached

    def attach(self) -> None:
        """Turn on focus reporting and take over the suspend signal."""
        if self._attached:
            return
        self._write(FOCUS_REPORTING_ON)
        if self.handle_suspend and _can_handle_suspend():
            self._previous_suspend_handler = signal.signal(signal.SIGTSTP, self._on_suspend)
            self._suspend_installed = True
        self._attached = True

    def detach(self) -> None:
        if not self._attached:
            return
        self._write(FOCUS_REPORTING_OFF)
        if self._suspend_installed:
            signal.signal(signal.SIGTSTP, self._previous_suspend_handler or signal.SIG_DFL)
            self._previous_suspend_handler = None
            self._suspend_installed = False
        self._attached = False

    def feed(self, text: str) -> str:
        """Dispatch focus reports found in text and return the text without them."""
        for match in _FOCUS_SEQUENCE.finditer(text):
            self.set_hidden(match.group(1) == "O")
        return _FOCUS_SEQUENCE.sub("", text)

    def suspend(self) -> None:
        """Report a suspend attempt as leaving the exam and coming back."""
        logger.info("Suspend request refused during exam")
        self.switch_tab()

    def _on_suspend(self, signum, frame) -> None:
        # Runs between bytecodes of the main thread, which may hold the runner
        # lock mid-operation. Listeners run on their own thread.
        threading.Thread(target=self.suspend, name="terminal_suspend", daemon=True).start()

    def _write(self, sequence: str) -> None:
        if self.output.isatty():
            self.output.write(sequence)
            self.output.flush()
        else:
            logger.debug("Output is not a terminal; focus reporting unavailable")


def _can_handle_suspend() -> bool:
    return hasattr(signal, "SIGTSTP") and threading.current_thread() is threading.main_thread()
