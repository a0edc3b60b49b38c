import io
import signal
import threading

import pytest

from proctoring.environment import (
    FOCUS_IN,
    FOCUS_OUT,
    FOCUS_REPORTING_OFF,
    FOCUS_REPORTING_ON,
    TerminalSignalSource,
)
from proctoring.errors import FullscreenUnavailable
from proctoring.monitor import TAB_SWITCH, ViolationMonitor


class FakeTerminal(io.StringIO):
    def isatty(self):
        return True


def test_feed_strips_focus_reports_and_dispatches_them() -> None:
    source = TerminalSignalSource(output=io.StringIO(), handle_suspend=False)
    reported: list[str] = []
    stop = ViolationMonitor(source).start_monitoring(reported.append)

    remaining = source.feed(f"{FOCUS_OUT}{FOCUS_IN}n{FOCUS_OUT}")

    assert remaining == "n"
    assert reported == [TAB_SWITCH, TAB_SWITCH]
    assert source.hidden is True
    assert source.feed(FOCUS_IN) == ""
    assert source.hidden is False
    stop()


def test_plain_input_is_unchanged() -> None:
    source = TerminalSignalSource(output=io.StringIO(), handle_suspend=False)
    assert source.feed("g 2") == "g 2"
    assert source.hidden is False


def test_terminal_has_no_fullscreen() -> None:
    source = TerminalSignalSource(output=io.StringIO(), handle_suspend=False)
    with pytest.raises(FullscreenUnavailable):
        source.request_fullscreen()


def test_attach_toggles_focus_reporting() -> None:
    output = FakeTerminal()
    with TerminalSignalSource(output=output, handle_suspend=False) as source:
        assert source.attached is True
        assert output.getvalue() == FOCUS_REPORTING_ON
    assert source.attached is False
    assert output.getvalue() == FOCUS_REPORTING_ON + FOCUS_REPORTING_OFF


def test_attach_skips_escape_codes_when_not_a_terminal() -> None:
    output = io.StringIO()
    with TerminalSignalSource(output=output, handle_suspend=False):
        pass
    assert output.getvalue() == ""


def test_suspend_is_reported_as_tab_switch() -> None:
    source = TerminalSignalSource(output=io.StringIO(), handle_suspend=False)
    reported: list[str] = []
    stop = ViolationMonitor(source).start_monitoring(reported.append)

    source.suspend()

    assert reported == [TAB_SWITCH]
    assert source.hidden is False
    stop()


@pytest.mark.skipif(not hasattr(signal, "SIGTSTP"), reason="no job control signals")
def test_suspend_signal_handler_installed_and_restored(monkeypatch) -> None:
    installed = {}
    previous = object()

    def fake_signal(signum, handler):
        old = installed.get(signum, previous)
        installed[signum] = handler
        return old

    monkeypatch.setattr(signal, "signal", fake_signal)
    source = TerminalSignalSource(output=io.StringIO())
    reported = threading.Event()
    tags: list[str] = []

    def on_violation(tag: str) -> None:
        tags.append(tag)
        reported.set()

    stop = ViolationMonitor(source).start_monitoring(on_violation)
    with source:
        handler = installed[signal.SIGTSTP]
        handler(signal.SIGTSTP, None)
        assert reported.wait(2.0)

    assert tags == [TAB_SWITCH]
    assert installed[signal.SIGTSTP] is previous
    stop()
