import pytest

from proctoring.environment import InMemorySignalSource
from proctoring.monitor import (
    EXITED_FULLSCREEN,
    RIGHT_CLICK,
    TAB_SWITCH,
    ViolationMonitor,
)


def test_signals_are_reported_as_tags() -> None:
    source = InMemorySignalSource()
    monitor = ViolationMonitor(source)
    reported: list[str] = []
    stop = monitor.start_monitoring(reported.append)

    monitor.enter_fullscreen_mode()
    source.switch_tab()
    source.exit_fullscreen()
    event = source.right_click()

    assert reported == [TAB_SWITCH, EXITED_FULLSCREEN, RIGHT_CLICK]
    assert event.default_prevented is True
    stop()


def test_becoming_visible_or_entering_fullscreen_is_not_a_violation() -> None:
    source = InMemorySignalSource()
    monitor = ViolationMonitor(source)
    reported: list[str] = []
    stop = monitor.start_monitoring(reported.append)

    source.set_hidden(False)
    monitor.enter_fullscreen_mode()

    assert reported == []
    stop()


def test_rapid_identical_signals_are_each_reported() -> None:
    source = InMemorySignalSource()
    monitor = ViolationMonitor(source)
    reported: list[str] = []
    stop = monitor.start_monitoring(reported.append)

    for _ in range(3):
        source.switch_tab()

    assert reported == [TAB_SWITCH] * 3
    stop()


def test_unload_asks_for_confirmation_without_violation() -> None:
    source = InMemorySignalSource()
    monitor = ViolationMonitor(source)
    reported: list[str] = []
    stop = monitor.start_monitoring(reported.append)

    assert source.attempt_unload() is True
    assert reported == []

    stop()
    assert source.attempt_unload() is False


def test_stop_monitoring_releases_every_listener() -> None:
    source = InMemorySignalSource()
    monitor = ViolationMonitor(source)
    reported: list[str] = []
    stop = monitor.start_monitoring(reported.append)
    assert source.listener_count() == 4

    stop()
    source.switch_tab()
    source.right_click()
    monitor.enter_fullscreen_mode()
    source.exit_fullscreen()

    assert reported == []
    assert source.listener_count() == 0

    # A second release is harmless.
    stop()
    assert source.listener_count() == 0


def test_context_manager_releases_on_error() -> None:
    source = InMemorySignalSource()
    monitor = ViolationMonitor(source)

    with pytest.raises(RuntimeError):
        with monitor.monitoring(lambda tag: None):
            assert source.listener_count() == 4
            raise RuntimeError("view crashed")

    assert source.listener_count() == 0


def test_unsupported_fullscreen_is_ignored() -> None:
    source = InMemorySignalSource(fullscreen_supported=False)
    monitor = ViolationMonitor(source)
    reported: list[str] = []
    stop = monitor.start_monitoring(reported.append)

    monitor.enter_fullscreen_mode()

    assert source.fullscreen_active is False
    assert reported == []
    stop()


def test_fullscreen_request_errors_never_escape() -> None:
    class BrokenSource(InMemorySignalSource):
        def request_fullscreen(self) -> None:
            raise PermissionError("denied by user")

    ViolationMonitor(BrokenSource()).enter_fullscreen_mode()
