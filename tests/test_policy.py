import pytest

from proctoring.monitor import EXITED_FULLSCREEN, RIGHT_CLICK, TAB_SWITCH
from proctoring.policy import (
    TERMINATION_THRESHOLD,
    ViolationTally,
    should_terminate,
    violation_score,
    violation_weight,
)


@pytest.mark.parametrize(
    ("tag", "weight"),
    [
        (TAB_SWITCH, 2),
        (EXITED_FULLSCREEN, 3),
        (RIGHT_CLICK, 1),
        ("Copy attempt", 1),
        ("Exited Fullscreen", 1),  # case-sensitive match
    ],
)
def test_violation_weight(tag: str, weight: int) -> None:
    assert violation_weight(tag) == weight


def test_tab_switch_and_fullscreen_exit_terminate() -> None:
    violations = [TAB_SWITCH, EXITED_FULLSCREEN]
    assert violation_score(violations) == 5
    assert should_terminate(violations) is True


def test_two_right_clicks_do_not_terminate() -> None:
    violations = [RIGHT_CLICK, RIGHT_CLICK]
    assert violation_score(violations) == 2
    assert should_terminate(violations) is False


def test_repeated_violations_are_not_deduplicated() -> None:
    violations = [RIGHT_CLICK] * TERMINATION_THRESHOLD
    assert violation_score(violations) == TERMINATION_THRESHOLD
    assert should_terminate(violations) is True


def test_empty_log_scores_zero() -> None:
    assert violation_score([]) == 0
    assert should_terminate([]) is False


def test_tally_matches_full_recomputation() -> None:
    log = [RIGHT_CLICK, TAB_SWITCH, RIGHT_CLICK, EXITED_FULLSCREEN, TAB_SWITCH]
    tally = ViolationTally()
    for index, tag in enumerate(log, start=1):
        tally.add(tag)
        assert tally.score == violation_score(log[:index])
        assert tally.should_terminate == should_terminate(log[:index])
    assert tally.count == len(log)
