"""Violation scoring and the automatic termination rule."""

from __future__ import annotations

from collections.abc import Iterable

TERMINATION_THRESHOLD = 5

TAB_WEIGHT = 2
FULLSCREEN_WEIGHT = 3
DEFAULT_WEIGHT = 1


def violation_weight(tag: str) -> int:
    """Weight of a single violation tag."""
    if "Tab" in tag:
        return TAB_WEIGHT
    if "fullscreen" in tag:
        return FULLSCREEN_WEIGHT
    return DEFAULT_WEIGHT


def violation_score(violations: Iterable[str]) -> int:
    """Sum of weights over all violations. Repeats are counted every time."""
    return sum(violation_weight(tag) for tag in violations)


def should_terminate(violations: Iterable[str]) -> bool:
    return violation_score(violations) >= TERMINATION_THRESHOLD


class ViolationTally:
    """Running score kept alongside an append-only violation log."""

    def __init__(self) -> None:
        self.score = 0
        self.count = 0

    def add(self, tag: str) -> int:
        """Account for one more violation and return the new score."""
        self.score += violation_weight(tag)
        self.count += 1
        return self.score

    @property
    def should_terminate(self) -> bool:
        return self.score >= TERMINATION_THRESHOLD
