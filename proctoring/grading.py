"""Grading of submitted answers against an exam's answer key."""

from __future__ import annotations

from collections.abc import Mapping, Sequence


def normalize_answers(raw: Mapping[object, object] | None) -> dict[int, int]:
    """Convert a decoded JSON answers object to an index -> option mapping.

    JSON object keys arrive as strings. Entries whose key or value is not an
    integer are dropped.
    """
    if not raw:
        return {}
    answers: dict[int, int] = {}
    for key, value in raw.items():
        if isinstance(value, bool):
            continue
        try:
            index = int(key)  # type: ignore[call-overload]
        except (TypeError, ValueError):
            continue
        if isinstance(value, int):
            answers[index] = value
        elif isinstance(value, str):
            try:
                answers[index] = int(value)
            except ValueError:
                continue
    return answers


def grade_answers(
    correct_indices: Sequence[int], answers: Mapping[int, int]
) -> tuple[int, int]:
    """Count questions whose answer matches the correct option.

    Returns:
        Tuple of (score, total). Unanswered questions and keys outside the
        exam's question range never count.
    """
    score = 0
    for index, correct in enumerate(correct_indices):
        if index in answers and answers[index] == correct:
            score += 1
    return score, len(correct_indices)
