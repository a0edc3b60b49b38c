"""
Timed exam session state machine.

A session starts In Progress and ends in exactly one terminal status:
Completed (explicit submit or timer expiry) or Terminated (violation policy).
After that every operation is a no-op.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from proctoring.errors import InvalidSessionError
from proctoring.models import (
    FinalizedSession,
    PublicExamView,
    PublicQuestion,
    SessionStatus,
)
from proctoring.policy import ViolationTally

logger = logging.getLogger(__name__)

FinalizeHook = Callable[[FinalizedSession], None]


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a session for rendering."""

    exam_id: str
    current_question_index: int
    current_question: PublicQuestion
    question_count: int
    answers: dict[int, int]
    time_remaining: int
    violations: tuple[str, ...]
    violation_score: int
    status: SessionStatus

    @property
    def violation_count(self) -> int:
        return len(self.violations)

    @property
    def is_last_question(self) -> bool:
        return self.current_question_index == self.question_count - 1


class ExamSession:
    """Owns the question pointer, answers, countdown and status of one attempt."""

    def __init__(
        self,
        exam: PublicExamView,
        duration_seconds: int,
        on_finalize: FinalizeHook | None = None,
    ) -> None:
        if not exam.questions:
            raise InvalidSessionError("Exam has no questions")
        if duration_seconds <= 0:
            raise InvalidSessionError("Duration must be positive")

        self.exam = exam
        self.current_question_index = 0
        self.answers: dict[int, int] = {}
        self.violations: list[str] = []
        self.time_remaining = int(duration_seconds)
        self.status = SessionStatus.IN_PROGRESS
        self._tally = ViolationTally()
        self._on_finalize = on_finalize
        self._finalized: FinalizedSession | None = None

    @classmethod
    def start(
        cls,
        exam: PublicExamView,
        duration_seconds: int,
        on_finalize: FinalizeHook | None = None,
    ) -> ExamSession:
        """Start a session at the first question with the full time budget."""
        session = cls(exam, duration_seconds, on_finalize)
        logger.info(
            "Session started for exam %s (%d questions, %ds)",
            exam.id,
            exam.question_count,
            session.time_remaining,
        )
        return session

    @property
    def is_active(self) -> bool:
        return self.status is SessionStatus.IN_PROGRESS

    @property
    def question_count(self) -> int:
        return self.exam.question_count

    @property
    def violation_score(self) -> int:
        return self._tally.score

    @property
    def finalized(self) -> FinalizedSession | None:
        """Data handed to submission, once the session has finalized."""
        return self._finalized

    def select_answer(self, question_index: int, option_index: int) -> bool:
        """Record (or overwrite) the answer for a question."""
        if not self.is_active:
            return False
        if not 0 <= question_index < self.question_count:
            logger.debug("Ignoring answer for question %s", question_index)
            return False
        options = self.exam.questions[question_index].options
        if not 0 <= option_index < len(options):
            logger.debug("Ignoring option %s for question %s", option_index, question_index)
            return False
        self.answers[question_index] = option_index
        return True

    def navigate(self, to_index: int) -> bool:
        if not self.is_active:
            return False
        if not 0 <= to_index < self.question_count:
            logger.debug("Ignoring navigation to %s", to_index)
            return False
        self.current_question_index = to_index
        return True

    def next_question(self) -> bool:
        return self.navigate(self.current_question_index + 1)

    def previous_question(self) -> bool:
        return self.navigate(self.current_question_index - 1)

    def tick(self) -> bool:
        """Advance the countdown by one second. Expiry completes the session."""
        if not self.is_active:
            return False
        if self.time_remaining <= 1:
            self.time_remaining = 0
            self._finalize(SessionStatus.COMPLETED)
        else:
            self.time_remaining -= 1
        return True

    def record_violation(self, tag: str) -> bool:
        """Append a violation and apply the termination policy."""
        if not self.is_active:
            return False
        self.violations.append(tag)
        score = self._tally.add(tag)
        logger.warning(
            "Violation on exam %s: %s (score %d)", self.exam.id, tag, score
        )
        if self._tally.should_terminate:
            self._finalize(SessionStatus.TERMINATED)
        return True

    def submit(self) -> bool:
        """Finish the exam on the student's request."""
        if not self.is_active:
            return False
        self._finalize(SessionStatus.COMPLETED)
        return True

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            exam_id=self.exam.id,
            current_question_index=self.current_question_index,
            current_question=self.exam.questions[self.current_question_index],
            question_count=self.question_count,
            answers=dict(self.answers),
            time_remaining=self.time_remaining,
            violations=tuple(self.violations),
            violation_score=self._tally.score,
            status=self.status,
        )

    def _finalize(self, status: SessionStatus) -> None:
        # Check-and-set: the first trigger wins, later ones see a terminal status.
        if self.status is not SessionStatus.IN_PROGRESS:
            return
        self.status = status
        self._finalized = FinalizedSession(
            exam_id=self.exam.id,
            answers=dict(self.answers),
            violations=tuple(self.violations),
            status=status,
            time_remaining=self.time_remaining,
        )
        logger.info("Session for exam %s finalized as %s", self.exam.id, status.value)
        if self._on_finalize is not None:
            self._on_finalize(self._finalized)
