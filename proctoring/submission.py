"""Hand-off of a finalized session to the exam service."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

from proctoring.models import AttemptResult, FinalizedSession, StudentIdentity

logger = logging.getLogger(__name__)


class AttemptRecorder(Protocol):
    """Anything that can durably record an attempt and grade it."""

    def record_attempt(
        self,
        exam_id: str,
        student_name: str,
        student_id: str,
        answers: Mapping[int, int],
        violations: Sequence[str],
        status: str,
    ) -> AttemptResult: ...


@dataclass(frozen=True)
class SubmissionOutcome:
    """Result of submitting a finalized session."""

    session: FinalizedSession
    result: AttemptResult | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.result is not None

    @classmethod
    def succeeded(cls, session: FinalizedSession, result: AttemptResult) -> SubmissionOutcome:
        return cls(session=session, result=result)

    @classmethod
    def failed(cls, session: FinalizedSession, error: str) -> SubmissionOutcome:
        return cls(session=session, error=error)


def submit_attempt(
    recorder: AttemptRecorder,
    student: StudentIdentity,
    session: FinalizedSession,
) -> SubmissionOutcome:
    """Record a finalized session once. Failures are reported, not retried."""
    try:
        result = recorder.record_attempt(
            session.exam_id,
            student.name,
            student.student_id,
            session.answers,
            list(session.violations),
            session.status.value,
        )
    except Exception as e:
        logger.error(f"Failed to record attempt for exam {session.exam_id}: {e}")
        return SubmissionOutcome.failed(session, str(e) or e.__class__.__name__)

    logger.info(
        "Recorded attempt %s for exam %s: %d/%d (%s)",
        result.attempt_id,
        session.exam_id,
        result.score,
        result.total,
        session.status.value,
    )
    return SubmissionOutcome.succeeded(session, result)
