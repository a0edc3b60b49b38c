"""Service layer for recording and listing exam attempts."""
import logging
import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session as DbSession

from api.models.db.attempt import Attempt
from api.models.db.exam import Exam
from proctoring.grading import grade_answers, normalize_answers
from proctoring.models import SessionStatus

logger = logging.getLogger(__name__)


def record_attempt(
    db: DbSession,
    exam: Exam,
    student_name: str,
    student_id: str,
    answers: dict[object, object] | None,
    violations: list[str] | None,
    status: SessionStatus = SessionStatus.COMPLETED,
) -> Attempt:
    """
    Grade a submitted session against the exam's answer key and store it.

    Every call creates a new attempt, so retakes are kept side by side.
    The violation log and status are stored as reported by the client.
    """
    normalized = normalize_answers(answers)
    score, total = grade_answers(exam.answer_key, normalized)

    attempt = Attempt(
        id=str(uuid.uuid4()),
        exam_id=exam.id,
        student_name=student_name.strip(),
        student_id=student_id.strip(),
        score=score,
        total=total,
        status=status.value,
    )
    attempt.answers = normalized
    attempt.violations = list(violations or [])

    db.add(attempt)
    db.commit()
    db.refresh(attempt)

    logger.info(
        "Recorded attempt %s on exam %s: %d/%d, %s, %d violations",
        attempt.id,
        exam.id,
        score,
        total,
        attempt.status,
        len(attempt.violations),
    )
    return attempt


def list_attempts(db: DbSession, exam_id: str) -> list[Attempt]:
    """Attempts for an exam in submission order."""
    return list(
        db.execute(
            select(Attempt)
            .where(Attempt.exam_id == exam_id)
            .order_by(Attempt.submitted_at)
        ).scalars().all()
    )
