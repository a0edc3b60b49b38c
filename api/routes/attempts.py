"""Attempt submission endpoint."""
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session as DbSession

from api.database import get_db
from api.models.attempts import AttemptSubmitRequest, AttemptSubmitResponse
from api.services.attempt_service import record_attempt
from api.services.exam_service import require_exam
from api.utils import validate_id

router = APIRouter(prefix="/api/exam", tags=["attempts"])


@router.post("/submit", response_model=AttemptSubmitResponse)
def submit_attempt(
    payload: AttemptSubmitRequest,
    db: Annotated[DbSession, Depends(get_db)],
) -> AttemptSubmitResponse:
    """Grade and store a finished exam session."""
    exam_id = validate_id("examId", payload.examId)
    exam = require_exam(db, exam_id)

    attempt = record_attempt(
        db,
        exam,
        payload.studentName,
        payload.studentId,
        payload.answers,
        payload.violations,
        payload.status,
    )
    return AttemptSubmitResponse(
        attemptId=attempt.id,
        score=attempt.score,
        total=attempt.total,
    )
