"""Exam authoring and retrieval endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session as DbSession

from api.database import get_db
from api.dependencies.auth import get_current_examiner
from api.models.attempts import AttemptResponse
from api.models.db.examiner import Examiner
from api.models.exams import (
    ExamCreate,
    ExamCreateResponse,
    ExamSummary,
    PublicExamResponse,
)
from api.services.attempt_service import list_attempts
from api.services.exam_service import (
    create_exam,
    list_exams,
    require_exam,
    require_owned_exam,
    serialize_public_exam,
)
from api.utils import validate_id

router = APIRouter(prefix="/api", tags=["exams"])


@router.post("/exam/create", response_model=ExamCreateResponse, status_code=status.HTTP_201_CREATED)
def create_exam_endpoint(
    data: ExamCreate,
    current_examiner: Annotated[Examiner, Depends(get_current_examiner)],
    db: Annotated[DbSession, Depends(get_db)],
) -> ExamCreateResponse:
    """Create an exam owned by the current examiner."""
    exam = create_exam(db, current_examiner.id, data)
    return ExamCreateResponse(examId=exam.id)


@router.get("/exams", response_model=list[ExamSummary])
def list_exams_endpoint(
    current_examiner: Annotated[Examiner, Depends(get_current_examiner)],
    db: Annotated[DbSession, Depends(get_db)],
) -> list:
    """List the current examiner's exams."""
    return list_exams(db, current_examiner.id)


@router.get("/exam/public/{exam_id}", response_model=PublicExamResponse)
def get_public_exam(
    exam_id: str,
    db: Annotated[DbSession, Depends(get_db)],
) -> dict[str, object]:
    """Exam as shown to a student, without correct options."""
    exam_id = validate_id("examId", exam_id)
    return serialize_public_exam(require_exam(db, exam_id))


@router.get("/exam/{exam_id}/results", response_model=list[AttemptResponse])
def get_exam_results(
    exam_id: str,
    current_examiner: Annotated[Examiner, Depends(get_current_examiner)],
    db: Annotated[DbSession, Depends(get_db)],
) -> list:
    """List attempts for one of the current examiner's exams."""
    exam_id = validate_id("examId", exam_id)
    exam = require_owned_exam(db, exam_id, current_examiner.id)
    return list_attempts(db, exam.id)
