"""Service layer for exam authoring and retrieval."""
import logging

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session as DbSession, selectinload

from api.models.db.exam import Exam, Question
from api.models.exams import ExamCreate

logger = logging.getLogger(__name__)


def create_exam(db: DbSession, examiner_id: int, data: ExamCreate) -> Exam:
    """Create an exam and its questions in one transaction."""
    exam = Exam(
        examiner_id=examiner_id,
        title=data.title.strip(),
        duration=data.duration,
        total_marks=len(data.questions),
    )
    for position, item in enumerate(data.questions):
        question = Question(
            position=position,
            question_text=item.text,
            correct_option=item.correct,
        )
        question.options = list(item.options)
        exam.questions.append(question)

    db.add(exam)
    db.commit()
    db.refresh(exam)
    logger.info("Examiner %s created exam %s (%d questions)", examiner_id, exam.id, exam.total_marks)
    return exam


def list_exams(db: DbSession, examiner_id: int) -> list[Exam]:
    """Exams authored by an examiner, newest first."""
    return list(
        db.execute(
            select(Exam)
            .where(Exam.examiner_id == examiner_id)
            .order_by(Exam.created_at.desc())
        ).scalars().all()
    )


def get_exam(db: DbSession, exam_id: str) -> Exam | None:
    """Get exam by ID with questions loaded in order."""
    return db.execute(
        select(Exam).options(selectinload(Exam.questions)).where(Exam.id == exam_id)
    ).scalar_one_or_none()


def require_exam(db: DbSession, exam_id: str) -> Exam:
    exam = get_exam(db, exam_id)
    if exam is None:
        raise HTTPException(status_code=404, detail="Exam not found")
    return exam


def require_owned_exam(db: DbSession, exam_id: str, examiner_id: int) -> Exam:
    """Exam that belongs to the examiner. Other examiners get a 404."""
    exam = get_exam(db, exam_id)
    if exam is None or exam.examiner_id != examiner_id:
        raise HTTPException(status_code=404, detail="Exam not found")
    return exam


def serialize_public_exam(exam: Exam) -> dict[str, object]:
    """Student view of an exam. Correct options are left out."""
    return {
        "id": exam.id,
        "title": exam.title,
        "duration": exam.duration,
        "total_marks": exam.total_marks,
        "questions": [
            {"id": question.id, "text": question.question_text, "options": question.options}
            for question in exam.questions
        ],
    }
