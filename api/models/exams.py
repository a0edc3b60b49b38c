"""Exam-related Pydantic models."""
from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from api.config import MAX_EXAM_DURATION_MINUTES


class QuestionCreate(BaseModel):
    """Question as authored by an examiner."""

    text: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=1)
    correct: int = Field(..., ge=0)

    @model_validator(mode="after")
    def check_correct_option(self) -> "QuestionCreate":
        if self.correct >= len(self.options):
            raise ValueError("correct must index one of the options")
        return self


class ExamCreate(BaseModel):
    """Model for creating an exam."""

    title: str = Field(..., min_length=1, max_length=200)
    duration: int = Field(..., gt=0, le=MAX_EXAM_DURATION_MINUTES)
    questions: list[QuestionCreate] = Field(..., min_length=1)


class ExamCreateResponse(BaseModel):
    """Model for exam creation response."""

    examId: str


class ExamSummary(BaseModel):
    """Exam as listed on an examiner's dashboard."""

    id: str
    title: str
    duration: int
    total_marks: int
    created_at: datetime

    class Config:
        from_attributes = True


class PublicQuestionResponse(BaseModel):
    """Question shown to students (no correct option)."""

    id: str
    text: str
    options: list[str]


class PublicExamResponse(BaseModel):
    """Exam shown to students."""

    id: str
    title: str
    duration: int
    total_marks: int
    questions: list[PublicQuestionResponse]
