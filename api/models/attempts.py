"""Attempt-related Pydantic models."""
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from proctoring.models import SessionStatus


class AttemptSubmitRequest(BaseModel):
    """Model for submitting a finished exam session."""

    examId: str = Field(..., min_length=1)
    studentName: str = Field(..., min_length=1, max_length=100)
    studentId: str = Field(..., min_length=1, max_length=64)
    answers: dict[str, object] | None = None
    violations: list[str] | None = None
    status: SessionStatus = SessionStatus.COMPLETED

    @field_validator("status")
    @classmethod
    def check_terminal(cls, value: SessionStatus) -> SessionStatus:
        if not value.is_terminal:
            raise ValueError("only finished sessions can be submitted")
        return value


class AttemptSubmitResponse(BaseModel):
    """Model for attempt submission response."""

    attemptId: str
    score: int
    total: int


class AttemptResponse(BaseModel):
    """Attempt as listed for the exam's examiner."""

    id: str
    exam_id: str
    student_name: str
    student_id: str
    answers: dict[int, int]
    score: int
    total: int
    status: str
    violations: list[str]
    submitted_at: datetime

    class Config:
        from_attributes = True
