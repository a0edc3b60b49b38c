"""Pydantic models."""
from api.models.attempts import (
    AttemptResponse,
    AttemptSubmitRequest,
    AttemptSubmitResponse,
)
from api.models.auth import (
    ExaminerLogin,
    ExaminerRegister,
    ExaminerResponse,
    MessageResponse,
    TokenResponse,
)
from api.models.exams import (
    ExamCreate,
    ExamCreateResponse,
    ExamSummary,
    PublicExamResponse,
    PublicQuestionResponse,
    QuestionCreate,
)

__all__ = [
    "AttemptResponse",
    "AttemptSubmitRequest",
    "AttemptSubmitResponse",
    "ExamCreate",
    "ExamCreateResponse",
    "ExamSummary",
    "ExaminerLogin",
    "ExaminerRegister",
    "ExaminerResponse",
    "MessageResponse",
    "PublicExamResponse",
    "PublicQuestionResponse",
    "QuestionCreate",
    "TokenResponse",
]
