"""Domain models shared by the session core and the service client."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from proctoring.grading import normalize_answers


class SessionStatus(str, enum.Enum):
    """Status of an exam session. Values match the stored attempt status."""

    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    TERMINATED = "Terminated"

    @property
    def is_terminal(self) -> bool:
        return self is not SessionStatus.IN_PROGRESS


@dataclass(frozen=True)
class PublicQuestion:
    """Question as shown to a student (correct option withheld)."""

    text: str
    options: tuple[str, ...]
    id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PublicQuestion:
        text = data.get("text", data.get("question_text", ""))
        return cls(
            text=str(text),
            options=tuple(str(option) for option in data.get("options", [])),
            id=data.get("id"),
        )


@dataclass(frozen=True)
class PublicExamView:
    """Exam as served to students."""

    id: str
    title: str
    duration: int  # minutes
    questions: tuple[PublicQuestion, ...]

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def duration_seconds(self) -> int:
        return self.duration * 60

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PublicExamView:
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", "")),
            duration=int(data.get("duration", 0)),
            questions=tuple(
                PublicQuestion.from_dict(item) for item in data.get("questions", [])
            ),
        )


@dataclass(frozen=True)
class StudentIdentity:
    """Name and identifier a student enters in the exam lobby."""

    name: str
    student_id: str


@dataclass(frozen=True)
class AttemptResult:
    """Outcome of a recorded attempt as returned by the exam service."""

    attempt_id: str
    score: int
    total: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AttemptResult:
        return cls(
            attempt_id=str(data["attemptId"]),
            score=int(data["score"]),
            total=int(data["total"]),
        )


@dataclass(frozen=True)
class FinalizedSession:
    """Frozen data handed to submission when a session finalizes."""

    exam_id: str
    answers: dict[int, int]
    violations: tuple[str, ...]
    status: SessionStatus
    time_remaining: int


@dataclass(frozen=True)
class AttemptRecord:
    """Stored attempt as listed for examiners."""

    id: str
    student_name: str
    student_id: str
    exam_id: str
    score: int
    status: str
    answers: dict[int, int] = field(default_factory=dict)
    violations: tuple[str, ...] = ()
    total: int | None = None
    submitted_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AttemptRecord:
        return cls(
            id=str(data["id"]),
            student_name=str(data.get("student_name", "")),
            student_id=str(data.get("student_id", "")),
            exam_id=str(data.get("exam_id", "")),
            score=int(data.get("score") or 0),
            status=str(data.get("status", "")),
            answers=normalize_answers(data.get("answers")),
            violations=tuple(data.get("violations") or ()),
            total=data.get("total"),
            submitted_at=data.get("submitted_at"),
        )
