"""
Exam and Question database models.
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from api.database import Base

if TYPE_CHECKING:
    from api.models.db.attempt import Attempt
    from api.models.db.examiner import Examiner


class Exam(Base):
    """
    Multiple-choice exam authored by an examiner.
    Immutable once created.
    """

    __tablename__ = "exams"

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, index=True, default=lambda: str(uuid.uuid4())
    )
    examiner_id: Mapped[int] = mapped_column(
        ForeignKey("examiners.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    duration: Mapped[int] = mapped_column(nullable=False)  # minutes
    total_marks: Mapped[int] = mapped_column(default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Relationships
    examiner: Mapped["Examiner"] = relationship("Examiner", back_populates="exams")
    questions: Mapped[list["Question"]] = relationship(
        "Question",
        back_populates="exam",
        cascade="all, delete-orphan",
        order_by="Question.position",
    )
    attempts: Mapped[list["Attempt"]] = relationship(
        "Attempt", back_populates="exam", cascade="all, delete-orphan"
    )

    @property
    def answer_key(self) -> list[int]:
        """Correct option index per question, in exam order."""
        return [question.correct_option for question in self.questions]


class Question(Base):
    """
    Single question within an exam.
    The correct option index never leaves the service except through grading.
    """

    __tablename__ = "questions"

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    exam_id: Mapped[str] = mapped_column(
        ForeignKey("exams.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(nullable=False)
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    options_json: Mapped[str] = mapped_column(Text, nullable=False)
    correct_option: Mapped[int] = mapped_column(nullable=False)

    __table_args__ = (
        UniqueConstraint("exam_id", "position", name="uq_exam_question_position"),
    )

    # Relationships
    exam: Mapped["Exam"] = relationship("Exam", back_populates="questions")

    @property
    def options(self) -> list[str]:
        """Parse options from JSON."""
        try:
            return json.loads(self.options_json)
        except (json.JSONDecodeError, TypeError):
            return []

    @options.setter
    def options(self, value: list[str]) -> None:
        """Serialize options to JSON."""
        self.options_json = json.dumps(value, ensure_ascii=False)
