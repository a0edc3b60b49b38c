"""
Attempt database model for submitted exam sessions.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from api.database import Base
from proctoring.grading import normalize_answers
from proctoring.models import SessionStatus

if TYPE_CHECKING:
    from api.models.db.exam import Exam


class Attempt(Base):
    """
    Submitted exam attempt.
    One row per submission; retakes by the same student produce new rows.
    """

    __tablename__ = "attempts"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, index=True)

    # References
    exam_id: Mapped[str] = mapped_column(
        ForeignKey("exams.id", ondelete="CASCADE"), index=True, nullable=False
    )
    student_name: Mapped[str] = mapped_column(String(100), nullable=False)
    student_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)

    # Results
    score: Mapped[int] = mapped_column(default=0, nullable=False)
    total: Mapped[int] = mapped_column(default=0, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=SessionStatus.COMPLETED.value, nullable=False
    )
    submitted_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # Client report (stored as JSON strings)
    answers_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    violations_json: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Relationships
    exam: Mapped["Exam"] = relationship("Exam", back_populates="attempts")

    @property
    def answers(self) -> dict[int, int]:
        """Parse answers from JSON."""
        if not self.answers_json:
            return {}
        try:
            return normalize_answers(json.loads(self.answers_json))
        except (json.JSONDecodeError, TypeError, AttributeError):
            return {}

    @answers.setter
    def answers(self, value: dict[int, int]) -> None:
        """Serialize answers to JSON."""
        self.answers_json = json.dumps({str(k): v for k, v in value.items()})

    @property
    def violations(self) -> list[str]:
        """Parse violations from JSON."""
        if not self.violations_json:
            return []
        try:
            return json.loads(self.violations_json)
        except (json.JSONDecodeError, TypeError):
            return []

    @violations.setter
    def violations(self, value: list[str]) -> None:
        """Serialize violations to JSON."""
        self.violations_json = json.dumps(value, ensure_ascii=False)

    @property
    def is_terminated(self) -> bool:
        return self.status == SessionStatus.TERMINATED.value
