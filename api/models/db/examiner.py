"""Examiner and login session database models."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from api.database import Base

if TYPE_CHECKING:
    from api.models.db.exam import Exam


class Examiner(Base):
    """Examiner account. Examiners author exams and read their results."""

    __tablename__ = "examiners"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    # Relationships
    sessions: Mapped[list["LoginSession"]] = relationship(
        "LoginSession",
        back_populates="examiner",
        cascade="all, delete-orphan"
    )
    exams: Mapped[list["Exam"]] = relationship(
        "Exam",
        back_populates="examiner",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Examiner(id={self.id}, email='{self.email}')>"


class LoginSession(Base):
    """Server-side record of an issued access token."""

    __tablename__ = "login_sessions"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    examiner_id: Mapped[int] = mapped_column(
        ForeignKey("examiners.id", ondelete="CASCADE"), nullable=False
    )
    token_jti: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )
    last_activity: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)

    # Relationships
    examiner: Mapped["Examiner"] = relationship("Examiner", back_populates="sessions")

    def __repr__(self) -> str:
        return f"<LoginSession(id={self.id}, examiner_id={self.examiner_id})>"
