"""Database models."""
from api.models.db.examiner import Examiner, LoginSession
from api.models.db.exam import Exam, Question
from api.models.db.attempt import Attempt

__all__ = [
    "Examiner",
    "LoginSession",
    "Exam",
    "Question",
    "Attempt",
]
