"""API route modules."""
from api.routes import attempts, examiner, exams

__all__ = ["attempts", "examiner", "exams"]
