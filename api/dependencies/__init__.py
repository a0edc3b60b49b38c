"""FastAPI dependencies."""
from api.dependencies.auth import get_current_examiner

__all__ = ["get_current_examiner"]
