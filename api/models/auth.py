"""Pydantic models for examiner authentication."""
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class ExaminerRegister(BaseModel):
    """Examiner registration request."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)


class ExaminerLogin(BaseModel):
    """Examiner login request."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ExaminerResponse(BaseModel):
    """Examiner response (public info)."""

    id: int
    name: str
    email: str
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    """JWT token response."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: ExaminerResponse


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str
