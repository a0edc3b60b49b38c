"""Examiner authentication routes."""
from datetime import datetime, timedelta, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session as DbSession

from api.config import ACCESS_TOKEN_EXPIRE_MINUTES
from api.database import get_db
from api.dependencies.auth import get_current_examiner
from api.models.auth import (
    ExaminerLogin,
    ExaminerRegister,
    ExaminerResponse,
    MessageResponse,
    TokenResponse,
)
from api.models.db.examiner import Examiner
from api.services.auth_service import (
    authenticate,
    create_access_token,
    create_examiner,
    create_session,
    get_examiner_by_email,
    invalidate_session,
    verify_token,
)

router = APIRouter(prefix="/api/examiner", tags=["examiner"])
security = HTTPBearer(auto_error=False)


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: ExaminerRegister,
    db: Annotated[DbSession, Depends(get_db)],
) -> MessageResponse:
    """Register a new examiner."""
    if get_examiner_by_email(db, data.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already exists",
        )

    create_examiner(db, data.name, data.email, data.password)
    return MessageResponse(message="Examiner registered")


@router.post("/login", response_model=TokenResponse)
async def login(
    data: ExaminerLogin,
    db: Annotated[DbSession, Depends(get_db)],
) -> TokenResponse:
    """Login and get JWT token."""
    examiner = authenticate(db, data.email, data.password)
    if examiner is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    token, jti = create_access_token(examiner)
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    create_session(db, examiner.id, jti, expires_at)

    return TokenResponse(
        access_token=token,
        token_type="bearer",
        expires_in=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=ExaminerResponse.model_validate(examiner),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[DbSession, Depends(get_db)],
) -> MessageResponse:
    """Logout and invalidate current session."""
    if credentials is None:
        return MessageResponse(message="Already logged out")

    payload = verify_token(credentials.credentials)
    if payload and payload.get("jti"):
        invalidate_session(db, payload["jti"])

    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=ExaminerResponse)
async def get_me(
    current_examiner: Annotated[Examiner, Depends(get_current_examiner)],
) -> Examiner:
    """Get current examiner info."""
    return current_examiner
