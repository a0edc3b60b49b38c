"""Authentication dependencies for FastAPI."""
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session as DbSession

from api.database import get_db
from api.models.db.examiner import Examiner
from api.services.auth_service import (
    extend_session,
    get_active_session,
    get_examiner_by_id,
    verify_token,
)

# HTTP Bearer scheme for JWT
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_examiner(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[DbSession, Depends(get_db)],
) -> Examiner:
    """Get the authenticated examiner.

    Raises:
        HTTPException: 401 if not authenticated or token is invalid.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    payload = verify_token(credentials.credentials)
    if payload is None:
        raise _unauthorized("Invalid or expired token")

    # Check if session is still active
    jti = payload.get("jti")
    if jti:
        session = get_active_session(db, jti)
        if session is None:
            raise _unauthorized("Session expired or invalidated")
        extend_session(db, session)

    examiner_id = payload.get("sub")
    if examiner_id is None:
        raise _unauthorized("Invalid token payload")

    examiner = get_examiner_by_id(db, int(examiner_id))
    if examiner is None:
        raise _unauthorized("Examiner not found")
    if not examiner.is_active:
        raise _unauthorized("Examiner is inactive")

    return examiner
