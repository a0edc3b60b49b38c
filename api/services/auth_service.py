"""Authentication service for examiner accounts and JWT handling."""
import uuid
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.orm import Session as DbSession

from api.config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    ALGORITHM,
    SECRET_KEY,
    SESSION_EXTEND_MINUTES,
)
from api.models.db.examiner import Examiner, LoginSession


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(
        plain_password.encode("utf-8"), hashed_password.encode("utf-8")
    )


def create_access_token(examiner: Examiner, jti: str | None = None) -> tuple[str, str]:
    """Create a JWT access token.

    Returns:
        Tuple of (token, jti)
    """
    if jti is None:
        jti = str(uuid.uuid4())

    expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": str(examiner.id),
        "email": examiner.email,
        "name": examiner.name,
        "exp": expire,
        "jti": jti,
    }
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt, jti


def verify_token(token: str) -> dict | None:
    """Verify and decode a JWT token.

    Returns:
        Decoded token payload or None if invalid.
    """
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None


def get_examiner_by_email(db: DbSession, email: str) -> Examiner | None:
    return db.query(Examiner).filter(Examiner.email == email.strip().lower()).first()


def get_examiner_by_id(db: DbSession, examiner_id: int) -> Examiner | None:
    return db.query(Examiner).filter(Examiner.id == examiner_id).first()


def create_examiner(db: DbSession, name: str, email: str, password: str) -> Examiner:
    """Create a new examiner account."""
    examiner = Examiner(
        name=name.strip(),
        email=email.strip().lower(),
        hashed_password=hash_password(password),
    )
    db.add(examiner)
    db.commit()
    db.refresh(examiner)
    return examiner


def authenticate(db: DbSession, email: str, password: str) -> Examiner | None:
    """Return the examiner for valid credentials, otherwise None."""
    examiner = get_examiner_by_email(db, email)
    if examiner is None or not examiner.is_active:
        return None
    if not verify_password(password, examiner.hashed_password):
        return None
    return examiner


def create_session(
    db: DbSession, examiner_id: int, token_jti: str, expires_at: datetime
) -> LoginSession:
    """Create a new login session for an examiner."""
    session = LoginSession(
        examiner_id=examiner_id,
        token_jti=token_jti,
        expires_at=expires_at,
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def get_active_session(db: DbSession, token_jti: str) -> LoginSession | None:
    """Get an active login session by token JTI."""
    now = datetime.now(timezone.utc)
    session = (
        db.query(LoginSession)
        .filter(
            LoginSession.token_jti == token_jti,
            LoginSession.is_active == True,  # noqa: E712
        )
        .first()
    )
    if session is None:
        return None
    expires_at = session.expires_at
    # SQLite hands back naive datetimes.
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    if expires_at <= now:
        return None
    return session


def extend_session(db: DbSession, session: LoginSession) -> LoginSession:
    """Extend session expiration and update last activity."""
    now = datetime.now(timezone.utc)
    session.last_activity = now
    session.expires_at = now + timedelta(minutes=SESSION_EXTEND_MINUTES)
    db.commit()
    db.refresh(session)
    return session


def invalidate_session(db: DbSession, token_jti: str) -> None:
    """Invalidate a session by token JTI."""
    session = db.query(LoginSession).filter(LoginSession.token_jti == token_jti).first()
    if session:
        session.is_active = False
        db.commit()
