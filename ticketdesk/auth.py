"""Authentication helpers: JWT sessions, password hashing and the bearer guard."""

from __future__ import annotations

import logging
import warnings
from datetime import datetime, timedelta, timezone
from typing import Optional

# Suppress specific deprecation warnings that come from third-party libs we depend on.
warnings.filterwarnings("ignore", category=DeprecationWarning, message=r".*argon2.*")
warnings.filterwarnings("ignore", category=DeprecationWarning, message=r".*datetime\.datetime\.utcnow.*")

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ticketdesk import models
from ticketdesk.config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, JWT_SECRET
from ticketdesk.errors import Forbidden, Unauthorized

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["argon2", "bcrypt"], deprecated="auto")
# auto_error=False: a missing header must map to our 401 payload, not FastAPI's default
bearer_scheme = HTTPBearer(auto_error=False, description="JWT issued by /api/auth/login")


class AuthSession(BaseModel):
    """Identity decoded from a bearer token, attached to each authenticated request."""

    user_id: str
    username: str
    issued_at: Optional[datetime] = None
    expires_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return now >= self.expires_at


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire, "iat": now})
    return jwt.encode(to_encode, JWT_SECRET, algorithm=JWT_ALGORITHM)


def create_session_token(user: models.UserModel, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a token embedding the user's id and username."""
    return create_access_token({"sub": user.id, "username": user.username}, expires_delta=expires_delta)


def decode_session(token: str) -> AuthSession:
    """Decode and verify a session token.

    Raises `Forbidden` for tokens that are malformed, mis-signed, expired
    or missing the identity claims.
    """
    invalid = Forbidden("Invalid or expired token", code="invalid_token")
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError as exc:
        logger.debug("JWT decode error: %s", exc)
        raise invalid

    sub = payload.get("sub")
    username = payload.get("username")
    exp = payload.get("exp")
    if not sub or not username or exp is None:
        raise invalid

    iat = payload.get("iat")
    session = AuthSession(
        user_id=str(sub),
        username=str(username),
        issued_at=datetime.fromtimestamp(iat, tz=timezone.utc) if iat is not None else None,
        expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
    )
    # jose already rejects expired tokens; keep the check explicit on the session
    if session.is_expired():
        raise invalid
    return session


def authenticate_user(db: Session, username: str, password: str) -> Optional[models.UserModel]:
    user = db.query(models.UserModel).filter(models.UserModel.username == username).first()
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def get_auth_session(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthSession:
    """Dependency guarding protected routes.

    401 when no bearer credential is sent, 403 when the token is invalid.
    The decoded session is also stored on `request.state.auth_session`.
    """
    if credentials is None or not credentials.credentials.strip():
        raise Unauthorized("Authentication required", code="authentication_required")

    session = decode_session(credentials.credentials.strip())
    request.state.auth_session = session
    return session


__all__ = [
    "AuthSession",
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "create_session_token",
    "decode_session",
    "authenticate_user",
    "get_auth_session",
    "bearer_scheme",
]
