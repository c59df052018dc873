"""Authentication API routes: register, login and current-user endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ticketdesk import models, schemas
from ticketdesk.audit import client_ip, log_audit
from ticketdesk.auth import authenticate_user, create_session_token, get_password_hash
from ticketdesk.database import get_db
from ticketdesk.dependencies import get_current_user
from ticketdesk.errors import Conflict, Unauthorized

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


def _username_taken() -> Conflict:
    return Conflict("Username already exists", code="username_taken")


@router.post("/register", response_model=schemas.UserResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: schemas.RegisterRequest, request: Request, db: Session = Depends(get_db)) -> schemas.UserResponse:
    """Create a user account. The password is stored only as a salted hash."""
    ip = client_ip(request)

    existing = db.query(models.UserModel).filter(models.UserModel.username == payload.username).first()
    if existing:
        log_audit(db, None, "REGISTER", "User", payload.username, "FAILED_DUPLICATE", ip, username=payload.username)
        raise _username_taken()

    user = models.UserModel(username=payload.username, hashed_password=get_password_hash(payload.password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration of the same name
        db.rollback()
        raise _username_taken()
    db.refresh(user)

    log_audit(db, user.id, "REGISTER", "User", user.id, "SUCCESS", ip, username=user.username)
    logger.info("Registered user %s", user.username)

    return schemas.UserResponse.model_validate(user)


@router.post("/login", response_model=schemas.TokenResponse)
async def login(credentials: schemas.LoginRequest, request: Request, db: Session = Depends(get_db)) -> schemas.TokenResponse:
    """Authenticate with username and password and return a JWT plus the public user fields."""
    ip = client_ip(request)

    user = authenticate_user(db, credentials.username, credentials.password)
    if not user:
        # Same error for unknown user and wrong password
        log_audit(db, None, "LOGIN", "User", credentials.username, "FAILED", ip, username=credentials.username)
        logger.info("Failed login for username=%s", credentials.username)
        raise Unauthorized("Invalid username or password", code="invalid_credentials")

    access_token = create_session_token(user)

    log_audit(db, user.id, "LOGIN", "User", user.id, "SUCCESS", ip, username=user.username)

    return schemas.TokenResponse(
        access_token=access_token,
        token_type="bearer",
        user=schemas.UserResponse.model_validate(user),
    )


@router.get("/me", response_model=schemas.UserResponse)
async def me(current_user: models.UserModel = Depends(get_current_user)) -> schemas.UserResponse:
    """Return current authenticated user."""
    return schemas.UserResponse.model_validate(current_user)
