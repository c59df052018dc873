"""Common FastAPI dependency helpers for ownership checks and entity lookup.

Provides:
- get_db (re-export of ticketdesk.database.get_db)
- get_current_user: the persisted user behind the request's session
- is_owner / require_owner: the single authorization rule for mutations
- get_ticket_or_404

Policy: every authenticated user may read any ticket, only the creator of a
ticket may update or delete it, and only the author of a comment may delete it.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from ticketdesk import models
from ticketdesk.auth import AuthSession, get_auth_session
from ticketdesk.database import get_db
from ticketdesk.errors import Forbidden, NotFound, Unauthorized

logger = logging.getLogger(__name__)


def get_current_user(session: AuthSession = Depends(get_auth_session), db: Session = Depends(get_db)) -> models.UserModel:
    """Dependency that returns the user record for the current session or raises 401."""
    user = db.query(models.UserModel).filter(models.UserModel.id == session.user_id).first()
    if not user:
        raise Unauthorized("User no longer exists", code="invalid_credentials")
    return user


def is_owner(owner_id: Optional[str], session: AuthSession) -> bool:
    """Return True when the session's user is the recorded owner."""
    return owner_id is not None and owner_id == session.user_id


def require_owner(owner_id: Optional[str], session: AuthSession, resource: str = "resource", error: Optional[Exception] = None) -> None:
    """Raise unless the session's user owns the entity.

    Raises `Forbidden` by default. Callers that must not reveal whether the
    entity exists pass their own `error` (e.g. a `NotFound`).
    """
    if is_owner(owner_id, session):
        return
    logger.info("Ownership check denied: user=%s resource=%s owner=%s", session.user_id, resource, owner_id)
    if error is not None:
        raise error
    raise Forbidden(f"You can only modify your own {resource}s", code="not_owner")


def get_ticket_or_404(ticket_id: str, db: Session) -> models.TicketModel:
    ticket = db.query(models.TicketModel).filter(models.TicketModel.id == ticket_id).first()
    if not ticket:
        raise NotFound("Ticket not found", code="ticket_not_found")
    return ticket


__all__ = [
    "get_db",
    "get_current_user",
    "is_owner",
    "require_owner",
    "get_ticket_or_404",
]
