"""Comment routes: comments attached to tickets.

Implements:
- GET    /api/comments/ticket/{ticket_id}  -> list comments for a ticket (oldest first)
- GET    /api/comments/{ticket_id}         -> same listing, short form
- POST   /api/comments                     -> create comment (auth required)
- DELETE /api/comments/{comment_id}        -> delete comment (author only)
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from ticketdesk import models, schemas
from ticketdesk.audit import client_ip, log_audit
from ticketdesk.auth import AuthSession, get_auth_session
from ticketdesk.database import get_db
from ticketdesk.dependencies import get_ticket_or_404, require_owner
from ticketdesk.errors import NotFound

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/comments", tags=["Comments"])


def _list_for_ticket(ticket_id: str, db: Session) -> List[schemas.CommentResponse]:
    ticket = get_ticket_or_404(ticket_id, db)
    comments = (
        db.query(models.CommentModel)
        .filter(models.CommentModel.ticket_id == ticket.id)
        .order_by(models.CommentModel.created_at.asc(), models.CommentModel.id.asc())
        .all()
    )
    return [schemas.CommentResponse.model_validate(c) for c in comments]


@router.get("/ticket/{ticket_id}", response_model=List[schemas.CommentResponse])
async def list_comments(ticket_id: str, db: Session = Depends(get_db), session: AuthSession = Depends(get_auth_session)) -> List[schemas.CommentResponse]:
    """List the comments of a ticket in chronological order."""
    return _list_for_ticket(ticket_id, db)


@router.get("/{ticket_id}", response_model=List[schemas.CommentResponse], include_in_schema=False)
async def list_comments_short(ticket_id: str, db: Session = Depends(get_db), session: AuthSession = Depends(get_auth_session)) -> List[schemas.CommentResponse]:
    return _list_for_ticket(ticket_id, db)


@router.post("", response_model=schemas.CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    payload: schemas.CommentCreate,
    request: Request,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(get_auth_session),
) -> schemas.CommentResponse:
    """Add a comment to an existing ticket as the authenticated user."""
    ticket = get_ticket_or_404(payload.ticket_id, db)

    comment = models.CommentModel(
        ticket_id=ticket.id,
        user_id=session.user_id,
        username=session.username,
        content=payload.content,
        created_at=datetime.now(timezone.utc),
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)

    log_audit(db, session.user_id, "CREATE", "Comment", comment.id, "SUCCESS", client_ip(request), username=session.username)

    return schemas.CommentResponse.model_validate(comment)


@router.delete("/{comment_id}", response_model=schemas.MessageResponse)
async def delete_comment(
    comment_id: str,
    request: Request,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(get_auth_session),
) -> schemas.MessageResponse:
    """Delete a comment. Missing and foreign comments get the same 404."""
    not_found = NotFound("Comment not found", code="comment_not_found")

    comment = db.query(models.CommentModel).filter(models.CommentModel.id == comment_id).first()
    if not comment:
        raise not_found
    require_owner(comment.user_id, session, resource="comment", error=not_found)

    db.delete(comment)
    db.commit()

    log_audit(db, session.user_id, "DELETE", "Comment", comment_id, "SUCCESS", client_ip(request), username=session.username)

    return schemas.MessageResponse(message="Comment deleted")
