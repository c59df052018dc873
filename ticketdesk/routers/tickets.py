"""Ticket routes: CRUD operations plus search, filter and sort on listing."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ticketdesk import models, schemas
from ticketdesk.audit import client_ip, log_audit
from ticketdesk.auth import AuthSession, get_auth_session
from ticketdesk.database import get_db
from ticketdesk.dependencies import get_ticket_or_404, require_owner
from ticketdesk.errors import Forbidden

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tickets", tags=["Tickets"])


def _as_ticket_id(value: str) -> Optional[str]:
    """Canonical id string when `value` spells a UUID in any accepted form."""
    try:
        return str(uuid.UUID(value))
    except ValueError:
        return None


def search_tickets(
    db: Session,
    search: Optional[str] = None,
    status_filter: Optional[schemas.TicketStatus] = None,
    sort_by: schemas.SortField = schemas.SortField.CREATED_AT,
    sort_order: schemas.SortOrder = schemas.SortOrder.DESC,
) -> List[models.TicketModel]:
    """Query tickets by title substring (or exact id), status, with ordering."""
    q = db.query(models.TicketModel)

    term = (search or "").strip()
    if term:
        condition = models.TicketModel.title.icontains(term, autoescape=True)
        ticket_id = _as_ticket_id(term)
        if ticket_id is not None:
            condition = or_(condition, models.TicketModel.id == ticket_id)
        q = q.filter(condition)

    if status_filter is not None:
        q = q.filter(models.TicketModel.status == status_filter.value)

    if sort_by == schemas.SortField.TITLE:
        column = func.lower(models.TicketModel.title)
    else:
        column = models.TicketModel.created_at

    if sort_order == schemas.SortOrder.ASC:
        q = q.order_by(column.asc(), models.TicketModel.created_at.asc())
    else:
        q = q.order_by(column.desc(), models.TicketModel.created_at.desc())

    return q.all()


@router.post("", response_model=schemas.TicketResponse, status_code=status.HTTP_201_CREATED)
async def create_ticket(
    payload: schemas.TicketCreate,
    request: Request,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(get_auth_session),
) -> schemas.TicketResponse:
    """Create a ticket owned by the authenticated user. Status defaults to OPEN."""
    now = datetime.now(timezone.utc)

    ticket = models.TicketModel(
        title=payload.title,
        description=payload.description,
        status=payload.status.value,
        created_by_id=session.user_id,
        created_at=now,
        updated_at=now,
    )

    db.add(ticket)
    db.commit()
    db.refresh(ticket)

    log_audit(db, session.user_id, "CREATE", "Ticket", ticket.id, "SUCCESS", client_ip(request), username=session.username)

    return schemas.TicketResponse.model_validate(ticket)


@router.get("", response_model=List[schemas.TicketResponse])
async def list_tickets(
    search: Optional[str] = Query(None, max_length=200, description="Case-insensitive title substring or exact ticket id"),
    status_filter: Optional[schemas.TicketStatus] = Query(None, alias="status"),
    sort_by: schemas.SortField = Query(schemas.SortField.CREATED_AT, alias="sortBy"),
    sort_order: schemas.SortOrder = Query(schemas.SortOrder.DESC, alias="sortOrder"),
    db: Session = Depends(get_db),
    session: AuthSession = Depends(get_auth_session),
) -> List[schemas.TicketResponse]:
    """List tickets visible to any authenticated user, with optional search, filter and sort."""
    tickets = search_tickets(db, search=search, status_filter=status_filter, sort_by=sort_by, sort_order=sort_order)
    logger.debug("list_tickets user=%s search=%r matched=%d", session.user_id, search, len(tickets))
    return [schemas.TicketResponse.model_validate(t) for t in tickets]


@router.get("/{ticket_id}", response_model=schemas.TicketResponse)
async def get_ticket(ticket_id: str, db: Session = Depends(get_db), session: AuthSession = Depends(get_auth_session)) -> schemas.TicketResponse:
    """Return a single ticket."""
    ticket = get_ticket_or_404(ticket_id, db)
    return schemas.TicketResponse.model_validate(ticket)


@router.put("/{ticket_id}", response_model=schemas.TicketResponse)
async def update_ticket(
    ticket_id: str,
    payload: schemas.TicketUpdate,
    request: Request,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(get_auth_session),
) -> schemas.TicketResponse:
    """Replace the provided fields of a ticket. Only its creator may update it."""
    ticket = get_ticket_or_404(ticket_id, db)
    try:
        require_owner(ticket.created_by_id, session, resource="ticket")
    except Forbidden:
        log_audit(db, session.user_id, "UPDATE", "Ticket", ticket_id, "FORBIDDEN", client_ip(request), username=session.username)
        raise

    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if isinstance(value, schemas.TicketStatus):
            value = value.value
        setattr(ticket, field, value)

    ticket.updated_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(ticket)

    log_audit(db, session.user_id, "UPDATE", "Ticket", ticket.id, "SUCCESS", client_ip(request), username=session.username)

    return schemas.TicketResponse.model_validate(ticket)


@router.delete("/{ticket_id}", response_model=schemas.MessageResponse)
async def delete_ticket(
    ticket_id: str,
    request: Request,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(get_auth_session),
) -> schemas.MessageResponse:
    """Delete a ticket and its comments. Only its creator may delete it."""
    ticket = get_ticket_or_404(ticket_id, db)
    try:
        require_owner(ticket.created_by_id, session, resource="ticket")
    except Forbidden:
        log_audit(db, session.user_id, "DELETE", "Ticket", ticket_id, "FORBIDDEN", client_ip(request), username=session.username)
        raise

    db.delete(ticket)
    db.commit()

    log_audit(db, session.user_id, "DELETE", "Ticket", ticket_id, "SUCCESS", client_ip(request), username=session.username)

    return schemas.MessageResponse(message="Ticket deleted")
