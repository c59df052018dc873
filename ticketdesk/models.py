"""SQLAlchemy models for the TicketDesk backend.

Models implemented:
- UserModel
- TicketModel
- CommentModel
- AuditLogModel

Uses SQLAlchemy 2.0 typing (Mapped, mapped_column) and the declarative Base from `ticketdesk.database`.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum as PyEnum
from typing import List, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ticketdesk.database import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TicketStatus(str, PyEnum):
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    CLOSED = "CLOSED"


class UserModel(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, index=True, default=_new_id)
    username: Mapped[str] = mapped_column(String(20), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    # Relationships
    tickets_created: Mapped[List["TicketModel"]] = relationship("TicketModel", back_populates="creator")
    comments: Mapped[List["CommentModel"]] = relationship("CommentModel", back_populates="author")

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"<User id={self.id} username={self.username}>"


class TicketModel(Base):
    __tablename__ = "tickets"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, index=True, default=_new_id)
    title: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    status: Mapped[str] = mapped_column(String(32), default=TicketStatus.OPEN.value, nullable=False)

    created_by_id: Mapped[Optional[str]] = mapped_column(String(64), ForeignKey("users.id"), index=True, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    # Relationships
    creator = relationship("UserModel", back_populates="tickets_created", foreign_keys=[created_by_id])
    comments: Mapped[List["CommentModel"]] = relationship(
        "CommentModel", back_populates="ticket", cascade="all, delete-orphan", order_by="CommentModel.created_at"
    )

    def __repr__(self) -> str:
        return f"<Ticket id={self.id} title={self.title} status={self.status}>"


class CommentModel(Base):
    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, index=True, default=_new_id)
    ticket_id: Mapped[str] = mapped_column(String(64), ForeignKey("tickets.id"), index=True, nullable=False)
    user_id: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), nullable=False)
    # Denormalized author name; usernames never change after registration
    username: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str] = mapped_column(String(500), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    # Relationships
    ticket = relationship("TicketModel", back_populates="comments")
    author = relationship("UserModel", back_populates="comments")

    def __repr__(self) -> str:
        return f"<Comment id={self.id} ticket_id={self.ticket_id} user_id={self.user_id}>"


class AuditLogModel(Base):
    __tablename__ = "audit_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    username: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    action: Mapped[str] = mapped_column(String(255), nullable=False)
    resource: Mapped[str] = mapped_column(String(255), nullable=False)
    resource_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    details: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    def __repr__(self) -> str:
        return f"<Audit id={self.id} action={self.action} resource={self.resource}>"


__all__ = [
    "TicketStatus",
    "UserModel",
    "TicketModel",
    "CommentModel",
    "AuditLogModel",
]
