"""Pydantic schemas for the TicketDesk API.

Request models delegate field rules to `ticketdesk.validation` so the API
and the standalone validators never disagree.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from ticketdesk import validation
from ticketdesk.models import TicketStatus


class SortField(str, Enum):
    CREATED_AT = "createdAt"
    TITLE = "title"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


def _check(result: validation.ValidationResult) -> None:
    if not result.is_valid:
        raise ValueError(result.error)


# ----------------------------- Users ---------------------------------
class UserResponse(BaseModel):
    id: str
    username: str
    created_at: datetime

    model_config = {"from_attributes": True}


# ----------------------------- Auth ----------------------------------
class Credentials(BaseModel):
    # None defaults route missing fields through the validators for their messages
    username: str = Field(None, validate_default=True)
    password: str = Field(None, validate_default=True)

    @field_validator("username", mode="before")
    @classmethod
    def validate_username(cls, v: Any) -> str:
        _check(validation.validate_username(v))
        return v.strip()

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v: Any) -> str:
        _check(validation.validate_password(v))
        return v


class RegisterRequest(Credentials):
    pass


class LoginRequest(Credentials):
    pass


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


# ----------------------------- Tickets -------------------------------
class TicketCreate(BaseModel):
    title: str = Field(None, validate_default=True)
    description: Optional[str] = None
    status: TicketStatus = TicketStatus.OPEN

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v: Any) -> str:
        _check(validation.validate_ticket_title(v))
        return v.strip()

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, v: Any) -> Optional[str]:
        _check(validation.validate_ticket_description(v))
        return v

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> Any:
        if v is None:
            return TicketStatus.OPEN
        _check(validation.validate_ticket_status(v))
        return v


class TicketUpdate(BaseModel):
    """Partial update: only the fields present in the request body are applied."""

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TicketStatus] = None

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v: Any) -> str:
        _check(validation.validate_ticket_title(v))
        return v.strip()

    @field_validator("description", mode="before")
    @classmethod
    def validate_description(cls, v: Any) -> Optional[str]:
        _check(validation.validate_ticket_description(v))
        return v

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("Status must be OPEN, IN_PROGRESS, or CLOSED")
        _check(validation.validate_ticket_status(v))
        return v


class TicketResponse(BaseModel):
    id: str
    title: str
    description: Optional[str]
    status: TicketStatus
    created_by_id: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# ----------------------------- Comments ------------------------------
class CommentCreate(BaseModel):
    ticket_id: str = Field(..., validation_alias=AliasChoices("ticket_id", "ticketId"))
    content: str = Field(None, validate_default=True)

    @field_validator("content", mode="before")
    @classmethod
    def validate_content(cls, v: Any) -> str:
        _check(validation.validate_comment(v))
        return v.strip()


class CommentResponse(BaseModel):
    id: str
    ticket_id: str
    user_id: str
    username: str
    content: str
    created_at: datetime

    model_config = {"from_attributes": True}


# ----------------------------- Misc ----------------------------------
class MessageResponse(BaseModel):
    message: str


__all__ = [
    "TicketStatus",
    "SortField",
    "SortOrder",
    "UserResponse",
    "RegisterRequest",
    "LoginRequest",
    "TokenResponse",
    "TicketCreate",
    "TicketUpdate",
    "TicketResponse",
    "CommentCreate",
    "CommentResponse",
    "MessageResponse",
]
