"""Field validators shared by the request schemas.

Each validator returns a `ValidationResult` instead of raising so callers
can decide how to surface the message. The Pydantic schemas in
`ticketdesk.schemas` turn an invalid result into a `ValueError`.
"""

from __future__ import annotations

import re
from typing import Any, NamedTuple, Optional

from ticketdesk.models import TicketStatus

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 20
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 100
TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 1000
COMMENT_MAX_LENGTH = 500

TICKET_STATUSES = tuple(s.value for s in TicketStatus)

_USERNAME_RE = re.compile(r"^[a-zA-Z0-9_-]+$")
_LETTER_RE = re.compile(r"[a-zA-Z]")
_DIGIT_RE = re.compile(r"[0-9]")


class ValidationResult(NamedTuple):
    is_valid: bool
    error: Optional[str] = None


VALID = ValidationResult(True)


def _invalid(message: str) -> ValidationResult:
    return ValidationResult(False, message)


def validate_username(username: Any) -> ValidationResult:
    if not username or not isinstance(username, str) or not username.strip():
        return _invalid("Username is required")

    trimmed = username.strip()
    if len(trimmed) < USERNAME_MIN_LENGTH:
        return _invalid(f"Username must be at least {USERNAME_MIN_LENGTH} characters long")
    if len(trimmed) > USERNAME_MAX_LENGTH:
        return _invalid(f"Username must be at most {USERNAME_MAX_LENGTH} characters")
    if not _USERNAME_RE.match(trimmed):
        return _invalid("Username can only contain letters, numbers, underscores, and hyphens")
    return VALID


def validate_password(password: Any) -> ValidationResult:
    if not password or not isinstance(password, str):
        return _invalid("Password is required")
    if len(password) < PASSWORD_MIN_LENGTH:
        return _invalid(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
    if len(password) > PASSWORD_MAX_LENGTH:
        return _invalid(f"Password must be at most {PASSWORD_MAX_LENGTH} characters")
    if not (_LETTER_RE.search(password) and _DIGIT_RE.search(password)):
        return _invalid("Password must contain at least one letter and one number")
    return VALID


def validate_ticket_title(title: Any) -> ValidationResult:
    if not title or not isinstance(title, str) or not title.strip():
        return _invalid("Title is required")

    trimmed = title.strip()
    if len(trimmed) < TITLE_MIN_LENGTH:
        return _invalid(f"Title must be at least {TITLE_MIN_LENGTH} characters long")
    if len(trimmed) > TITLE_MAX_LENGTH:
        return _invalid(f"Title must be at most {TITLE_MAX_LENGTH} characters")
    return VALID


def validate_ticket_description(description: Any) -> ValidationResult:
    if description is None:
        return VALID
    if not isinstance(description, str):
        return _invalid("Description must be a string")
    if len(description) > DESCRIPTION_MAX_LENGTH:
        return _invalid(f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters")
    return VALID


def validate_ticket_status(status: Any) -> ValidationResult:
    if status is None:
        return VALID
    if status not in TICKET_STATUSES:
        return _invalid("Status must be OPEN, IN_PROGRESS, or CLOSED")
    return VALID


def validate_comment(content: Any) -> ValidationResult:
    if content is None or not isinstance(content, str):
        return _invalid("Comment content is required")

    trimmed = content.strip()
    if not trimmed:
        return _invalid("Comment cannot be empty")
    if len(trimmed) > COMMENT_MAX_LENGTH:
        return _invalid(f"Comment must be at most {COMMENT_MAX_LENGTH} characters")
    return VALID


__all__ = [
    "ValidationResult",
    "TICKET_STATUSES",
    "validate_username",
    "validate_password",
    "validate_ticket_title",
    "validate_ticket_description",
    "validate_ticket_status",
    "validate_comment",
]
