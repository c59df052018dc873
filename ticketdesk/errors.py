"""Centralized API errors and the standard error schema.

Every error leaves the API as `{"error": {"code": str, "message": str, "details": ...}}`.

Provides:
- APIError subclasses for the error taxonomy (ValidationFailed, Unauthorized,
  Forbidden, NotFound, Conflict, RateLimited, ServerError)
- error_payload(...) building the envelope
- ValidationFailed.from_errors(...) for Pydantic request validation errors
"""
from __future__ import annotations

from typing import Any, List, Optional

from fastapi import HTTPException, status
from fastapi.encoders import jsonable_encoder


def error_payload(code: str, message: str, details: Optional[Any] = None) -> dict:
    payload: dict = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return jsonable_encoder(payload)


class APIError(HTTPException):
    """HTTPException carrying a machine-readable `code` next to the message."""

    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR
    code_default = "error"
    message_default = "An error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[Any] = None,
        status_code: Optional[int] = None,
        headers: Optional[dict] = None,
    ):
        self.code = code or self.code_default
        self.message = message or self.message_default
        self.details = details
        super().__init__(
            status_code=status_code or self.status_code_default,
            detail=error_payload(self.code, self.message, details),
            headers=headers,
        )


class ValidationFailed(APIError):
    status_code_default = status.HTTP_400_BAD_REQUEST
    code_default = "validation_error"
    message_default = "Validation error"

    @classmethod
    def from_errors(cls, errors: List[dict]) -> "ValidationFailed":
        """Build the error for request validation failures.

        The first error's message becomes the top-level human-readable message,
        the full list is kept under `details`.
        """
        message = None
        if errors:
            message = _clean_message(str(errors[0].get("msg", ""))) or None
        details = []
        for err in errors:
            item = dict(err)
            item["msg"] = _clean_message(str(item.get("msg", "")))
            # `ctx` may hold the raised exception object, which is not JSON friendly
            item.pop("ctx", None)
            item.pop("url", None)
            details.append(item)
        return cls(message, details=details)


class Unauthorized(APIError):
    """Missing or unusable credentials."""

    status_code_default = status.HTTP_401_UNAUTHORIZED
    code_default = "authentication_required"
    message_default = "Authentication required"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message, code, details, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(APIError):
    """Valid credential presented but it does not grant the action."""

    status_code_default = status.HTTP_403_FORBIDDEN
    code_default = "forbidden"
    message_default = "Access to this resource is forbidden"


class NotFound(APIError):
    status_code_default = status.HTTP_404_NOT_FOUND
    code_default = "not_found"
    message_default = "Resource not found"


class Conflict(APIError):
    # Duplicates are reported as 400, matching the register contract
    status_code_default = status.HTTP_400_BAD_REQUEST
    code_default = "conflict"
    message_default = "Resource already exists"


class RateLimited(APIError):
    status_code_default = status.HTTP_429_TOO_MANY_REQUESTS
    code_default = "rate_limited"
    message_default = "Rate limit exceeded"


class ServerError(APIError):
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR
    code_default = "server_error"
    message_default = "Server error"


def _clean_message(msg: str) -> str:
    # Pydantic prefixes messages raised from validators with "Value error, "
    prefix = "Value error, "
    if msg.startswith(prefix):
        return msg[len(prefix):]
    return msg


__all__ = [
    "APIError",
    "ValidationFailed",
    "Unauthorized",
    "Forbidden",
    "NotFound",
    "Conflict",
    "RateLimited",
    "ServerError",
    "error_payload",
]
