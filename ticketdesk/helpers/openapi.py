"""OpenAPI augmentation helpers.

The generated schema is extended with request/response examples for the
ticket and comment endpoints and a shared `APIError` component describing
the error envelope.
"""
from __future__ import annotations

from typing import Any, Dict

TICKET_EXAMPLE = {
    "id": "3f1c2a9e-8b7d-4c55-9a0e-2d6f1b7c4e10",
    "title": "Fix login bug",
    "description": "Login form rejects valid passwords",
    "status": "OPEN",
    "created_by_id": "a6b0d3c2-1e4f-4a8b-9c7d-5e2f1a0b3c4d",
    "created_at": "2026-02-07T10:00:00Z",
    "updated_at": "2026-02-07T10:00:00Z",
}


def _json_examples(operation: Dict[str, Any], section: str, key: str = "application/json") -> Dict[str, Any]:
    if section == "requestBody":
        container = operation.setdefault("requestBody", {})
    else:
        container = operation.setdefault("responses", {}).setdefault(section, {})
    content = container.setdefault("content", {})
    return content.setdefault(key, {}).setdefault("examples", {})


def augment_openapi(spec: Dict[str, Any]) -> Dict[str, Any]:
    """Return `spec` augmented with examples for key operations.

    Adds:
    - request/response examples for POST /api/tickets and POST /api/comments
    - the `APIError` schema and common error examples
    """
    s = spec
    paths = s.setdefault("paths", {})

    post_tickets = paths.get("/api/tickets", {}).get("post")
    if post_tickets is not None:
        _json_examples(post_tickets, "requestBody")["create_ticket_example"] = {
            "summary": "Create a ticket (status defaults to OPEN)",
            "value": {"title": "Fix login bug", "description": "Login form rejects valid passwords"},
        }
        _json_examples(post_tickets, "201")["created_ticket"] = {
            "summary": "Created ticket",
            "value": TICKET_EXAMPLE,
        }

    post_comments = paths.get("/api/comments", {}).get("post")
    if post_comments is not None:
        _json_examples(post_comments, "requestBody")["create_comment_example"] = {
            "summary": "Comment on a ticket",
            "value": {"ticket_id": TICKET_EXAMPLE["id"], "content": "Reproduced on staging"},
        }

    components = s.setdefault("components", {})
    schemas = components.setdefault("schemas", {})
    schemas.setdefault(
        "APIError",
        {
            "type": "object",
            "properties": {
                "error": {
                    "type": "object",
                    "properties": {
                        "code": {"type": "string"},
                        "message": {"type": "string"},
                        "details": {"type": "array", "items": {"type": "object"}},
                    },
                    "required": ["code", "message"],
                }
            },
        },
    )

    examples = components.setdefault("examples", {})
    examples.setdefault(
        "username_taken_example",
        {
            "summary": "Duplicate username on register",
            "value": {"error": {"code": "username_taken", "message": "Username already exists"}},
        },
    )
    examples.setdefault(
        "invalid_token_example",
        {
            "summary": "Expired or tampered bearer token",
            "value": {"error": {"code": "invalid_token", "message": "Invalid or expired token"}},
        },
    )

    return s
