"""Audit trail helpers shared by the routers."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Request
from sqlalchemy.orm import Session

from ticketdesk import models

logger = logging.getLogger(__name__)


def client_ip(request: Optional[Request]) -> Optional[str]:
    return request.client.host if request is not None and request.client else None


def log_audit(
    db: Session,
    user_id: Optional[str],
    action: str,
    resource: str,
    resource_id: Optional[str],
    status_str: str,
    ip_address: Optional[str],
    username: Optional[str] = None,
    details: Optional[str] = None,
) -> None:
    """Persist an audit entry. Failures are logged and never propagate."""
    try:
        entry = models.AuditLogModel(
            user_id=user_id,
            username=username,
            action=action,
            resource=resource,
            resource_id=resource_id,
            details=details,
            status=status_str,
            ip_address=ip_address,
        )
        db.add(entry)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to write audit log")


__all__ = ["client_ip", "log_audit"]
