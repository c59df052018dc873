"""SQLAlchemy engine, session factory and the request-scoped session dependency.

The URL comes from `ticketdesk.config.DATABASE_URL`. SQLite connections are
shared across uvicorn's worker threads, so they are opened with
`check_same_thread=False`; other backends get connection liveness checks.
"""

from __future__ import annotations

import logging
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from ticketdesk.config import DATABASE_URL

logger = logging.getLogger(__name__)


def _make_engine(url: str):
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)


engine = _make_engine(DATABASE_URL)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False, class_=Session)

Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """One session per request, closed once the response is sent."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create the users, tickets, comments and audit_logs tables if missing."""
    # Model classes register themselves on Base when imported
    import ticketdesk.models  # noqa: F401

    try:
        Base.metadata.create_all(bind=engine)
    except Exception:
        logger.exception("Failed to create tables on %s", engine.url.render_as_string(hide_password=True))
        raise
    logger.info("Database ready: %s", engine.url.render_as_string(hide_password=True))


__all__ = ["Base", "engine", "SessionLocal", "get_db", "init_db"]
