"""Runtime configuration for TicketDesk.

Values come from environment variables (optionally loaded from a `.env`
file) with development-friendly defaults. Import the module-level
constants instead of calling `os.getenv` throughout the code base.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv()

# Repository root, where the default SQLite file lives
PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _default_sqlite_url() -> str:
    db_path = PROJECT_ROOT / "ticketdesk.db"
    return f"sqlite:///{db_path.as_posix()}"


HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "5050"))

DATABASE_URL: str = os.getenv("DATABASE_URL", _default_sqlite_url())

JWT_SECRET: str = os.getenv("JWT_SECRET", "change-this-secret-in-production")
JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
# Tokens are valid for 24 hours unless configured otherwise
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

RATE_LIMIT: str = os.getenv("RATE_LIMIT", "100/minute")
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


def cors_origins() -> List[str]:
    origins = os.getenv("CORS_ORIGINS", "*")
    if origins == "*":
        return ["*"]
    # comma separated list
    return [o.strip() for o in origins.split(",") if o.strip()]


__all__ = [
    "HOST",
    "PORT",
    "DATABASE_URL",
    "JWT_SECRET",
    "JWT_ALGORITHM",
    "ACCESS_TOKEN_EXPIRE_MINUTES",
    "RATE_LIMIT",
    "LOG_LEVEL",
    "cors_origins",
]
