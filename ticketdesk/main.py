"""FastAPI application factory and app configuration for TicketDesk.

This module creates the FastAPI `app`, configures middleware (CORS, rate limiting),
registers the routers under `ticketdesk.routers.*`, installs the error handlers
that render every failure as `{"error": {...}}` and initializes the DB on startup
(calls `ticketdesk.database.init_db`).
"""

from __future__ import annotations

import logging
import warnings
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ticketdesk import config
from ticketdesk.database import init_db
from ticketdesk.errors import APIError, RateLimited, ServerError, ValidationFailed
from ticketdesk.helpers.openapi import augment_openapi
from ticketdesk.routers import auth, comments, system, tickets

logger = logging.getLogger(__name__)
logging.basicConfig(level=config.LOG_LEVEL)

# python-jose still calls datetime.utcnow(); keep this targeted so it doesn't hide other issues.
warnings.filterwarnings("ignore", message=r"datetime.datetime.utcnow\(\) is deprecated")

limiter = Limiter(key_func=get_remote_address, default_limits=[config.RATE_LIMIT])


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Lifespan startup: initializing database")
    init_db()
    yield
    logger.info("Lifespan shutdown: cleaning up resources")


app = FastAPI(
    title="TicketDesk API",
    version="1.0.0",
    description="Ticket tracking API with user authentication, ticket CRUD and ticket comments",
    lifespan=lifespan,
    docs_url="/api-docs",
    redoc_url=None,
    openapi_url="/api/openapi.json",
)
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


def _render(err: APIError) -> JSONResponse:
    return JSONResponse(status_code=err.status_code, content=err.detail, headers=err.headers)


# Sync on purpose: SlowAPIMiddleware only calls synchronous handlers
@app.exception_handler(RateLimitExceeded)
def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return _render(RateLimited())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return _render(ValidationFailed.from_errors(list(exc.errors())))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc, APIError):
        return _render(exc)
    # Framework-raised errors such as unknown routes or wrong methods
    try:
        code = HTTPStatus(exc.status_code).phrase.lower().replace(" ", "_")
    except ValueError:
        code = "error"
    return _render(APIError(str(exc.detail), code=code, status_code=exc.status_code, headers=getattr(exc, "headers", None)))


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return _render(ServerError())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _render(ServerError())


for _module in (system, auth, tickets, comments):
    app.include_router(_module.router)
    logger.debug("Included router: %s", _module.__name__)


def custom_openapi() -> dict:
    if app.openapi_schema:
        return app.openapi_schema
    app.openapi_schema = augment_openapi(FastAPI.openapi(app))
    return app.openapi_schema


app.openapi = custom_openapi  # type: ignore[method-assign]


__all__ = ["app", "limiter"]
