"""System routes: liveness probes."""
from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(prefix="/api", tags=["System"])


@router.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@router.get("/ping", response_class=PlainTextResponse)
async def ping() -> str:
    return "pong"
