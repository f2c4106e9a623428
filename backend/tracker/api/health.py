"""Health check endpoint — database connectivity and journal mode."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import text

from tracker.db import database

router = APIRouter()

VERSION = "0.1.0"


class HealthStatus(BaseModel):
    status: str  # "healthy" | "unhealthy"
    version: str
    checks: dict[str, dict]
    timestamp: datetime


@router.get("/health", response_model=HealthStatus)
def health_check() -> HealthStatus:
    """Check that the store answers a trivial query."""
    checks: dict[str, dict] = {}
    healthy = True

    try:
        with database.engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
            detail = "connected"
            if conn.dialect.name == "sqlite":
                mode = conn.execute(text("PRAGMA journal_mode")).fetchone()
                detail = f"journal_mode={mode[0]}"
            checks["database"] = {"status": "ok", "detail": detail}
    except Exception as e:
        checks["database"] = {"status": "error", "detail": str(e)[:200]}
        healthy = False

    return HealthStatus(
        status="healthy" if healthy else "unhealthy",
        version=VERSION,
        checks=checks,
        timestamp=datetime.now(timezone.utc),
    )
