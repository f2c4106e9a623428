"""Task tracker FastAPI application.

Entry point for the backend server. Core failures raised by the engines are
mapped to HTTP here and nowhere else:

    NotFound          -> 404
    InvalidArgument   -> 400 (request-body validation failures too)
    StoreUnavailable  -> 500
    anything else     -> 500
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tracker.api.health import VERSION
from tracker.api.health import router as health_router
from tracker.api.v1.projects import router as projects_router
from tracker.api.v1.tasks import router as tasks_router
from tracker.config import get_cors_origins
from tracker.db.database import create_db_and_tables
from tracker.errors import InvalidArgument, NotFound, StoreUnavailable

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    create_db_and_tables()
    logger.info("Task tracker %s started", VERSION)
    yield
    logger.info("Task tracker shutting down")


def _error(status_code: int, code: str, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": code, "detail": detail})


async def not_found_handler(request: Request, exc: NotFound):
    return _error(404, exc.code, str(exc))


async def invalid_argument_handler(request: Request, exc: InvalidArgument):
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
    return _error(400, exc.code, str(exc))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    messages = [
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
        for err in exc.errors()
    ]
    logger.warning("Invalid request %s %s: %s", request.method, request.url.path, messages)
    return _error(400, InvalidArgument.code, "; ".join(messages))


async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
    return _error(500, exc.code, "Store unavailable.")


# Global exception handler — prevent internal details from leaking
async def unhandled_exception_handler(request: Request, exc: Exception):
    if isinstance(exc, HTTPException):
        raise exc
    logger.error("Unhandled exception on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return _error(500, "error", "Internal server error.")


def register_exception_handlers(target: FastAPI) -> None:
    """Install the error-taxonomy -> HTTP status mapping on an app."""
    target.add_exception_handler(NotFound, not_found_handler)
    target.add_exception_handler(InvalidArgument, invalid_argument_handler)
    target.add_exception_handler(RequestValidationError, validation_error_handler)
    target.add_exception_handler(StoreUnavailable, store_unavailable_handler)
    target.add_exception_handler(Exception, unhandled_exception_handler)


app = FastAPI(
    title="Task Tracker",
    description="Projects, tasks, and the queries that connect them",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type"],
)
register_exception_handlers(app)

# Routes
app.include_router(health_router)
app.include_router(projects_router)
app.include_router(tasks_router)


@app.get("/")
def root():
    return {"name": "Task Tracker", "version": VERSION, "status": "running"}
