"""Database setup — SQLite with WAL mode via SQLModel/SQLAlchemy.

What goes where:
- project       — Project records
- task          — Task records
- project_task  — membership index (project id -> task ids), no FK on task_id

The engine is created once per process; every request gets its own Session
through `get_session`, and the engines in `tracker.engines` receive that
Session explicitly.
"""

from __future__ import annotations

import contextlib
import logging
import os
from collections.abc import Iterator

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError
from sqlmodel import Session, SQLModel, create_engine

from tracker.config import settings
from tracker.errors import StoreUnavailable

logger = logging.getLogger(__name__)


def get_database_url() -> str:
    """Get database URL, ensuring the data directory exists."""
    url = settings.database_url
    if url.startswith("sqlite:///"):
        db_path = url.replace("sqlite:///", "")
        db_dir = os.path.dirname(db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
    return url


# Enable WAL mode for all SQLite connections
@event.listens_for(Engine, "connect")
def set_sqlite_wal(dbapi_connection, connection_record):
    """Enable WAL mode so readers never block on the single writer."""
    if type(dbapi_connection).__module__.split(".")[0] != "sqlite3":
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")  # Safe with WAL
    cursor.execute(f"PRAGMA busy_timeout={int(settings.sqlite_busy_timeout_ms)}")
    cursor.close()


def _casefold(value):
    return value.casefold() if isinstance(value, str) else value


# SQLite lower() only folds ASCII; name search compares casefold() on both sides
@event.listens_for(Engine, "connect")
def register_sqlite_casefold(dbapi_connection, connection_record):
    if type(dbapi_connection).__module__.split(".")[0] != "sqlite3":
        return
    dbapi_connection.create_function("casefold", 1, _casefold, deterministic=True)


engine = create_engine(
    get_database_url(),
    echo=False,
    connect_args={"check_same_thread": False},  # Sessions cross FastAPI's threadpool
)


def create_db_and_tables(bind: Engine | None = None) -> None:
    """Create all tables defined by SQLModel metadata."""
    # Register the table classes on SQLModel.metadata before create_all
    from tracker.models.task import Project, ProjectTask, Task  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)


def get_session() -> Iterator[Session]:
    """Dependency for FastAPI endpoints."""
    with Session(engine) as session:
        yield session


@contextlib.contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Translate driver-level failures into StoreUnavailable.

    IntegrityError is a DBAPIError too, but callers that expect it catch it
    before it reaches this boundary.
    """
    try:
        yield
    except DBAPIError as exc:
        logger.error("Store failure during %s: %s", operation, exc, exc_info=True)
        raise StoreUnavailable(f"Store unavailable during {operation}") from exc
