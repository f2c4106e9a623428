"""Shared test fixtures for the task tracker backend tests."""

import os
import sys

import pytest

# Ensure backend is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
os.environ.setdefault("DATABASE_URL", "sqlite:///test.db")

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from tracker.api.health import router as health_router
from tracker.api.v1.projects import router as projects_router
from tracker.api.v1.tasks import router as tasks_router
from tracker.db.database import get_session
from tracker.main import register_exception_handlers
from tracker.models.task import Project, ProjectTask, Task  # noqa: F401


def make_memory_engine():
    """In-memory SQLite shared by every connection of one test."""
    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture
def engine():
    return make_memory_engine()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    """Test app with the tracker routers and error mapping, no middleware."""

    def _session_override():
        with Session(engine) as session:
            yield session

    test_app = FastAPI()
    register_exception_handlers(test_app)
    test_app.include_router(health_router)
    test_app.include_router(projects_router)
    test_app.include_router(tasks_router)
    test_app.dependency_overrides[get_session] = _session_override
    return TestClient(test_app)
