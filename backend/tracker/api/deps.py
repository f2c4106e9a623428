"""FastAPI dependencies — one Session per request, engines built on it."""

from __future__ import annotations

from fastapi import Depends
from sqlmodel import Session

from tracker.db.database import get_session
from tracker.engines.queries import QueryEngine
from tracker.engines.relationships import RelationshipManager
from tracker.engines.status import StatusTransitionHandler
from tracker.engines.store import ProjectStore, TaskStore


def get_project_store(session: Session = Depends(get_session)) -> ProjectStore:
    return ProjectStore(session)


def get_task_store(session: Session = Depends(get_session)) -> TaskStore:
    return TaskStore(session)


def get_relationships(session: Session = Depends(get_session)) -> RelationshipManager:
    return RelationshipManager(session)


def get_queries(session: Session = Depends(get_session)) -> QueryEngine:
    return QueryEngine(session)


def get_status_handler(session: Session = Depends(get_session)) -> StatusTransitionHandler:
    return StatusTransitionHandler(session)
