"""Tracker engines — store, relationships, queries, status transitions."""

from tracker.engines.queries import QueryEngine
from tracker.engines.relationships import RelationshipManager
from tracker.engines.status import StatusTransitionHandler
from tracker.engines.store import ProjectStore, TaskStore

__all__ = [
    "ProjectStore",
    "QueryEngine",
    "RelationshipManager",
    "StatusTransitionHandler",
    "TaskStore",
]
