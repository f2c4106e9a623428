"""Query Engine — read-only filtered and sorted views over tasks and projects.

Date windows are half-open, [start, end), anchored at local midnight.
"Due" can be judged by the task's own due_date (by="task") or by the
due_date of any project the task belongs to (by="project"); the latter joins
through the project_task membership index.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Sequence

from sqlalchemy import func
from sqlmodel import Session, select

from tracker.db.database import store_errors
from tracker.engines.relationships import RelationshipManager
from tracker.engines.store import ProjectStore, TaskStore, coerce_timestamp
from tracker.errors import InvalidArgument, NotFound
from tracker.models.task import (
    PROJECT_SORT_FIELDS,
    TASK_SORT_FIELDS,
    Project,
    ProjectTask,
    Task,
)

logger = logging.getLogger(__name__)

DUE_BY_MODES: tuple[str, ...] = ("task", "project")


# === Query-string coercion ===


def parse_is_done(raw: str | None) -> bool:
    """Only the literal "true" (any case) selects completed tasks."""
    return (raw or "").strip().lower() == "true"


def parse_date(raw: str | None, field: str) -> datetime:
    """Parse an ISO-8601 date or datetime query value."""
    if raw is None or not raw.strip():
        raise InvalidArgument(f"{field} is required")
    return coerce_timestamp(raw, field)  # type: ignore[return-value]


def day_window(now: datetime | None = None) -> tuple[datetime, datetime]:
    """Return (start of today, start of tomorrow) in local time."""
    now = coerce_timestamp(now, "now") if now is not None else datetime.now()
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


def _like_pattern(substring: str) -> str:
    escaped = substring.casefold().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class QueryEngine:
    """Filtered and sorted reads. Never mutates the store."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.tasks = TaskStore(session)
        self.projects = ProjectStore(session)
        self.relationships = RelationshipManager(session)

    # --- listing ---

    def list_tasks(self) -> Sequence[Task]:
        return self.tasks.list_all()

    def list_projects(self) -> Sequence[Project]:
        return self.projects.list_all()

    # --- due dates ---

    def tasks_due_between(
        self, start: datetime, end: datetime, by: str = "task"
    ) -> Sequence[Task]:
        """Tasks due in [start, end), judged by the task's or its project's due_date."""
        if by not in DUE_BY_MODES:
            raise InvalidArgument(f"Invalid due-date mode: {by!r}. Use one of {', '.join(DUE_BY_MODES)}")
        start = coerce_timestamp(start, "start")
        end = coerce_timestamp(end, "end")
        if start is None or end is None or start >= end:
            raise InvalidArgument("start must be before end")

        if by == "task":
            statement = (
                select(Task)
                .where(Task.due_date >= start, Task.due_date < end)
                .order_by(Task.due_date, Task.created_at)
            )
        else:
            due_projects = select(Project.id).where(
                Project.due_date >= start, Project.due_date < end
            )
            member_ids = select(ProjectTask.task_id).where(
                ProjectTask.project_id.in_(due_projects)  # type: ignore[attr-defined]
            )
            statement = (
                select(Task)
                .where(Task.id.in_(member_ids))  # type: ignore[union-attr]
                .order_by(Task.created_at)
            )

        logger.debug("tasks_due_between start=%s end=%s by=%s", start, end, by)
        with store_errors("query due tasks"):
            return self.session.exec(statement).all()

    def tasks_due_today(self, by: str = "task", now: datetime | None = None) -> Sequence[Task]:
        """Tasks due in today's local window."""
        start, end = day_window(now)
        return self.tasks_due_between(start, end, by=by)

    def projects_with_tasks_due_today(self, now: datetime | None = None) -> Sequence[Project]:
        """Projects with at least one member task whose own due_date is today."""
        start, end = day_window(now)
        due_task_ids = select(Task.id).where(Task.due_date >= start, Task.due_date < end)
        project_ids = select(ProjectTask.project_id).where(
            ProjectTask.task_id.in_(due_task_ids)  # type: ignore[attr-defined]
        )
        statement = (
            select(Project)
            .where(Project.id.in_(project_ids))  # type: ignore[union-attr]
            .order_by(Project.created_at)
        )
        with store_errors("query projects with due tasks"):
            return self.session.exec(statement).all()

    # --- status / name ---

    def filter_tasks_by_status(self, is_done: bool) -> Sequence[Task]:
        statement = select(Task).where(Task.is_done == is_done).order_by(Task.created_at)
        with store_errors("filter tasks by status"):
            return self.session.exec(statement).all()

    def search_tasks_by_name(self, substring: str) -> Sequence[Task]:
        """Case-insensitive substring match on task name."""
        statement = (
            select(Task)
            .where(func.casefold(Task.name).like(_like_pattern(substring or ""), escape="\\"))
            .order_by(Task.created_at)
        )
        with store_errors("search tasks by name"):
            return self.session.exec(statement).all()

    def filter_projects_by_name(self, substring: str) -> Sequence[Project]:
        """Case-insensitive substring match on project name."""
        statement = (
            select(Project)
            .where(func.casefold(Project.name).like(_like_pattern(substring or ""), escape="\\"))
            .order_by(Project.created_at)
        )
        with store_errors("search projects by name"):
            return self.session.exec(statement).all()

    def find_project_by_name(self, substring: str) -> Project:
        """First project whose name matches; NotFound if none does."""
        if not substring:
            raise InvalidArgument("Project name is required")
        matches = self.filter_projects_by_name(substring)
        if not matches:
            raise NotFound("Project", substring)
        return matches[0]

    def tasks_by_project_name(self, substring: str) -> Sequence[Task]:
        """Resolve a project by name, then return its tasks.

        Two separate reads; the project's set may change in between.
        """
        project = self.find_project_by_name(substring)
        return self.relationships.tasks_of_project(project.id)

    # --- sorting ---

    def sort_tasks(self, field: str) -> Sequence[Task]:
        """All tasks ascending by one of start_date, due_date, done_date."""
        if field not in TASK_SORT_FIELDS:
            raise InvalidArgument(
                f"Invalid sort field: {field!r}. Use one of {', '.join(TASK_SORT_FIELDS)}"
            )
        statement = select(Task).order_by(getattr(Task, field), Task.created_at)
        with store_errors("sort tasks"):
            return self.session.exec(statement).all()

    def sort_projects(self, field: str) -> Sequence[Project]:
        """All projects ascending by start_date or due_date."""
        if field not in PROJECT_SORT_FIELDS:
            raise InvalidArgument(
                f"Invalid sort field: {field!r}. Use one of {', '.join(PROJECT_SORT_FIELDS)}"
            )
        statement = select(Project).order_by(getattr(Project, field), Project.created_at)
        with store_errors("sort projects"):
            return self.session.exec(statement).all()
