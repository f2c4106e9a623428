"""Entity Store — CRUD for Project and Task records.

Operates on the SQLModel tables using a Session supplied by the caller.
Updates are `$set`-style merges: named fields are overwritten, the rest are
left untouched, and only fields on the per-entity allow-list are accepted.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import delete as sa_delete
from sqlmodel import Session, SQLModel, select

from tracker.db.database import store_errors
from tracker.errors import InvalidArgument, NotFound
from tracker.models.task import (
    PROJECT_MUTABLE_FIELDS,
    PROJECT_REQUIRED_FIELDS,
    TASK_MUTABLE_FIELDS,
    TASK_REQUIRED_FIELDS,
    Project,
    ProjectTask,
    Task,
)

logger = logging.getLogger(__name__)

DATE_FIELDS = frozenset({"start_date", "due_date", "done_date"})

RecordT = TypeVar("RecordT", Project, Task)


def coerce_timestamp(value: Any, field: str) -> datetime | None:
    """Normalize a caller-supplied timestamp to naive local time.

    Accepts datetime, date (midnight) or an ISO-8601 string. Aware values are
    converted to local time before tzinfo is dropped, so every stored date
    compares consistently against local-midnight windows.
    """
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise InvalidArgument(f"{field} is not an ISO-8601 date: {value!r}") from exc
    elif isinstance(value, date) and not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if not isinstance(value, datetime):
        raise InvalidArgument(f"{field} must be a timestamp, got {type(value).__name__}")
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value


def check_id(ident: Any, kind: str) -> str:
    """Reject empty or non-string identifiers before touching the store."""
    if not isinstance(ident, str) or not ident.strip():
        raise InvalidArgument(f"Malformed {kind} id: {ident!r}")
    return ident


def _require_name(name: Any, kind: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidArgument(f"{kind} name is required")
    return name


class _RecordStore(Generic[RecordT]):
    """Shared get/list/update/delete for one table."""

    model: type[SQLModel]
    kind: str
    mutable_fields: frozenset[str]
    required_fields: frozenset[str]

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, ident: str) -> RecordT:
        """Return the record with this id, or raise NotFound."""
        check_id(ident, self.kind.lower())
        with store_errors(f"get {self.kind}"):
            record = self.session.get(self.model, ident)
        if record is None:
            raise NotFound(self.kind, ident)
        return record

    def list_all(self) -> Sequence[RecordT]:
        """All records in storage (creation) order."""
        statement = select(self.model).order_by(self.model.created_at)  # type: ignore[attr-defined]
        with store_errors(f"list {self.kind}"):
            return self.session.exec(statement).all()

    def _validate_changes(self, changes: dict[str, Any]) -> dict[str, Any]:
        unknown = sorted(set(changes) - self.mutable_fields)
        if unknown:
            raise InvalidArgument(
                f"Cannot update {self.kind} field(s): {', '.join(unknown)}. "
                f"Allowed: {', '.join(sorted(self.mutable_fields))}"
            )
        cleaned: dict[str, Any] = {}
        for key, value in changes.items():
            if value is None and key in self.required_fields:
                raise InvalidArgument(f"{self.kind} {key} cannot be null")
            if key == "name":
                value = _require_name(value, self.kind)
            elif key in DATE_FIELDS:
                value = coerce_timestamp(value, key)
            elif key == "is_done" and not isinstance(value, bool):
                raise InvalidArgument("is_done must be a boolean")
            cleaned[key] = value
        return cleaned

    def update(self, ident: str, changes: dict[str, Any]) -> RecordT:
        """Apply a partial update and return the post-update record."""
        cleaned = self._validate_changes(changes)
        record = self.get(ident)
        if not cleaned:
            return record
        for key, value in cleaned.items():
            setattr(record, key, value)
        record.updated_at = datetime.now(timezone.utc)
        with store_errors(f"update {self.kind}"):
            self.session.add(record)
            self.session.commit()
            self.session.refresh(record)
        logger.info("%s updated id=%s fields=%s", self.kind, ident, sorted(cleaned))
        return record

    def delete(self, ident: str) -> None:
        """Delete by id. Raises NotFound if absent."""
        record = self.get(ident)
        with store_errors(f"delete {self.kind}"):
            self._delete_dependents(ident)
            self.session.delete(record)
            self.session.commit()
        logger.info("%s deleted id=%s", self.kind, ident)

    def _delete_dependents(self, ident: str) -> None:
        """Hook for rows owned by the record being deleted."""


class ProjectStore(_RecordStore[Project]):
    """CRUD for projects."""

    model = Project
    kind = "Project"
    mutable_fields = PROJECT_MUTABLE_FIELDS
    required_fields = PROJECT_REQUIRED_FIELDS

    def create(
        self,
        name: str | None,
        start_date: Any,
        due_date: Any,
        description: str | None = None,
    ) -> Project:
        """Create a project with an empty task set."""
        name = _require_name(name, "Project")
        if start_date is None:
            raise InvalidArgument("Project start_date is required")
        if due_date is None:
            raise InvalidArgument("Project due_date is required")
        project = Project(
            name=name,
            description=description,
            start_date=coerce_timestamp(start_date, "start_date"),
            due_date=coerce_timestamp(due_date, "due_date"),
        )
        with store_errors("create Project"):
            self.session.add(project)
            self.session.commit()
            self.session.refresh(project)
        logger.info("Project created id=%s name=%s", project.id, project.name)
        return project

    def _delete_dependents(self, ident: str) -> None:
        # The membership rows are part of the project; the tasks are not.
        self.session.execute(sa_delete(ProjectTask).where(ProjectTask.project_id == ident))


class TaskStore(_RecordStore[Task]):
    """CRUD for tasks. Deleting a task leaves project references dangling."""

    model = Task
    kind = "Task"
    mutable_fields = TASK_MUTABLE_FIELDS
    required_fields = TASK_REQUIRED_FIELDS

    def create(self, name: str | None, start_date: Any, due_date: Any) -> Task:
        """Create a task; new tasks start as not done."""
        name = _require_name(name, "Task")
        if start_date is None:
            raise InvalidArgument("Task start_date is required")
        if due_date is None:
            raise InvalidArgument("Task due_date is required")
        task = Task(
            name=name,
            start_date=coerce_timestamp(start_date, "start_date"),
            due_date=coerce_timestamp(due_date, "due_date"),
            is_done=False,
        )
        with store_errors("create Task"):
            self.session.add(task)
            self.session.commit()
            self.session.refresh(task)
        logger.info("Task created id=%s name=%s", task.id, task.name)
        return task
