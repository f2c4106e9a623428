"""Task and Project models.

Project membership is stored as an explicit index table (ProjectTask) rather
than an embedded list. task_id carries no foreign key: deleting a Task leaves
its id in every project set that referenced it.

Date columns are plain (naive) DateTime: user dates are stored in local time.
"""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import DateTime
from sqlmodel import Field as SQLField
from sqlmodel import SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Project(SQLModel, table=True):
    """A project owning a set of task references."""

    id: str = SQLField(default_factory=lambda: str(uuid4()), primary_key=True)
    name: str = SQLField(index=True)
    description: str | None = None
    start_date: datetime = SQLField(sa_type=DateTime)
    due_date: datetime = SQLField(index=True, sa_type=DateTime)
    created_at: datetime = SQLField(default_factory=_utcnow, sa_type=DateTime)
    updated_at: datetime = SQLField(default_factory=_utcnow, sa_type=DateTime)


class Task(SQLModel, table=True):
    """A unit of work with a due date and a completion flag."""

    id: str = SQLField(default_factory=lambda: str(uuid4()), primary_key=True)
    name: str = SQLField(index=True)
    # required on create, cleared by status reset
    start_date: datetime | None = SQLField(default=None, sa_type=DateTime)
    due_date: datetime = SQLField(index=True, sa_type=DateTime)
    done_date: datetime | None = SQLField(default=None, sa_type=DateTime)
    is_done: bool = False
    created_at: datetime = SQLField(default_factory=_utcnow, sa_type=DateTime)
    updated_at: datetime = SQLField(default_factory=_utcnow, sa_type=DateTime)


class ProjectTask(SQLModel, table=True):
    """Membership row: task_id is in project_id's task set."""

    __tablename__ = "project_task"

    project_id: str = SQLField(primary_key=True)
    task_id: str = SQLField(primary_key=True, index=True)
    attached_at: datetime = SQLField(default_factory=_utcnow, sa_type=DateTime)


# Fields a partial update may touch. Membership is changed only by attach.
PROJECT_MUTABLE_FIELDS = frozenset({"name", "description", "start_date", "due_date"})
TASK_MUTABLE_FIELDS = frozenset({"name", "start_date", "due_date", "done_date", "is_done"})

# Fields that may never be set to null.
PROJECT_REQUIRED_FIELDS = frozenset({"name", "start_date", "due_date"})
TASK_REQUIRED_FIELDS = frozenset({"name", "due_date"})

# Allow-lists for ascending sort.
TASK_SORT_FIELDS = ("start_date", "due_date", "done_date")
PROJECT_SORT_FIELDS = ("start_date", "due_date")
