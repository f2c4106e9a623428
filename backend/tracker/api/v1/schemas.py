"""Request / response models shared by the project and task routers.

Tasks expose their completion flag as `isDone` on the wire; snake_case
`is_done` is accepted on input as well.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from tracker.models.task import Project, Task

# === Requests ===


class CreateProjectRequest(BaseModel):
    """Request to create a project. Required fields are checked by the store."""

    name: str | None = None
    description: str | None = None
    start_date: datetime | None = None
    due_date: datetime | None = None


class UpdateProjectRequest(BaseModel):
    """Partial project update. Unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    description: str | None = None
    start_date: datetime | None = None
    due_date: datetime | None = None


class CreateTaskRequest(BaseModel):
    """Request to create a task. New tasks are never done."""

    name: str | None = None
    start_date: datetime | None = None
    due_date: datetime | None = None


class UpdateTaskRequest(BaseModel):
    """Partial task update. Unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str | None = None
    start_date: datetime | None = None
    due_date: datetime | None = None
    done_date: datetime | None = None
    is_done: bool | None = Field(default=None, alias="isDone")


class SetTaskStatusRequest(BaseModel):
    """Body of PATCH /tasks/{id}/status."""

    model_config = ConfigDict(populate_by_name=True)

    is_done: bool | None = Field(default=None, alias="isDone")


# === Responses ===


class ProjectResponse(BaseModel):
    """A project with its raw task id set (dangling ids included)."""

    id: str
    name: str
    description: str | None = None
    start_date: datetime
    due_date: datetime
    tasks: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class TaskResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    start_date: datetime | None = None
    due_date: datetime
    done_date: datetime | None = None
    is_done: bool = Field(default=False, alias="isDone")
    created_at: datetime
    updated_at: datetime


def project_response(project: Project, task_ids: list[str]) -> ProjectResponse:
    return ProjectResponse(
        id=project.id,
        name=project.name,
        description=project.description,
        start_date=project.start_date,
        due_date=project.due_date,
        tasks=task_ids,
        created_at=project.created_at,
        updated_at=project.updated_at,
    )


def task_response(task: Task) -> TaskResponse:
    return TaskResponse(
        id=task.id,
        name=task.name,
        start_date=task.start_date,
        due_date=task.due_date,
        done_date=task.done_date,
        is_done=task.is_done,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )

