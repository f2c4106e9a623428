"""Projects API endpoints — CRUD, task membership, name search, sorting.

POST   /api/v1/projects — create
GET    /api/v1/projects — list all
GET    /api/v1/projects/sort?sortBy=start_date|due_date — ascending sort
GET    /api/v1/projects/search?name= — case-insensitive name filter
GET    /api/v1/projects/due-today/with-tasks — projects with a member task due today
GET    /api/v1/projects/{id} — single project
PUT    /api/v1/projects/{id} — partial update
DELETE /api/v1/projects/{id} — delete (member tasks are kept)
POST   /api/v1/projects/{project_id}/tasks/{task_id} — attach task
GET    /api/v1/projects/{id}/tasks — member tasks (dangling ids skipped)
"""

from __future__ import annotations

from typing import Sequence

from fastapi import APIRouter, Depends, Query

from tracker.api.deps import get_project_store, get_queries, get_relationships
from tracker.api.v1.schemas import (
    CreateProjectRequest,
    ProjectResponse,
    TaskResponse,
    UpdateProjectRequest,
    project_response,
    task_response,
)
from tracker.engines.queries import QueryEngine
from tracker.engines.relationships import RelationshipManager
from tracker.engines.store import ProjectStore
from tracker.models.task import Project

router = APIRouter(prefix="/api/v1", tags=["projects"])


def _with_task_ids(
    projects: Sequence[Project], relationships: RelationshipManager
) -> list[ProjectResponse]:
    memberships = relationships.task_ids_by_project([p.id for p in projects])
    return [project_response(p, memberships[p.id]) for p in projects]


# === Collection endpoints ===


@router.post("/projects", response_model=ProjectResponse, status_code=201)
def create_project(
    request: CreateProjectRequest,
    store: ProjectStore = Depends(get_project_store),
) -> ProjectResponse:
    """Create a new project with an empty task set."""
    project = store.create(
        name=request.name,
        description=request.description,
        start_date=request.start_date,
        due_date=request.due_date,
    )
    return project_response(project, [])


@router.get("/projects", response_model=list[ProjectResponse])
def list_projects(
    queries: QueryEngine = Depends(get_queries),
) -> list[ProjectResponse]:
    """List all projects in storage order."""
    return _with_task_ids(queries.list_projects(), queries.relationships)


@router.get("/projects/sort", response_model=list[ProjectResponse])
def sort_projects(
    sort_by: str | None = Query(default=None, alias="sortBy"),
    queries: QueryEngine = Depends(get_queries),
) -> list[ProjectResponse]:
    """Sort projects ascending by start_date or due_date."""
    return _with_task_ids(queries.sort_projects(sort_by or ""), queries.relationships)


@router.get("/projects/search", response_model=list[ProjectResponse])
def search_projects(
    name: str = Query(default=""),
    queries: QueryEngine = Depends(get_queries),
) -> list[ProjectResponse]:
    """Projects whose name contains `name`, case-insensitively."""
    return _with_task_ids(queries.filter_projects_by_name(name), queries.relationships)


@router.get("/projects/due-today/with-tasks", response_model=list[ProjectResponse])
def projects_with_tasks_due_today(
    queries: QueryEngine = Depends(get_queries),
) -> list[ProjectResponse]:
    """Projects that have at least one member task due today."""
    return _with_task_ids(queries.projects_with_tasks_due_today(), queries.relationships)


# === Item endpoints ===


@router.get("/projects/{project_id}", response_model=ProjectResponse)
def get_project(
    project_id: str,
    relationships: RelationshipManager = Depends(get_relationships),
) -> ProjectResponse:
    """Get a single project by ID."""
    project = relationships.projects.get(project_id)
    return project_response(project, relationships.task_ids_of_project(project_id))


@router.put("/projects/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: str,
    request: UpdateProjectRequest,
    relationships: RelationshipManager = Depends(get_relationships),
) -> ProjectResponse:
    """Update named fields of a project, leaving the rest untouched."""
    project = relationships.projects.update(project_id, request.model_dump(exclude_unset=True))
    return project_response(project, relationships.task_ids_of_project(project_id))


@router.delete("/projects/{project_id}", status_code=204)
def delete_project(
    project_id: str,
    store: ProjectStore = Depends(get_project_store),
) -> None:
    """Delete a project. Its tasks are not deleted."""
    store.delete(project_id)


# === Membership ===


@router.post("/projects/{project_id}/tasks/{task_id}", response_model=ProjectResponse)
def attach_task(
    project_id: str,
    task_id: str,
    relationships: RelationshipManager = Depends(get_relationships),
) -> ProjectResponse:
    """Assign a task to a project. Assigning it again changes nothing."""
    project = relationships.attach_task(project_id, task_id)
    return project_response(project, relationships.task_ids_of_project(project_id))


@router.get("/projects/{project_id}/tasks", response_model=list[TaskResponse])
def list_project_tasks(
    project_id: str,
    relationships: RelationshipManager = Depends(get_relationships),
) -> list[TaskResponse]:
    """Tasks belonging to the project; deleted tasks are omitted."""
    return [task_response(t) for t in relationships.tasks_of_project(project_id)]
