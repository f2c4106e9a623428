"""Tasks API endpoints — CRUD, status transitions, filters, search, sorting.

POST   /api/v1/tasks — create
GET    /api/v1/tasks — list all
GET    /api/v1/tasks/filter/status?isDone=true|false — status filter
GET    /api/v1/tasks/filter/project?projectName= — tasks of the first matching project
GET    /api/v1/tasks/search?name= — case-insensitive name search
GET    /api/v1/tasks/sort?sortBy=start_date|due_date|done_date — ascending sort
GET    /api/v1/tasks/due-today?by=task|project — due in today's local window
GET    /api/v1/tasks/due?start=&end=&by=task|project — due in [start, end)
GET    /api/v1/tasks/{id} — single task
GET    /api/v1/tasks/{id}/projects — projects containing the task
PUT    /api/v1/tasks/{id} — partial update
PATCH  /api/v1/tasks/{id}/status — set isDone (false clears start/done dates)
DELETE /api/v1/tasks/{id} — delete (project references are left in place)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from tracker.api.deps import (
    get_queries,
    get_relationships,
    get_status_handler,
    get_task_store,
)
from tracker.api.v1.schemas import (
    CreateTaskRequest,
    ProjectResponse,
    SetTaskStatusRequest,
    TaskResponse,
    UpdateTaskRequest,
    project_response,
    task_response,
)
from tracker.engines.queries import QueryEngine, parse_date, parse_is_done
from tracker.engines.relationships import RelationshipManager
from tracker.engines.status import StatusTransitionHandler
from tracker.engines.store import TaskStore
from tracker.errors import InvalidArgument

router = APIRouter(prefix="/api/v1", tags=["tasks"])


# === Collection endpoints ===


@router.post("/tasks", response_model=TaskResponse, status_code=201)
def create_task(
    request: CreateTaskRequest,
    store: TaskStore = Depends(get_task_store),
) -> TaskResponse:
    """Create a new task (not done)."""
    task = store.create(
        name=request.name,
        start_date=request.start_date,
        due_date=request.due_date,
    )
    return task_response(task)


@router.get("/tasks", response_model=list[TaskResponse])
def list_tasks(queries: QueryEngine = Depends(get_queries)) -> list[TaskResponse]:
    """List all tasks in storage order."""
    return [task_response(t) for t in queries.list_tasks()]


@router.get("/tasks/filter/status", response_model=list[TaskResponse])
def filter_tasks_by_status(
    is_done: str | None = Query(default=None, alias="isDone"),
    queries: QueryEngine = Depends(get_queries),
) -> list[TaskResponse]:
    """Tasks with the given completion flag ("true" selects done tasks)."""
    return [task_response(t) for t in queries.filter_tasks_by_status(parse_is_done(is_done))]


@router.get("/tasks/filter/project", response_model=list[TaskResponse])
def filter_tasks_by_project(
    project_name: str | None = Query(default=None, alias="projectName"),
    queries: QueryEngine = Depends(get_queries),
) -> list[TaskResponse]:
    """Tasks of the first project whose name matches, case-insensitively."""
    return [task_response(t) for t in queries.tasks_by_project_name(project_name or "")]


@router.get("/tasks/search", response_model=list[TaskResponse])
def search_tasks(
    name: str = Query(default=""),
    queries: QueryEngine = Depends(get_queries),
) -> list[TaskResponse]:
    """Tasks whose name contains `name`, case-insensitively."""
    return [task_response(t) for t in queries.search_tasks_by_name(name)]


@router.get("/tasks/sort", response_model=list[TaskResponse])
def sort_tasks(
    sort_by: str | None = Query(default=None, alias="sortBy"),
    queries: QueryEngine = Depends(get_queries),
) -> list[TaskResponse]:
    """Sort tasks ascending by start_date, due_date or done_date."""
    return [task_response(t) for t in queries.sort_tasks(sort_by or "")]


@router.get("/tasks/due-today", response_model=list[TaskResponse])
def tasks_due_today(
    by: str = Query(default="task"),
    queries: QueryEngine = Depends(get_queries),
) -> list[TaskResponse]:
    """Tasks due today, by their own due_date or by their project's."""
    return [task_response(t) for t in queries.tasks_due_today(by=by)]


@router.get("/tasks/due", response_model=list[TaskResponse])
def tasks_due_between(
    start: str | None = Query(default=None),
    end: str | None = Query(default=None),
    by: str = Query(default="task"),
    queries: QueryEngine = Depends(get_queries),
) -> list[TaskResponse]:
    """Tasks due in the half-open window [start, end)."""
    window_start = parse_date(start, "start")
    window_end = parse_date(end, "end")
    return [task_response(t) for t in queries.tasks_due_between(window_start, window_end, by=by)]


# === Item endpoints ===


@router.get("/tasks/{task_id}", response_model=TaskResponse)
def get_task(task_id: str, store: TaskStore = Depends(get_task_store)) -> TaskResponse:
    """Get a single task by ID."""
    return task_response(store.get(task_id))


@router.get("/tasks/{task_id}/projects", response_model=list[ProjectResponse])
def list_task_projects(
    task_id: str,
    relationships: RelationshipManager = Depends(get_relationships),
) -> list[ProjectResponse]:
    """Projects whose task set contains this id. The task itself may be gone."""
    projects = relationships.projects_containing_task(task_id)
    memberships = relationships.task_ids_by_project([p.id for p in projects])
    return [project_response(p, memberships[p.id]) for p in projects]


@router.put("/tasks/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: str,
    request: UpdateTaskRequest,
    store: TaskStore = Depends(get_task_store),
) -> TaskResponse:
    """Update named fields of a task, leaving the rest untouched."""
    return task_response(store.update(task_id, request.model_dump(exclude_unset=True)))


@router.patch("/tasks/{task_id}/status", response_model=TaskResponse)
def set_task_status(
    task_id: str,
    request: SetTaskStatusRequest,
    handler: StatusTransitionHandler = Depends(get_status_handler),
) -> TaskResponse:
    """Mark a task done or reset it to to-do."""
    if request.is_done is None:
        raise InvalidArgument("isDone is required")
    return task_response(handler.set_task_status(task_id, request.is_done))


@router.delete("/tasks/{task_id}", status_code=204)
def delete_task(task_id: str, store: TaskStore = Depends(get_task_store)) -> None:
    """Delete a task. Project task sets keep the id."""
    store.delete(task_id)
