"""Tests for RelationshipManager — attach, membership resolution, dangling ids."""

import pytest
from sqlmodel import Session

from tracker.engines.relationships import RelationshipManager
from tracker.engines.store import ProjectStore, TaskStore
from tracker.errors import InvalidArgument, NotFound


def _setup(session):
    projects = ProjectStore(session)
    tasks = TaskStore(session)
    project = projects.create(name="A", start_date="2024-01-01", due_date="2024-01-10")
    t1 = tasks.create(name="t1", start_date="2024-01-02", due_date="2024-01-05")
    return project, t1, tasks, RelationshipManager(session)


# === Attach Tests ===


def test_attach_then_list_tasks(session):
    project, t1, _, rel = _setup(session)
    rel.attach_task(project.id, t1.id)
    assert [t.id for t in rel.tasks_of_project(project.id)] == [t1.id]
    print("  PASS: attach_then_list_tasks")


def test_attach_is_idempotent(session):
    project, t1, _, rel = _setup(session)
    rel.attach_task(project.id, t1.id)
    rel.attach_task(project.id, t1.id)
    assert rel.task_ids_of_project(project.id).count(t1.id) == 1
    print("  PASS: attach_is_idempotent")


def test_attach_preserves_order(session):
    project, t1, tasks, rel = _setup(session)
    t2 = tasks.create(name="t2", start_date="2024-01-03", due_date="2024-01-06")
    rel.attach_task(project.id, t2.id)
    rel.attach_task(project.id, t1.id)
    assert rel.task_ids_of_project(project.id) == [t2.id, t1.id]


def test_attach_returns_project(session):
    project, t1, _, rel = _setup(session)
    result = rel.attach_task(project.id, t1.id)
    assert result.id == project.id
    assert result.name == "A"


def test_attach_unknown_project_raises(session):
    _, t1, _, rel = _setup(session)
    with pytest.raises(NotFound):
        rel.attach_task("nonexistent-project", t1.id)


def test_attach_does_not_verify_task(session):
    project, _, _, rel = _setup(session)
    rel.attach_task(project.id, "never-created")
    assert rel.task_ids_of_project(project.id) == ["never-created"]
    assert list(rel.tasks_of_project(project.id)) == []


def test_attach_blank_task_id_is_invalid(session):
    project, _, _, rel = _setup(session)
    with pytest.raises(InvalidArgument):
        rel.attach_task(project.id, " ")


def test_attach_from_two_sessions_keeps_one_row(engine):
    with Session(engine) as first:
        project, t1, _, rel_a = _setup(first)
        project_id, task_id = project.id, t1.id
        rel_a.attach_task(project_id, task_id)

    with Session(engine) as second:
        rel_b = RelationshipManager(second)
        rel_b.attach_task(project_id, task_id)
        assert rel_b.task_ids_of_project(project_id) == [task_id]


# === Resolution Tests ===


def test_tasks_of_unknown_project_raises(session):
    _, _, _, rel = _setup(session)
    with pytest.raises(NotFound):
        rel.tasks_of_project("nonexistent-project")


def test_deleted_task_is_filtered_but_id_remains(session):
    project, t1, tasks, rel = _setup(session)
    rel.attach_task(project.id, t1.id)
    tasks.delete(t1.id)

    assert list(rel.tasks_of_project(project.id)) == []
    assert t1.id in rel.task_ids_of_project(project.id)
    print("  PASS: deleted_task_is_filtered_but_id_remains")


def test_projects_containing_task(session):
    project, t1, _, rel = _setup(session)
    other = ProjectStore(session).create(name="B", start_date="2024-02-01", due_date="2024-02-10")
    unrelated = ProjectStore(session).create(name="C", start_date="2024-03-01", due_date="2024-03-10")
    rel.attach_task(project.id, t1.id)
    rel.attach_task(other.id, t1.id)

    ids = {p.id for p in rel.projects_containing_task(t1.id)}
    assert ids == {project.id, other.id}
    assert unrelated.id not in ids


def test_task_ids_by_project(session):
    project, t1, _, rel = _setup(session)
    empty = ProjectStore(session).create(name="B", start_date="2024-02-01", due_date="2024-02-10")
    rel.attach_task(project.id, t1.id)
    assert rel.task_ids_by_project([project.id, empty.id]) == {project.id: [t1.id], empty.id: []}
    assert rel.task_ids_by_project([]) == {}
