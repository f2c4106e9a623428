"""Tests for the Projects API endpoints."""

from datetime import datetime


def _create_project(client, **overrides):
    payload = {
        "name": "A",
        "description": "First project",
        "start_date": "2024-01-01",
        "due_date": "2024-01-10",
        **overrides,
    }
    resp = client.post("/api/v1/projects", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def _create_task(client, **overrides):
    payload = {"name": "t1", "start_date": "2024-01-02", "due_date": "2024-01-05", **overrides}
    resp = client.post("/api/v1/tasks", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


# === CRUD ===


def test_create_project(client):
    data = _create_project(client)
    assert data["name"] == "A"
    assert data["description"] == "First project"
    assert data["start_date"].startswith("2024-01-01")
    assert data["tasks"] == []
    assert "id" in data
    assert "created_at" in data


def test_create_project_missing_name_is_400(client):
    resp = client.post("/api/v1/projects", json={"start_date": "2024-01-01", "due_date": "2024-01-10"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "invalid_argument"


def test_create_project_bad_date_is_400(client):
    resp = client.post(
        "/api/v1/projects",
        json={"name": "A", "start_date": "soon", "due_date": "2024-01-10"},
    )
    assert resp.status_code == 400


def test_list_projects(client):
    _create_project(client, name="A")
    _create_project(client, name="B")
    resp = client.get("/api/v1/projects")
    assert resp.status_code == 200
    assert [p["name"] for p in resp.json()] == ["A", "B"]


def test_get_project_not_found(client):
    resp = client.get("/api/v1/projects/nonexistent-id")
    assert resp.status_code == 404
    assert resp.json() == {"error": "not_found", "detail": "Project not found: nonexistent-id"}


def test_update_project_partial(client):
    created = _create_project(client)
    resp = client.put(f"/api/v1/projects/{created['id']}", json={"name": "Renamed"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["name"] == "Renamed"
    assert data["description"] == "First project"
    assert data["due_date"] == created["due_date"]


def test_update_project_unknown_field_is_400(client):
    created = _create_project(client)
    resp = client.put(f"/api/v1/projects/{created['id']}", json={"tasks": ["x"]})
    assert resp.status_code == 400


def test_update_project_not_found(client):
    resp = client.put("/api/v1/projects/nonexistent-id", json={"name": "x"})
    assert resp.status_code == 404


def test_delete_project(client):
    created = _create_project(client)
    resp = client.delete(f"/api/v1/projects/{created['id']}")
    assert resp.status_code == 204
    assert resp.content == b""
    assert client.get(f"/api/v1/projects/{created['id']}").status_code == 404


def test_delete_project_not_found(client):
    assert client.delete("/api/v1/projects/nonexistent-id").status_code == 404


# === Membership ===


def test_attach_task_and_list(client):
    project = _create_project(client)
    task = _create_task(client)
    resp = client.post(f"/api/v1/projects/{project['id']}/tasks/{task['id']}")
    assert resp.status_code == 200
    assert resp.json()["tasks"] == [task["id"]]

    resp = client.get(f"/api/v1/projects/{project['id']}/tasks")
    assert resp.status_code == 200
    assert [t["id"] for t in resp.json()] == [task["id"]]


def test_attach_twice_keeps_single_id(client):
    project = _create_project(client)
    task = _create_task(client)
    client.post(f"/api/v1/projects/{project['id']}/tasks/{task['id']}")
    resp = client.post(f"/api/v1/projects/{project['id']}/tasks/{task['id']}")
    assert resp.status_code == 200
    assert resp.json()["tasks"] == [task["id"]]


def test_attach_to_missing_project_is_404(client):
    task = _create_task(client)
    assert client.post(f"/api/v1/projects/nonexistent-id/tasks/{task['id']}").status_code == 404


def test_deleted_task_stays_in_project_set(client):
    project = _create_project(client)
    task = _create_task(client)
    client.post(f"/api/v1/projects/{project['id']}/tasks/{task['id']}")
    assert client.delete(f"/api/v1/tasks/{task['id']}").status_code == 204

    assert client.get(f"/api/v1/projects/{project['id']}/tasks").json() == []
    assert client.get(f"/api/v1/projects/{project['id']}").json()["tasks"] == [task["id"]]


def test_tasks_of_missing_project_is_404(client):
    assert client.get("/api/v1/projects/nonexistent-id/tasks").status_code == 404


# === Queries ===


def test_sort_projects(client):
    _create_project(client, name="late", due_date="2024-03-01")
    _create_project(client, name="early", due_date="2024-02-01")
    resp = client.get("/api/v1/projects/sort", params={"sortBy": "due_date"})
    assert resp.status_code == 200
    assert [p["name"] for p in resp.json()] == ["early", "late"]


def test_sort_projects_invalid_field_is_400(client):
    resp = client.get("/api/v1/projects/sort", params={"sortBy": "name"})
    assert resp.status_code == 400
    assert "Invalid sort field" in resp.json()["detail"]


def test_sort_projects_missing_field_is_400(client):
    assert client.get("/api/v1/projects/sort").status_code == 400


def test_search_projects(client):
    _create_project(client, name="Website Relaunch")
    _create_project(client, name="Hiring")
    resp = client.get("/api/v1/projects/search", params={"name": "website"})
    assert [p["name"] for p in resp.json()] == ["Website Relaunch"]


def test_projects_with_tasks_due_today(client):
    today_noon = datetime.now().replace(hour=12, minute=0, second=0, microsecond=0).isoformat()
    busy = _create_project(client, name="busy")
    _create_project(client, name="quiet")
    task = _create_task(client, due_date=today_noon)
    client.post(f"/api/v1/projects/{busy['id']}/tasks/{task['id']}")

    resp = client.get("/api/v1/projects/due-today/with-tasks")
    assert resp.status_code == 200
    assert [p["name"] for p in resp.json()] == ["busy"]
