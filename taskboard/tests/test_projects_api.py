"""Tests for the project endpoints."""

from fastapi.testclient import TestClient


def create_project(client: TestClient, name: str = "Launch", description: str = "v1 release") -> dict:
    response = client.post("/api/projects/", json={"name": name, "description": description})
    assert response.status_code == 201, response.text
    return response.json()


def add_task(client: TestClient, project_id: str, title: str, **extra) -> dict:
    response = client.post(
        "/api/tasks/",
        json={"title": title, "description": "details", "project_id": project_id, **extra},
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client: TestClient):
    assert client.get("/api/health").json()["status"] == "healthy"


def test_create_project(client: TestClient):
    data = create_project(client, name="  Website  ")
    assert data["name"] == "Website"
    assert data["description"] == "v1 release"
    assert data["task_count"] == 0
    assert len(data["id"]) == 32
    assert "tasks" not in data


def test_create_project_validation(client: TestClient):
    for payload in (
        {"name": "", "description": "d"},
        {"name": "n" * 101, "description": "d"},
        {"name": "n", "description": "d" * 501},
        {"name": "n"},
    ):
        response = client.post("/api/projects/", json=payload)
        assert response.status_code == 400, payload
        assert response.json()["error"] == "validation_error"


def test_list_projects_newest_first(client: TestClient):
    create_project(client, name="Old")
    create_project(client, name="New")
    names = [p["name"] for p in client.get("/api/projects/").json()]
    assert names == ["New", "Old"]


def test_update_project(client: TestClient):
    project = create_project(client)
    response = client.put(f"/api/projects/{project['id']}", json={"name": "Relaunch"})
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Relaunch"
    assert data["description"] == "v1 release"


def test_missing_project(client: TestClient):
    missing = "c" * 32
    assert client.get(f"/api/projects/{missing}").status_code == 404
    assert client.put(f"/api/projects/{missing}", json={"name": "x"}).status_code == 404
    assert client.delete(f"/api/projects/{missing}").status_code == 404
    response = client.get(f"/api/projects/{missing}/stats")
    assert response.status_code == 404
    assert response.json()["error"] == "project_not_found"


def test_task_count_tracks_creates_and_deletes(client: TestClient):
    project = create_project(client)
    first = add_task(client, project["id"], "One")
    add_task(client, project["id"], "Two", status="Done")
    assert client.get(f"/api/projects/{project['id']}").json()["task_count"] == 2

    client.delete(f"/api/tasks/{first['id']}")
    assert client.get(f"/api/projects/{project['id']}").json()["task_count"] == 1


def test_delete_project_cascades(client: TestClient):
    project = create_project(client)
    keep = create_project(client, name="Keep")
    doomed = [add_task(client, project["id"], f"T{i}")["id"] for i in range(3)]
    kept = add_task(client, keep["id"], "Survivor")["id"]

    response = client.delete(f"/api/projects/{project['id']}")
    assert response.status_code == 204
    assert client.get(f"/api/projects/{project['id']}").status_code == 404
    for task_id in doomed:
        assert client.get(f"/api/tasks/{task_id}").status_code == 404
    assert client.get(f"/api/tasks/{kept}").status_code == 200


def test_stats_scenario(client: TestClient):
    project = create_project(client)
    add_task(client, project["id"], "Design")
    build = add_task(client, project["id"], "Build")
    assert build["order"] == 1
    client.patch(f"/api/tasks/{build['id']}/status", json={"status": "Done"})

    response = client.get(f"/api/projects/{project['id']}/stats")
    assert response.status_code == 200
    stats = response.json()
    assert stats["total"] == 2
    assert stats["by_status"] == {"To Do": 1, "In Progress": 0, "Done": 1}
    assert stats["completion_rate"] == 50


def test_stats_empty_project(client: TestClient):
    project = create_project(client)
    stats = client.get(f"/api/projects/{project['id']}/stats").json()
    assert stats["total"] == 0
    assert stats["completion_rate"] == 0


def test_project_routes_are_described(client: TestClient):
    paths = client.get("/openapi.json").json()["paths"]
    assert paths["/api/projects/"]["post"]["description"] == "Create a project with a task_count of zero."
    assert paths["/api/projects/{project_id}"]["get"]["description"] == "Get a single project by ID."
    assert paths["/api/projects/{project_id}/stats"]["get"]["description"].startswith("Get task totals")
