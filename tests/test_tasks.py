from datetime import datetime


def create(client, headers, **fields):
    response = client.post("/api/tasks", headers=headers, json={"title": "Task", **fields})
    assert response.status_code == 201
    return response.json()


# ========== CREATE ==========
def test_create_task_defaults(client, auth_headers):
    response = client.post("/api/tasks", headers=auth_headers, json={"title": "First task"})
    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "First task"
    assert data["priority"] == "medium"
    assert data["completed"] is False
    assert data["position"] == 0
    assert data["deadline"] is None
    assert data["voice_note_ref"] is None
    assert data["voice_note_url"] is None


def test_create_task_with_deadline(client, auth_headers):
    data = create(client, auth_headers, priority="high", deadline="2030-01-15T09:30:00")
    assert data["priority"] == "high"
    assert datetime.fromisoformat(data["deadline"]) == datetime(2030, 1, 15, 9, 30)


def test_create_task_rejects_bad_priority(client, auth_headers):
    response = client.post("/api/tasks", headers=auth_headers, json={"title": "x", "priority": "urgent"})
    assert response.status_code == 422


def test_create_task_rejects_empty_title(client, auth_headers):
    response = client.post("/api/tasks", headers=auth_headers, json={"title": ""})
    assert response.status_code == 422


def test_create_ignores_system_fields(client, auth_headers):
    data = create(client, auth_headers, position=7, user_id=999)
    assert data["position"] == 0
    assert data["user_id"] != 999


# ========== LIST / GET ==========
def test_list_tasks_empty(client, auth_headers):
    response = client.get("/api/tasks", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == []


def test_list_tasks_in_creation_order(client, auth_headers):
    ids = [create(client, auth_headers, title=f"Task {i}")["id"] for i in range(3)]
    response = client.get("/api/tasks", headers=auth_headers)
    assert [t["id"] for t in response.json()] == ids


def test_list_only_own_tasks(client, auth_headers, other_headers):
    create(client, auth_headers, title="Mine")
    create(client, other_headers, title="Theirs")

    data = client.get("/api/tasks", headers=auth_headers).json()
    assert [t["title"] for t in data] == ["Mine"]


def test_get_other_users_task_is_not_found(client, auth_headers, other_headers):
    task = create(client, other_headers)
    response = client.get(f"/api/tasks/{task['id']}", headers=auth_headers)
    assert response.status_code == 404
    assert response.json() == {"detail": "Task not found"}


# ========== UPDATE ==========
def test_partial_update(client, auth_headers):
    task = create(client, auth_headers, title="Original", description="keep me", priority="low")

    response = client.put(f"/api/tasks/{task['id']}", headers=auth_headers, json={"completed": True})
    assert response.status_code == 200
    data = response.json()
    assert data["completed"] is True
    assert data["title"] == "Original"
    assert data["description"] == "keep me"
    assert data["priority"] == "low"
    assert datetime.fromisoformat(data["updated_at"]) >= datetime.fromisoformat(task["updated_at"])


def test_update_can_clear_nullable_fields(client, auth_headers):
    task = create(client, auth_headers, description="old", deadline="2030-01-01T00:00:00")
    data = client.put(
        f"/api/tasks/{task['id']}",
        headers=auth_headers,
        json={"description": None, "deadline": None}
    ).json()
    assert data["description"] is None
    assert data["deadline"] is None


def test_update_rejects_null_title(client, auth_headers):
    task = create(client, auth_headers)
    response = client.put(f"/api/tasks/{task['id']}", headers=auth_headers, json={"title": None})
    assert response.status_code == 422


def test_update_does_not_touch_position(client, auth_headers):
    task = create(client, auth_headers)
    data = client.put(f"/api/tasks/{task['id']}", headers=auth_headers, json={"position": 42}).json()
    assert data["position"] == 0


def test_update_other_users_task_is_not_found(client, auth_headers, other_headers):
    task = create(client, other_headers, title="Theirs")
    response = client.put(f"/api/tasks/{task['id']}", headers=auth_headers, json={"title": "Hacked"})
    assert response.status_code == 404

    unchanged = client.get(f"/api/tasks/{task['id']}", headers=other_headers).json()
    assert unchanged["title"] == "Theirs"


# ========== DELETE ==========
def test_delete_task(client, auth_headers):
    task = create(client, auth_headers)
    response = client.delete(f"/api/tasks/{task['id']}", headers=auth_headers)
    assert response.status_code == 204

    assert client.get("/api/tasks", headers=auth_headers).json() == []
    assert client.get(f"/api/tasks/{task['id']}", headers=auth_headers).status_code == 404


def test_delete_missing_task(client, auth_headers):
    response = client.delete("/api/tasks/12345", headers=auth_headers)
    assert response.status_code == 404


# ========== AUTH ==========
def test_requires_token(client):
    response = client.get("/api/tasks")
    assert response.status_code == 401
    assert response.json() == {"detail": "Missing token"}
    assert response.headers["www-authenticate"] == "Bearer"


def test_rejects_invalid_token(client):
    response = client.post("/api/tasks/reorder", headers={"Authorization": "Bearer nope"}, json={"task_ids": []})
    assert response.status_code == 401
    assert response.json() == {"detail": "Invalid token"}
