import pytest

from helpers import register_and_login


@pytest.fixture
def user_client(app, client, allow_localhost):
    register_and_login(app, client, "tasktest@example.com")
    return client


def test_requires_login(client):
    assert client.get("/tasks").status_code == 401
    assert client.post("/tasks", json={"title": "Unauthorized Task"}).status_code == 401


def test_create_and_list(user_client):
    r = user_client.post("/tasks", json={"title": "Test Task", "description": "Test Description"})
    assert r.status_code == 201
    task = r.get_json()
    assert task["title"] == "Test Task"
    assert task["description"] == "Test Description"
    assert task["completed"] is False

    me = user_client.get("/auth/me").get_json()
    assert task["user_id"] == me["id"]

    r = user_client.get("/tasks")
    assert r.status_code == 200
    assert [t["title"] for t in r.get_json()] == ["Test Task"]


def test_create_requires_title(user_client):
    assert user_client.post("/tasks", json={"description": "No title"}).status_code == 400
    assert user_client.post("/tasks", json={"title": "   "}).status_code == 400
    assert user_client.post("/tasks", json={"title": "x" * 201}).status_code == 400


def test_update(user_client):
    task_id = user_client.post("/tasks", json={"title": "Test Task"}).get_json()["id"]

    r = user_client.patch(f"/tasks/{task_id}", json={"title": "Updated Task", "completed": True})
    assert r.status_code == 200
    assert r.get_json()["title"] == "Updated Task"
    assert r.get_json()["completed"] is True

    assert user_client.patch(f"/tasks/{task_id}", json={"completed": "yes"}).status_code == 400


def test_delete(user_client):
    task_id = user_client.post("/tasks", json={"title": "Test Task"}).get_json()["id"]

    assert user_client.delete(f"/tasks/{task_id}").status_code == 200
    assert user_client.get(f"/tasks/{task_id}").status_code == 404


def test_tasks_are_private_to_owner(app, client, allow_localhost):
    register_and_login(app, client, "owner@example.com")
    task_id = client.post("/tasks", json={"title": "Mine"}).get_json()["id"]
    client.post("/auth/logout")

    register_and_login(app, client, "other@example.com")
    assert client.get(f"/tasks/{task_id}").status_code == 404
    assert client.patch(f"/tasks/{task_id}", json={"title": "Stolen"}).status_code == 404
    assert client.delete(f"/tasks/{task_id}").status_code == 404
    assert client.get("/tasks").get_json() == []
