import pytest

from helpers import fetch_user, register_and_login

EMAIL = "me@example.com"


@pytest.fixture
def user_client(app, client, allow_localhost):
    register_and_login(app, client, EMAIL)
    return client


def test_get_me(user_client):
    r = user_client.get("/users/me")
    assert r.status_code == 200
    assert r.get_json()["email"] == EMAIL


def test_update_name(user_client):
    r = user_client.patch("/users/me", json={"name": "  New Name "})
    assert r.status_code == 200
    assert r.get_json()["name"] == "New Name"

    assert user_client.patch("/users/me", json={"name": 12}).status_code == 400


def test_delete_me_removes_account_and_session(app, user_client):
    user_client.post("/tasks", json={"title": "to be removed"})

    r = user_client.delete("/users/me")
    assert r.status_code == 200
    assert user_client.get("/users/me").status_code == 401

    with app.app_context():
        assert fetch_user(EMAIL) is None

    # the email can be registered again
    r = user_client.post("/auth/signup", json={"email": EMAIL, "password": "password123"})
    assert r.status_code == 201
