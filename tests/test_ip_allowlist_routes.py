import pytest

from helpers import register_and_login
from security import ip_allowlist


@pytest.fixture
def admin_client(app, client, allow_localhost):
    register_and_login(app, client, "admin@example.com", admin=True)
    return client


def test_requires_login(client):
    assert client.get("/ip-allowlist").status_code == 401
    assert client.post("/ip-allowlist", json={"ip": "10.0.0.1"}).status_code == 401


def test_requires_admin(app, client, allow_localhost):
    register_and_login(app, client, "plain@example.com")
    r = client.get("/ip-allowlist")
    assert r.status_code == 403
    assert r.get_json()["error"] == "Admin access required"
    assert client.delete("/ip-allowlist/127.0.0.1").status_code == 403


def test_add_and_list(admin_client):
    r = admin_client.post("/ip-allowlist", json={"ip": "10.0.0.1", "label": "office"})
    assert r.status_code == 201
    body = r.get_json()
    assert body["ip"] == "10.0.0.1"
    assert body["label"] == "office"
    assert body["is_active"] is True

    r = admin_client.get("/ip-allowlist")
    assert r.status_code == 200
    assert {e["ip"] for e in r.get_json()} == {"127.0.0.1", "10.0.0.1"}


def test_add_validation_and_duplicates(admin_client):
    assert admin_client.post("/ip-allowlist", json={}).status_code == 400
    assert admin_client.post("/ip-allowlist", json={"ip": "nope"}).status_code == 400
    assert admin_client.post("/ip-allowlist", json={"ip": "10.0.0.1", "label": 5}).status_code == 400

    assert admin_client.post("/ip-allowlist", json={"ip": "10.0.0.1"}).status_code == 201
    r = admin_client.post("/ip-allowlist", json={"ip": "10.0.0.1"})
    assert r.status_code == 409


def test_delete_is_soft_and_activate_restores(app, admin_client):
    admin_client.post("/ip-allowlist", json={"ip": "10.0.0.1"})

    r = admin_client.delete("/ip-allowlist/10.0.0.1")
    assert r.status_code == 200
    assert r.get_json()["is_active"] is False

    entries = {e["ip"]: e for e in admin_client.get("/ip-allowlist").get_json()}
    assert entries["10.0.0.1"]["is_active"] is False
    with app.app_context():
        assert not ip_allowlist.is_allowed("10.0.0.1")

    r = admin_client.post("/ip-allowlist/10.0.0.1/activate")
    assert r.status_code == 200
    assert r.get_json()["is_active"] is True
    with app.app_context():
        assert ip_allowlist.is_allowed("10.0.0.1")


def test_ipv6_path_parameter(admin_client):
    admin_client.post("/ip-allowlist", json={"ip": "2001:db8::1"})
    r = admin_client.delete("/ip-allowlist/2001:db8::1")
    assert r.status_code == 200


def test_unknown_ip_is_404(admin_client):
    assert admin_client.delete("/ip-allowlist/10.9.9.9").status_code == 404
    assert admin_client.post("/ip-allowlist/10.9.9.9/activate").status_code == 404


def test_deactivating_own_address_blocks_next_login(app, client, allow_localhost):
    register_and_login(app, client, "admin@example.com", admin=True)
    client.delete("/ip-allowlist/127.0.0.1")
    client.post("/auth/logout")

    r = client.post("/auth/login", json={"email": "admin@example.com", "password": "password123"})
    assert r.status_code == 403
