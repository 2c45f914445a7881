"""
HTTP-level tests through FastAPI's TestClient against a temporary store.
"""
from __future__ import annotations

import dataclasses
import json

import pytest
from fastapi.testclient import TestClient

from sherlouk_api.app import create_app
from sherlouk_api.core.errors import PersistenceError
from sherlouk_api.core.utils import now_ms
from sherlouk_api.services.auth_service import Authenticator


# -------------------------- login --------------------------
def test_login_accepts_non_empty_credentials(client):
    response = client.post("/api/login", json={"email": "a@b.com", "password": "x"})

    assert response.status_code == 200
    body = response.json()
    assert body["token"]
    assert body["user"]["email"] == "a@b.com"
    assert body["user"]["id"]


@pytest.mark.parametrize("payload", [{"email": ""}, {"email": "a@b.com"}, {"password": "x"}, {}])
def test_login_rejects_missing_fields(client, payload):
    response = client.post("/api/login", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": "email and password required"}


def test_login_without_body(client):
    response = client.post("/api/login")

    assert response.status_code == 400
    assert "error" in response.json()


# -------------------------- users --------------------------
def test_create_user_then_list(client):
    created = client.post("/api/users", json={"name": "Jo"})

    assert created.status_code == 200
    user = created.json()
    assert user["name"] == "Jo"
    assert user["id"]

    listed = client.get("/api/users").json()
    assert listed.count(user) == 1


def test_get_user_by_id(client):
    user = client.post("/api/users", json={"name": "Jo", "role": "editor"}).json()

    assert client.get(f"/api/users/{user['id']}").json() == user

    missing = client.get("/api/users/nope")
    assert missing.status_code == 404
    assert "error" in missing.json()


def test_delete_user_is_idempotent(client):
    keep = client.post("/api/users", json={"name": "Keep"}).json()
    drop = client.post("/api/users", json={"name": "Drop"}).json()

    first = client.delete(f"/api/users/{drop['id']}")
    second = client.delete(f"/api/users/{drop['id']}")

    assert first.status_code == 200 and first.json() == {"ok": True}
    assert second.status_code == 200 and second.json() == {"ok": True}
    assert client.get("/api/users").json() == [keep]


def test_client_cannot_choose_id(client):
    user = client.post("/api/users", json={"id": "chosen", "name": "Jo"}).json()

    assert user["id"] != "chosen"


@pytest.mark.parametrize("body", ["[1, 2]", '"text"', "{broken"])
def test_non_object_body_is_rejected(client, body):
    response = client.post("/api/users", content=body, headers={"content-type": "application/json"})

    assert response.status_code == 400
    assert "error" in response.json()
    assert client.get("/api/users").json() == []


# -------------------------- tables --------------------------
def test_tables_crud(client):
    orders = client.post("/api/tables", json={"name": "orders", "columns": [{"name": "id", "type": "int"}]}).json()
    items = client.post("/api/tables", json={"name": "items"}).json()

    assert orders["columns"] == [{"name": "id", "type": "int"}]
    assert client.get("/api/tables").json() == [orders, items]
    assert client.get(f"/api/tables/{items['id']}").json() == items

    assert client.delete(f"/api/tables/{orders['id']}").json() == {"ok": True}
    assert client.get("/api/tables").json() == [items]


# -------------------------- audit --------------------------
def test_audit_timestamp_set_by_server(client):
    before = now_ms()
    entry = client.post("/api/audit", json={"action": "delete", "timestamp": 1}).json()
    after = now_ms()

    assert entry["id"]
    assert entry["action"] == "delete"
    assert before <= entry["timestamp"] <= after
    assert client.get("/api/audit").json() == [entry]
    assert client.get(f"/api/audit/{entry['id']}").json() == entry


def test_audit_entries_cannot_be_deleted(client):
    entry = client.post("/api/audit", json={"action": "login"}).json()

    response = client.delete(f"/api/audit/{entry['id']}")

    assert response.status_code == 405
    assert "error" in response.json()
    assert client.get("/api/audit").json() == [entry]


# -------------------------- persistence --------------------------
def test_writes_land_on_disk(client, settings):
    user = client.post("/api/users", json={"name": "Jo"}).json()

    on_disk = json.loads(settings.data_file.read_text(encoding="utf-8"))
    assert on_disk["users"] == [user]
    assert on_disk["tables"] == [] and on_disk["audit"] == []


def test_restart_keeps_records(settings):
    with TestClient(create_app(settings)) as first:
        written = [first.post("/api/tables", json={"name": f"t{i}", "rows": i}).json() for i in range(4)]

    with TestClient(create_app(settings)) as second:
        assert second.get("/api/tables").json() == written


def test_corrupt_store_is_fatal_at_startup(settings):
    settings.data_file.write_text("{oops", encoding="utf-8")

    with pytest.raises(PersistenceError):
        create_app(settings)

    assert settings.data_file.read_text(encoding="utf-8") == "{oops"


def test_corruption_at_runtime_returns_500_and_keeps_serving(client, settings):
    settings.data_file.write_text("{oops", encoding="utf-8")

    response = client.get("/api/users")
    assert response.status_code == 500
    assert "error" in response.json()

    settings.data_file.write_text(json.dumps({"users": [{"id": "a"}], "tables": [], "audit": []}), encoding="utf-8")
    assert client.get("/api/users").json() == [{"id": "a"}]


# -------------------------- frontend --------------------------
def test_unknown_api_route_is_json_404(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json() == {"error": "Not found"}


def test_no_bundle_means_404(client):
    response = client.get("/dashboard")

    assert response.status_code == 404
    assert "error" in response.json()


def test_spa_fallback_serves_bundle(settings):
    dist = settings.static_dir
    (dist / "assets").mkdir(parents=True)
    (dist / "index.html").write_text("<html>app</html>", encoding="utf-8")
    (dist / "assets" / "app.js").write_text("console.log('hi')", encoding="utf-8")

    with TestClient(create_app(settings)) as client:
        assert client.get("/").text == "<html>app</html>"
        assert client.get("/user-management").text == "<html>app</html>"
        assert client.get("/assets/app.js").text == "console.log('hi')"
        assert client.get("/api/unknown").status_code == 404
        assert client.get("/api/users").json() == []


def test_cors_headers_present(client):
    response = client.get("/api/users", headers={"origin": "http://localhost:5173"})

    assert response.headers.get("access-control-allow-origin") == "*"


def test_cors_restricted_origins(settings):
    restricted = dataclasses.replace(settings, cors_origins=("https://app.example",), app_env="prod")

    with TestClient(create_app(restricted)) as client:
        allowed = client.get("/api/users", headers={"origin": "https://app.example"})
        denied = client.get("/api/users", headers={"origin": "http://localhost:5173"})

    assert allowed.headers.get("access-control-allow-origin") == "https://app.example"
    assert "access-control-allow-origin" not in denied.headers


# -------------------------- robustness --------------------------
@pytest.mark.parametrize("token", ["NaN", "Infinity", "-Infinity"])
def test_non_finite_numbers_are_rejected_and_store_stays_readable(client, settings, token):
    response = client.post(
        "/api/users",
        content='{"name": "Jo", "score": %s}' % token,
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400
    assert "error" in response.json()
    assert token not in settings.data_file.read_text(encoding="utf-8")

    listed = client.get("/api/users")
    assert listed.status_code == 200
    assert listed.json() == []


def test_unexpected_errors_are_json_500(settings):
    class Exploding(Authenticator):
        def login(self, email, password):
            raise RuntimeError("boom")

    app = create_app(settings)
    app.state.authenticator = Exploding()

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.post("/api/login", json={"email": "a@b.com", "password": "x"})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


def test_login_accepts_whitespace_password(client):
    response = client.post("/api/login", json={"email": "a@b.com", "password": " "})

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "a@b.com"


def test_trailing_slash_on_api_routes_redirects(client):
    user = client.post("/api/users", json={"name": "Jo"}).json()

    response = client.get("/api/users/")
    assert response.status_code == 200
    assert response.json() == [user]

    redirect = client.get("/api/users/", follow_redirects=False)
    assert redirect.status_code == 307
    assert redirect.headers["location"].endswith("/api/users")

    assert client.get(f"/api/users/{user['id']}/").json() == user
    assert client.get("/api/nothing-here/").status_code == 404
