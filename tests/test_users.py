from airtime.domain.users.repository import UserRepository
from airtime.models import User

NEW_USER = {"id": "fresh-uid", "email": "Jane@Station.ng", "name": "Jane Doe", "role": "host"}


def test_signup_creates_profile(client, db):
    res = client.post("/api/auth/signup", json=NEW_USER)

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["id"] == "fresh-uid"
    assert data["email"] == "jane@station.ng"
    assert data["role"] == "host"
    assert db.get(User, "fresh-uid") is not None


def test_signup_duplicate_id_is_a_client_error(client):
    client.post("/api/auth/signup", json=NEW_USER)

    res = client.post("/api/auth/signup", json={**NEW_USER, "email": "jane2@station.ng"})

    assert res.status_code == 400
    assert "already exists" in res.json()["error"]


def test_signup_duplicate_email_is_a_client_error(client):
    res = client.post(
        "/api/auth/signup", json={**NEW_USER, "id": "another-uid", "email": "host@station.ng"}
    )

    assert res.status_code == 400
    assert "error" in res.json()


def test_signup_rejects_unknown_role(client):
    res = client.post("/api/auth/signup", json={**NEW_USER, "role": "superuser"})

    assert res.status_code == 400
    assert res.json()["error"].startswith("role:")


def test_signup_rejects_missing_fields(client):
    res = client.post("/api/auth/signup", json={"id": "x", "email": "x@station.ng"})

    assert res.status_code == 400
    assert "error" in res.json()


def test_signup_rejects_non_json_body(client):
    res = client.post(
        "/api/auth/signup", content=b"not json", headers={"Content-Type": "application/json"}
    )

    assert res.status_code == 400
    assert res.json() == {"error": "Invalid JSON body"}


def test_signup_unexpected_failure(client, monkeypatch):
    def explode(_db, **_data):
        raise RuntimeError("disk full")

    monkeypatch.setattr(UserRepository, "create_user", staticmethod(explode))

    res = client.post("/api/auth/signup", json=NEW_USER)

    assert res.status_code == 500
    assert res.json() == {"error": "Internal server error"}


def test_me_and_profile_update(client, login_as):
    login_as("host-uid")
    assert client.get("/users/me").json()["email"] == "host@station.ng"

    res = client.patch("/users/me", json={"name": "Hal the Host", "role": "admin"})

    assert res.status_code == 200
    assert res.json()["name"] == "Hal the Host"
    assert res.json()["role"] == "host"


def test_user_listing_is_admin_only(client, login_as):
    names = [u["name"] for u in client.get("/users").json()]
    assert names == sorted(names)
    assert len(names) == 4

    login_as("host-uid")
    assert client.get("/users").status_code == 403


def test_users_only_read_their_own_profile(client, login_as):
    login_as("host-uid")
    assert client.get("/users/host-uid").status_code == 200
    assert client.get("/users/admin-uid").status_code == 403

    login_as("admin-uid")
    assert client.get("/users/host-uid").status_code == 200
    assert client.get("/users/missing").status_code == 404
