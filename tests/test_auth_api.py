from fastapi.testclient import TestClient

from conftest import PASSWORD
from vidshare.config import settings
from vidshare.crud import user_crud
from vidshare.main import app

REGISTER = {
    "username": "Carol_99",
    "email": "Carol@Example.com",
    "password": "s3cret-pass",
    "fullName": "Carol Doe",
}


def test_register_returns_user_and_token(client):
    r = client.post("/api/auth/register", json=REGISTER)
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["success"] is True
    assert body["data"]["token"]
    user = body["data"]["user"]
    assert user["username"] == "carol_99"
    assert user["email"] == "carol@example.com"
    assert user["fullName"] == "Carol Doe"
    assert "passwordHash" not in user


def test_register_duplicate_email(client):
    client.post("/api/auth/register", json=REGISTER)
    r = client.post("/api/auth/register", json={**REGISTER, "username": "other_name"})
    assert r.status_code == 400
    assert r.json() == {"success": False, "message": "Email already exists"}


def test_register_validation_errors_list_fields(client):
    r = client.post(
        "/api/auth/register",
        json={"username": "x", "email": "nope", "password": "short", "fullName": ""},
    )
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    fields = {e["field"] for e in body["errors"]}
    assert {"username", "email", "password", "fullName"} <= fields


def test_login_and_me(client, user):
    r = client.post("/api/auth/login", json={"email": user.email, "password": PASSWORD})
    assert r.status_code == 200, r.text
    token = r.json()["data"]["token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["data"]["user"]["loginCount"] == 1


def test_login_wrong_password(client, user):
    r = client.post("/api/auth/login", json={"email": user.email, "password": "wrong-password"})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid email or password"


def test_me_requires_token(client):
    r = client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.json()["success"] is False


def test_garbage_token_is_rejected(client):
    r = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401


def test_update_password_mismatch(client, user, auth):
    r = client.put(
        "/api/auth/update-password",
        json={"currentPassword": PASSWORD, "newPassword": "newpass123", "confirmPassword": "other123"},
        headers=auth(user),
    )
    assert r.status_code == 400


def test_update_password_then_login_with_new(client, user, auth):
    r = client.put(
        "/api/auth/update-password",
        json={"currentPassword": PASSWORD, "newPassword": "newpass123", "confirmPassword": "newpass123"},
        headers=auth(user),
    )
    assert r.status_code == 200, r.text
    assert r.json()["data"]["token"]

    r = client.post("/api/auth/login", json={"email": user.email, "password": "newpass123"})
    assert r.status_code == 200


def test_update_profile(client, user, auth):
    r = client.put(
        "/api/auth/update-profile",
        json={"bio": "hello there", "channelName": "Alice TV", "role": "admin"},
        headers=auth(user),
    )
    assert r.status_code == 200, r.text
    data = r.json()["data"]["user"]
    assert data["bio"] == "hello there"
    assert data["channelName"] == "Alice TV"
    assert data["role"] == "user"


def test_delete_account_deactivates(client, user, auth):
    headers = auth(user)
    r = client.request("DELETE", "/api/auth/delete-account", json={"password": PASSWORD}, headers=headers)
    assert r.status_code == 200, r.text

    assert client.get("/api/auth/me", headers=headers).status_code == 401
    r = client.post("/api/auth/login", json={"email": user.email, "password": PASSWORD})
    assert r.status_code == 401
    assert r.json()["message"] == "Your account has been deactivated"


def test_public_profile_and_user_list(client, user, other):
    r = client.get(f"/api/users/{user.id}")
    assert r.status_code == 200
    assert "email" not in r.json()["data"]["user"]

    r = client.get("/api/users", params={"search": "bo"})
    body = r.json()
    assert [u["username"] for u in body["data"]] == ["bob"]
    assert body["pagination"]["totalItems"] == 1

    assert client.get("/api/users/username/ALICE").status_code == 200
    assert client.get("/api/users/999").status_code == 404


def _avatar_files():
    return {"avatar": ("me.png", b"\x89PNG\r\n\x1a\n", "image/png")}


def test_update_avatar_stores_file(client, user, auth):
    r = client.put("/api/users/avatar", files=_avatar_files(), headers=auth(user))
    assert r.status_code == 200, r.text
    name = r.json()["data"]["user"]["avatar"]
    assert name.endswith("_me.png")
    assert (settings.avatars_dir / name).exists()


def test_failed_avatar_update_removes_stored_file(client, user, auth, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("db down")

    monkeypatch.setattr(user_crud, "set_avatar", boom)
    settings.avatars_dir.mkdir(parents=True, exist_ok=True)
    before = set(settings.avatars_dir.glob("*"))

    r = TestClient(app, raise_server_exceptions=False).put(
        "/api/users/avatar", files=_avatar_files(), headers=auth(user)
    )

    assert r.status_code == 500
    assert set(settings.avatars_dir.glob("*")) == before


def test_user_search_treats_wildcards_literally(client, user, other):
    body = client.get("/api/users", params={"search": "_"}).json()
    assert body["data"] == []
    assert body["pagination"]["totalItems"] == 0
