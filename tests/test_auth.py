"""Registration, login cookie round trip and the role gate."""

import pytest

from conftest import run
from jobportal.schemas.user import Role
from jobportal.utils.auth import create_access_token, is_role_allowed


def register(client, **overrides):
    payload = {"name": "Nadia", "email": "nadia@example.com", "password": "s3cret-pass", "role": "user"}
    payload.update(overrides)
    return client.post("/api/v1/auth/register", json=payload)


class TestRegister:
    def test_first_account_becomes_admin(self, client):
        first = register(client)
        second = register(client, name="Rafi", email="rafi@example.com", role="recruiter")

        assert first.status_code == 201
        assert first.json()["role"] == "admin"
        assert second.json()["role"] == "recruiter"
        assert "password" not in second.json()

    def test_duplicate_email_rejected(self, client):
        register(client)
        response = register(client, name="Other")
        assert response.status_code == 400
        assert response.json() == {"error": [{"msg": "Email already registered"}]}

    def test_admin_role_cannot_be_requested(self, client):
        response = register(client, role="admin")
        assert response.status_code == 400
        assert "error" in response.json()


class TestSession:
    def test_login_sets_cookie_used_by_me(self, client):
        register(client)
        register(client, name="Sami", email="sami@example.com")

        response = client.post("/api/v1/auth/login", json={"email": "sami@example.com", "password": "s3cret-pass"})

        assert response.status_code == 200
        assert "token" in response.cookies
        me = client.get("/api/v1/auth/me")
        assert me.status_code == 200
        assert me.json()["email"] == "sami@example.com"

    def test_logout_clears_cookie(self, client):
        register(client)
        client.post("/api/v1/auth/login", json={"email": "nadia@example.com", "password": "s3cret-pass"})

        client.post("/api/v1/auth/logout")

        assert client.get("/api/v1/auth/me").status_code == 401

    def test_bad_password_is_401(self, client):
        register(client)
        response = client.post("/api/v1/auth/login", json={"email": "nadia@example.com", "password": "wrong-pass"})
        assert response.status_code == 401

    def test_missing_session_is_401(self, client):
        assert client.get("/api/v1/auth/me").status_code == 401

    def test_garbage_token_is_401(self, client):
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not.a.jwt"})
        assert response.status_code == 401

    def test_expired_token_is_401(self, client, make_user):
        user = make_user("user")
        token = create_access_token({"sub": user["id"]}, expires_minutes=-1)
        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_token_for_deleted_user_is_401(self, client, db, make_user):
        user = make_user("user")
        run(db.users.delete_one({"_id": user["_id"]}))
        assert client.get("/api/v1/auth/me", headers=user["headers"]).status_code == 401


@pytest.mark.parametrize(
    "role,allowed,expected",
    [
        ("user", {Role.USER}, True),
        ("recruiter", {Role.USER}, False),
        ("admin", {Role.USER, Role.RECRUITER}, False),
        ("recruiter", {Role.USER, Role.RECRUITER}, True),
        ("superuser", {Role.ADMIN}, False),
        (None, {Role.ADMIN}, False),
    ],
)
def test_role_membership(role, allowed, expected):
    assert is_role_allowed(role, allowed) is expected
