"""Registration, login, logout and session handling."""

from bizboard.core.security import get_password_hash
from bizboard import schemas

from .conftest import TEST_PASSWORD


class TestRegistration:
    def test_register_creates_admin_and_company(self, client, register):
        headers, user = register("founder@acme.com", company_name="Acme Inc")
        assert user["role"] == "admin"
        assert user["companyId"] is not None
        assert "password" not in user

        resp = client.get("/api/company", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["name"] == "Acme Inc"

    def test_duplicate_email_conflicts(self, client, register):
        register("dup@acme.com")
        resp = client.post(
            "/api/register",
            json={
                "email": "dup@acme.com",
                "password": TEST_PASSWORD,
                "firstName": "Second",
                "lastName": "User",
            },
        )
        assert resp.status_code == 409
        assert resp.json()["detail"] == "email already in use"

    def test_invalid_payload_lists_fields(self, client):
        resp = client.post("/api/register", json={"email": "not-an-email"})
        assert resp.status_code == 400
        body = resp.json()
        assert body["detail"] == "Validation failed"
        fields = {error["field"] for error in body["errors"]}
        assert {"email", "password", "firstName", "lastName"} <= fields

    def test_password_mismatch(self, client):
        resp = client.post(
            "/api/register",
            json={
                "email": "mismatch@acme.com",
                "password": TEST_PASSWORD,
                "confirmPassword": "something-else",
                "firstName": "Mis",
                "lastName": "Match",
            },
        )
        assert resp.status_code == 400


class TestLogin:
    def test_login_sets_cookie_session(self, client, register, test_settings):
        register("login@acme.com")
        resp = client.post("/api/login", json={"email": "login@acme.com", "password": TEST_PASSWORD})
        assert resp.status_code == 200
        assert resp.json()["tokenType"] == "bearer"
        assert test_settings.SESSION_COOKIE_NAME in resp.cookies

        # The cookie alone authenticates
        me = client.get("/api/user")
        assert me.status_code == 200
        assert me.json()["email"] == "login@acme.com"
        assert me.json()["lastActiveAt"] is not None

    def test_wrong_password(self, client, register):
        register("wrong@acme.com")
        resp = client.post("/api/login", json={"email": "wrong@acme.com", "password": "nope"})
        assert resp.status_code == 401

    def test_unknown_user(self, client):
        resp = client.post("/api/login", json={"email": "ghost@acme.com", "password": "whatever"})
        assert resp.status_code == 401


class TestSessions:
    def test_requires_authentication(self, client):
        resp = client.get("/api/user")
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Authentication required"

    def test_garbage_token(self, client):
        resp = client.get("/api/user", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401

    def test_logout_revokes_session(self, client, admin):
        headers, _ = admin
        assert client.get("/api/user", headers=headers).status_code == 200

        resp = client.post("/api/logout", headers=headers)
        assert resp.status_code == 200
        assert resp.json() == {"success": True}

        assert client.get("/api/user", headers=headers).status_code == 401

    def test_user_without_company(self, client):
        """An authenticated user with no company is rejected from tenant endpoints."""
        storage = client.app.state.storage
        storage.create_user(
            schemas.UserInsert(
                email="loner@acme.com",
                password=get_password_hash(TEST_PASSWORD, 4),
                first_name="Lo",
                last_name="Ner",
            )
        )
        login = client.post("/api/login", json={"email": "loner@acme.com", "password": TEST_PASSWORD})
        headers = {"Authorization": f"Bearer {login.json()['accessToken']}"}
        client.cookies.clear()

        assert client.get("/api/user", headers=headers).status_code == 200
        resp = client.get("/api/integrations", headers=headers)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "No company associated with user"


class TestProfile:
    def test_update_profile(self, client, admin):
        headers, _ = admin
        resp = client.patch(
            "/api/user/profile",
            headers=headers,
            json={"firstName": "Grace", "jobTitle": "CTO"},
        )
        assert resp.status_code == 200
        assert resp.json()["firstName"] == "Grace"
        assert resp.json()["jobTitle"] == "CTO"

    def test_email_taken(self, client, register, admin):
        register("taken@other.com", company_name="Other")
        headers, _ = admin
        resp = client.patch("/api/user/profile", headers=headers, json={"email": "taken@other.com"})
        assert resp.status_code == 409

    def test_password_change(self, client, admin):
        headers, user = admin
        resp = client.patch("/api/user/profile", headers=headers, json={"password": "brand-new-pass"})
        assert resp.status_code == 200

        old = client.post("/api/login", json={"email": user["email"], "password": TEST_PASSWORD})
        assert old.status_code == 401
        new = client.post("/api/login", json={"email": user["email"], "password": "brand-new-pass"})
        assert new.status_code == 200
