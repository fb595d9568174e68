"""API tests for team management, company profile and role gates."""

from .conftest import TEST_PASSWORD


def _add_member(client, headers, email, role="member", password=None):
    body = {"email": email, "firstName": "Team", "lastName": "Mate", "role": role}
    if password:
        body["password"] = password
    return client.post("/api/team", headers=headers, json=body)


def _login(client, email, password):
    resp = client.post("/api/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    client.cookies.clear()
    return {"Authorization": f"Bearer {resp.json()['accessToken']}"}


class TestTeam:
    def test_list_team_members(self, client, register, admin):
        headers, user = admin
        register("stranger@beta.com", company_name="Beta")
        _add_member(client, headers, "mate@acme.com", password=TEST_PASSWORD)

        members = client.get("/api/team", headers=headers).json()
        assert [m["email"] for m in members] == [user["email"], "mate@acme.com"]
        assert all(m["companyId"] == user["companyId"] for m in members)

    def test_temporary_password(self, client, admin):
        headers, user = admin
        resp = _add_member(client, headers, "temp@acme.com")
        assert resp.status_code == 201
        body = resp.json()
        assert body["user"]["companyId"] == user["companyId"]
        assert body["temporaryPassword"]

        _login(client, "temp@acme.com", body["temporaryPassword"])

    def test_supplied_password_is_not_echoed(self, client, admin):
        headers, _ = admin
        resp = _add_member(client, headers, "chosen@acme.com", password=TEST_PASSWORD)
        assert resp.status_code == 201
        assert resp.json()["temporaryPassword"] is None

    def test_duplicate_member_email(self, client, admin):
        headers, user = admin
        resp = _add_member(client, headers, user["email"])
        assert resp.status_code == 409

    def test_member_cannot_manage_team(self, client, admin):
        headers, _ = admin
        _add_member(client, headers, "plain@acme.com", password=TEST_PASSWORD)
        member_headers = _login(client, "plain@acme.com", TEST_PASSWORD)

        assert _add_member(client, member_headers, "sneaky@acme.com").status_code == 403
        assert client.get("/api/team", headers=member_headers).status_code == 200

    def test_update_member(self, client, admin):
        headers, _ = admin
        member = _add_member(client, headers, "promote@acme.com").json()["user"]

        resp = client.patch(
            f"/api/team/{member['id']}", headers=headers, json={"role": "viewer", "isActive": False}
        )
        assert resp.status_code == 200
        assert resp.json()["role"] == "viewer"
        assert resp.json()["isActive"] is False

    def test_admin_cannot_demote_self(self, client, admin):
        headers, user = admin
        resp = client.patch(f"/api/team/{user['id']}", headers=headers, json={"role": "member"})
        assert resp.status_code == 403

    def test_update_member_of_other_company(self, client, register, admin):
        headers, _ = admin
        _, stranger = register("someone@beta.com", company_name="Beta")
        resp = client.patch(f"/api/team/{stranger['id']}", headers=headers, json={"role": "viewer"})
        assert resp.status_code == 404

    def test_invalid_role(self, client, admin):
        headers, _ = admin
        resp = _add_member(client, headers, "badrole@acme.com", role="owner")
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "role"

    def test_deactivated_member_cannot_log_in(self, client, admin):
        headers, _ = admin
        member = _add_member(client, headers, "gone@acme.com", password=TEST_PASSWORD).json()["user"]
        client.patch(f"/api/team/{member['id']}", headers=headers, json={"isActive": False})

        resp = client.post("/api/login", json={"email": "gone@acme.com", "password": TEST_PASSWORD})
        assert resp.status_code == 401


class TestViewerRole:
    def test_viewer_is_read_only(self, client, admin):
        headers, _ = admin
        _add_member(client, headers, "viewer@acme.com", role="viewer", password=TEST_PASSWORD)
        viewer_headers = _login(client, "viewer@acme.com", TEST_PASSWORD)

        assert client.get("/api/integrations", headers=viewer_headers).status_code == 200
        resp = client.post(
            "/api/integrations",
            headers=viewer_headers,
            json={"name": "Stripe", "type": "payments", "provider": "stripe"},
        )
        assert resp.status_code == 403


class TestCompany:
    def test_get_and_update_company(self, client, admin):
        headers, user = admin
        company = client.get("/api/company", headers=headers).json()
        assert company["id"] == user["companyId"]

        resp = client.patch(
            "/api/company",
            headers=headers,
            json={"industry": "Retail", "settings": {"currency": "EUR"}},
        )
        assert resp.status_code == 200
        assert resp.json()["industry"] == "Retail"
        assert resp.json()["settings"] == {"currency": "EUR"}
        assert resp.json()["name"] == company["name"]

        activities = client.get("/api/activities", headers=headers).json()
        assert activities[0]["type"] == "company_updated"

    def test_member_cannot_update_company(self, client, admin):
        headers, _ = admin
        _add_member(client, headers, "nosy@acme.com", password=TEST_PASSWORD)
        member_headers = _login(client, "nosy@acme.com", TEST_PASSWORD)

        resp = client.patch("/api/company", headers=member_headers, json={"name": "Mine now"})
        assert resp.status_code == 403
