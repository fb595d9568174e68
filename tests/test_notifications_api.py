"""API tests for per-user notifications."""

from .conftest import TEST_PASSWORD


def _notify(client, headers, title="Hi", **extra):
    return client.post(
        "/api/notifications",
        headers=headers,
        json={"title": title, "message": "Something happened", **extra},
    )


class TestNotifications:
    def test_unread_count_and_mark_read(self, client, admin):
        headers, _ = admin
        first = _notify(client, headers, "first").json()
        _notify(client, headers, "second", type="warning")

        assert client.get("/api/notifications/unread-count", headers=headers).json() == {"count": 2}

        resp = client.patch(f"/api/notifications/{first['id']}/read", headers=headers)
        assert resp.status_code == 200
        assert resp.json() == {"success": True}
        # Marking again is harmless
        assert client.patch(f"/api/notifications/{first['id']}/read", headers=headers).json() == {"success": True}

        listed = client.get("/api/notifications", headers=headers).json()
        assert [n["title"] for n in listed] == ["second", "first"]
        assert listed[0]["type"] == "warning"
        assert listed[1]["isRead"] is True
        assert listed[1]["readAt"] is not None
        assert client.get("/api/notifications/unread-count", headers=headers).json() == {"count": 1}

    def test_mark_unknown_read(self, client, admin):
        headers, _ = admin
        resp = client.patch("/api/notifications/999/read", headers=headers)
        assert resp.status_code == 404

    def test_read_all(self, client, admin):
        headers, _ = admin
        for title in ("a", "b", "c"):
            _notify(client, headers, title)

        assert client.patch("/api/notifications/read-all", headers=headers).json() == {"updated": 3}
        assert client.get("/api/notifications/unread-count", headers=headers).json() == {"count": 0}

    def test_notify_teammate(self, client, admin):
        headers, _ = admin
        member = client.post(
            "/api/team",
            headers=headers,
            json={"email": "mate@acme.com", "firstName": "Te", "lastName": "Am", "password": TEST_PASSWORD},
        ).json()["user"]

        resp = _notify(client, headers, "for you", userId=member["id"])
        assert resp.status_code == 201
        assert resp.json()["userId"] == member["id"]
        assert client.get("/api/notifications", headers=headers).json() == []

        login = client.post("/api/login", json={"email": "mate@acme.com", "password": TEST_PASSWORD})
        client.cookies.clear()
        mate_headers = {"Authorization": f"Bearer {login.json()['accessToken']}"}
        titles = [n["title"] for n in client.get("/api/notifications", headers=mate_headers).json()]
        assert titles == ["for you"]

    def test_cannot_notify_other_company(self, client, register, admin):
        headers, _ = admin
        other_headers, stranger = register("stranger@beta.com", company_name="Beta")

        resp = _notify(client, headers, "spam", userId=stranger["id"])
        assert resp.status_code == 404
        assert client.get("/api/notifications", headers=other_headers).json() == []

    def test_other_user_cannot_mark_read(self, client, register, admin):
        headers, _ = admin
        other_headers, _ = register("reader@beta.com", company_name="Beta")
        notification = _notify(client, headers).json()

        resp = client.patch(f"/api/notifications/{notification['id']}/read", headers=other_headers)
        assert resp.status_code == 404
        assert client.get("/api/notifications/unread-count", headers=headers).json() == {"count": 1}
