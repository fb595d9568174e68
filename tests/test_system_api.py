"""Health and root endpoints."""


def test_health_check(client):
    resp = client.get("/system/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert body["database"] == "ok"


def test_root(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["health"] == "/system/health"
