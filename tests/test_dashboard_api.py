"""API tests for KPI metrics, chart series, recommendations and activities."""

from datetime import timedelta

from bizboard.models import utcnow

KPI = {
    "name": "Total Revenue",
    "value": "$1,000",
    "previousValue": "$800",
    "changePercentage": "+25%",
    "period": "Last 30 days",
    "icon": "DollarSign",
    "color": "green",
}


def _days_ago(days):
    return (utcnow() - timedelta(days=days)).isoformat()


class TestKpiMetrics:
    def test_create_list_update(self, client, admin):
        headers, user = admin
        created = client.post("/api/dashboard/kpi-metrics", headers=headers, json=KPI)
        assert created.status_code == 201
        metric = created.json()
        assert metric["companyId"] == user["companyId"]

        listed = client.get("/api/dashboard/kpi-metrics", headers=headers).json()
        assert [m["name"] for m in listed] == ["Total Revenue"]

        patched = client.patch(
            f"/api/dashboard/kpi-metrics/{metric['id']}",
            headers=headers,
            json={"value": "$1,200", "changePercentage": None},
        )
        assert patched.status_code == 200
        assert patched.json()["value"] == "$1,200"
        assert patched.json()["changePercentage"] is None
        assert patched.json()["period"] == "Last 30 days"

    def test_null_required_field_is_ignored(self, client, admin):
        headers, _ = admin
        metric = client.post("/api/dashboard/kpi-metrics", headers=headers, json=KPI).json()
        resp = client.patch(
            f"/api/dashboard/kpi-metrics/{metric['id']}", headers=headers, json={"name": None}
        )
        assert resp.status_code == 200
        assert resp.json()["name"] == "Total Revenue"

    def test_update_unknown(self, client, admin):
        headers, _ = admin
        resp = client.patch("/api/dashboard/kpi-metrics/404", headers=headers, json={"value": "1"})
        assert resp.status_code == 404
        assert resp.json()["detail"] == "KPI metric not found"

    def test_missing_fields(self, client, admin):
        headers, _ = admin
        resp = client.post("/api/dashboard/kpi-metrics", headers=headers, json={"name": "Only name"})
        assert resp.status_code == 400
        fields = {error["field"] for error in resp.json()["errors"]}
        assert {"value", "period", "icon", "color"} <= fields


class TestCharts:
    def _point(self, client, headers, chart_type, days, value=10.0):
        resp = client.post(
            "/api/dashboard/chart-data",
            headers=headers,
            json={
                "chartType": chart_type,
                "label": f"d-{days}",
                "value": value,
                "date": _days_ago(days),
                "metadata": {"source": "test"},
            },
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    def test_chart_data_filter_and_order(self, client, admin):
        headers, _ = admin
        for days in (3, 9, 1):
            self._point(client, headers, "revenue", days)
        self._point(client, headers, "users", 2)

        revenue = client.get("/api/dashboard/chart-data?type=revenue", headers=headers).json()
        assert [p["label"] for p in revenue] == ["d-9", "d-3", "d-1"]
        assert revenue[0]["metadata"] == {"source": "test"}

        everything = client.get("/api/dashboard/chart-data", headers=headers).json()
        assert len(everything) == 4

    def test_revenue_chart_window(self, client, admin):
        headers, _ = admin
        for days in (90, 40, 10):
            self._point(client, headers, "revenue", days)

        default = client.get("/api/dashboard/revenue-chart", headers=headers).json()
        assert [p["label"] for p in default] == ["d-10"]

        wide = client.get("/api/dashboard/revenue-chart?days=60", headers=headers).json()
        assert [p["label"] for p in wide] == ["d-40", "d-10"]

    def test_revenue_chart_days_bounds(self, client, admin):
        headers, _ = admin
        assert client.get("/api/dashboard/revenue-chart?days=0", headers=headers).status_code == 400
        assert client.get("/api/dashboard/revenue-chart?days=366", headers=headers).status_code == 400

    def test_user_chart(self, client, admin):
        headers, _ = admin
        self._point(client, headers, "users", 5, value=100)
        self._point(client, headers, "users", 1, value=120)
        self._point(client, headers, "revenue", 1)

        points = client.get("/api/dashboard/user-chart", headers=headers).json()
        assert [p["value"] for p in points] == [100, 120]


class TestRecommendations:
    def _create(self, client, headers, confidence):
        return client.post(
            "/api/ai-recommendations",
            headers=headers,
            json={
                "title": f"Idea {confidence}",
                "description": "Try it",
                "category": "Growth",
                "priority": "medium",
                "confidence": confidence,
                "estimatedImpact": "+5%",
                "requiredActions": ["plan", "ship"],
            },
        )

    def test_list_ordered_by_confidence(self, client, admin):
        headers, _ = admin
        for confidence in (55, 95, 70):
            assert self._create(client, headers, confidence).status_code == 201

        listed = client.get("/api/ai-recommendations", headers=headers).json()
        assert [r["confidence"] for r in listed] == [95, 70, 55]
        assert listed[0]["requiredActions"] == ["plan", "ship"]

    def test_confidence_out_of_range(self, client, admin):
        headers, _ = admin
        resp = self._create(client, headers, 101)
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "confidence"

    def test_implementing_stamps_and_records_activity(self, client, admin):
        headers, _ = admin
        rec = self._create(client, headers, 80).json()
        assert rec["implementedAt"] is None

        resp = client.patch(
            f"/api/ai-recommendations/{rec['id']}", headers=headers, json={"isImplemented": True}
        )
        assert resp.status_code == 200
        stamped = resp.json()["implementedAt"]
        assert stamped is not None

        again = client.patch(
            f"/api/ai-recommendations/{rec['id']}", headers=headers, json={"isImplemented": True}
        )
        assert again.json()["implementedAt"] == stamped

        activities = client.get("/api/activities", headers=headers).json()
        implemented = [a for a in activities if a["type"] == "recommendation_implemented"]
        assert len(implemented) == 1
        assert implemented[0]["metadata"] == {"recommendationId": rec["id"]}

    def test_update_unknown(self, client, admin):
        headers, _ = admin
        resp = client.patch("/api/ai-recommendations/77", headers=headers, json={"priority": "low"})
        assert resp.status_code == 404


class TestActivities:
    def test_create_and_limit(self, client, admin):
        headers, user = admin
        for i in range(4):
            resp = client.post(
                "/api/activities",
                headers=headers,
                json={"type": "note", "description": f"note {i}", "metadata": {"n": i}},
            )
            assert resp.status_code == 201
            assert resp.json()["userId"] == user["id"]

        latest = client.get("/api/activities?limit=2", headers=headers).json()
        assert [a["description"] for a in latest] == ["note 3", "note 2"]

    def test_limit_bounds(self, client, admin):
        headers, _ = admin
        assert client.get("/api/activities?limit=0", headers=headers).status_code == 400
        assert client.get("/api/activities?limit=101", headers=headers).status_code == 400
