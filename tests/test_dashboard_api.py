from datetime import datetime, timezone

import httpx


def test_health(api):
    response = api.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.headers["x-request-id"]


def test_request_id_is_echoed(api):
    response = api.get("/api/health", headers={"X-Request-ID": "req-42"})
    assert response.headers["x-request-id"] == "req-42"


def test_token_cookie_is_forwarded(api, backend):
    api.get("/api/v1/projects/p1", headers={"Cookie": "token=cookie-token"})
    assert backend.requests[-1].headers["Authorization"] == "Bearer cookie-token"


def test_unauthorized_backend(api, backend):
    backend.fail_with = httpx.Response(401, json={"message": "Unauthorized"})

    response = api.get("/api/v1/projects/p1")

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_project_list_degrades_to_empty_page(api, backend):
    backend.fail_with = httpx.Response(500, json={"message": "boom"})

    response = api.get("/api/v1/projects", params={"page": 3, "limit": 20})

    assert response.status_code == 200
    assert response.json() == {"data": [], "total": 0, "page": 3, "limit": 20}


def test_project_stats(api, backend):
    response = api.get("/api/v1/projects/stats")

    body = response.json()
    assert response.status_code == 200
    assert body["totalProjects"] == 1
    assert body["totalBudget"] == 12500000
    assert body["highRiskProjects"] == 1
    assert body["totalCapacityLabel"] == "250.0 kW"


def test_location_stats(api, backend):
    created = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    backend.locations = [
        {"name": "Site A", "county": "Nairobi", "status": "active", "siteType": "outdoor", "createdAt": created},
        {"name": "Site B", "county": "Kisumu", "status": "maintenance", "siteType": "rooftop", "createdAt": created},
    ]

    response = api.get("/api/v1/locations/stats")

    assert response.status_code == 200
    assert response.json() == {
        "total": 2,
        "active": 1,
        "inactive": 0,
        "maintenance": 1,
        "counties": 2,
        "outdoorSites": 1,
        "indoorSites": 1,
        "totalTrend": "0% from last month",
        "activeTrend": "0% from last month",
        "outdoorTrend": "0% from last month",
        "maintenanceTrend": "+1",
    }


def test_location_export(api, backend):
    backend.locations = [{"name": "Site A", "county": "Nairobi", "status": "active"}]

    response = api.get("/api/v1/locations/export")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["content-disposition"].startswith('attachment; filename="locations_export_')
    lines = response.text.splitlines()
    assert len(lines) == 2
    assert lines[1].startswith('"Site A","Nairobi","N/A"')


def test_create_location_is_validated(api, backend):
    response = api.post("/api/v1/locations", json={"name": "Site C", "siteType": "underwater"})
    assert response.status_code == 422
    assert backend.requests == []
