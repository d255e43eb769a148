"""Pytest fixtures for the dashboard service.

The environment is configured before anything under `app` is imported, so
settings and the draft store engine pick up the test values.
"""
import copy
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx
import pytest

TEST_DIR = Path(tempfile.mkdtemp(prefix="solarops_tests_"))
BACKEND_URL = "http://backend.test/api"

os.environ["BACKEND_API_URL"] = BACKEND_URL
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DIR / 'drafts.db'}"
os.environ["INIT_DB_ON_START"] = "true"
os.environ["ENVIRONMENT"] = "test"

from fastapi import Depends  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.core.security import get_backend_token  # noqa: E402
from app.services.backend_client import BackendClient, get_backend_client  # noqa: E402


PROJECT_RECORD: Dict[str, Any] = {
    "_id": "p1",
    "name": "Kitengela Solar Farm",
    "description": "Ground mounted array with battery storage",
    "projectType": "Ground Mount",
    "capacity": "250 kW",
    "contractValue": 12500000,
    "priority": "High",
    "status": "In Progress",
    "serviceOrder": {"_id": "so1", "status": "approved", "totalValue": 11000000},
    "location": {"_id": "loc1", "name": "Kitengela", "county": "Kajiado"},
    "projectLeader": {"_id": "u1", "firstName": "Amina", "lastName": "Otieno"},
    "subcontractors": [{"_id": "s1", "companyName": "Volt Works Ltd"}, "s2"],
    "plannedStartDate": "2025-01-06T00:00:00.000Z",
    "targetCompletionDate": "2025-06-30T00:00:00.000Z",
    "progress": 40,
    "milestones": [
        {
            "_id": "m1",
            "name": "Site survey",
            "description": "Topography and soil tests",
            "dueDate": "2025-02-01T00:00:00.000Z",
            "progress": 100,
            "tasks": [
                {
                    "name": "Survey",
                    "status": "Completed",
                    "priority": "High",
                    "progress": 100,
                    "plannedStartDate": "2025-01-10T00:00:00.000Z",
                }
            ],
            "deliverables": ["Survey report"],
        }
    ],
    "risks": [
        {
            "title": "Panel supply delay",
            "severity": "High",
            "probability": 0.4,
            "impact": 7,
            "status": "Open",
            "identifiedDate": "2025-01-07T00:00:00.000Z",
        }
    ],
    "notes": "",
    "isActive": True,
    "createdAt": "2024-12-20T08:00:00.000Z",
    "updatedAt": "2025-01-07T08:00:00.000Z",
    "__v": 0,
}


class FakeBackend:
    """In-memory stand-in for the operations REST backend."""

    def __init__(self, projects: Dict[str, Dict[str, Any]], locations: Optional[List[Dict[str, Any]]] = None):
        self.projects = projects
        self.locations = locations or []
        self.requests: List[httpx.Request] = []
        self.updates: List[Dict[str, Any]] = []
        self.fail_with: Optional[httpx.Response] = None
        # answers GETs only, writes still succeed
        self.fail_reads: Optional[httpx.Response] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            return self.fail_with
        if self.fail_reads is not None and request.method == "GET":
            return self.fail_reads

        path = request.url.path[len("/api"):]
        parts = [p for p in path.split("/") if p]

        if parts == ["projects"] and request.method == "GET":
            data = list(self.projects.values())
            return httpx.Response(200, json={"data": data, "total": len(data), "page": 1, "limit": 10})

        if len(parts) == 2 and parts[0] == "projects":
            project = self.projects.get(parts[1])
            if project is None:
                return httpx.Response(404, json={"message": "Project not found"})
            if request.method == "GET":
                return httpx.Response(200, json=project)
            if request.method == "PATCH":
                payload = json.loads(request.content)
                self.updates.append(payload)
                project.update(payload)
                return httpx.Response(200, json=project)

        if parts == ["locations"] and request.method == "GET":
            return httpx.Response(200, json=self.locations)

        return httpx.Response(404, json={"message": f"Cannot {request.method} {path}"})


@pytest.fixture()
def project_record() -> Dict[str, Any]:
    return copy.deepcopy(PROJECT_RECORD)


@pytest.fixture(scope="session")
def api():
    from app.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def backend(project_record):
    from app.main import app

    fake = FakeBackend(projects={project_record["_id"]: project_record})

    async def override(token: Optional[str] = Depends(get_backend_token)):
        async with BackendClient(BACKEND_URL, token=token, transport=httpx.MockTransport(fake.handler)) as client:
            yield client

    app.dependency_overrides[get_backend_client] = override
    try:
        yield fake
    finally:
        app.dependency_overrides.pop(get_backend_client, None)
