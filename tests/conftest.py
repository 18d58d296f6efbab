# tests/conftest.py
import itertools
import json
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, AsyncGenerator, Dict, List, Optional, Tuple

import httpx
import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from fastapi import FastAPI
from pytest_mock import MockerFixture

from tracker.client.api_client import AssignmentApiClient
from tracker.client.store import AssignmentStore

logger = logging.getLogger(__name__)

TEST_BASE_URL = "http://testserver/api"

# --- App fixture ---

@pytest_asyncio.fixture(scope="function")
async def app(mocker: MockerFixture) -> AsyncGenerator[FastAPI, None]:
    """FastAPI app with the database lifecycle mocked out; CRUD calls are patched per test."""
    mocker.patch("tracker.main.connect_to_mongo", return_value=True)
    mocker.patch("tracker.main.close_mongo_connection", return_value=None)
    mocker.patch("tracker.main.ensure_indexes", return_value=None)

    from tracker.main import app as fastapi_app

    async with LifespanManager(fastapi_app, startup_timeout=15, shutdown_timeout=15):
        yield fastapi_app


@pytest_asyncio.fixture(scope="function")
async def http_client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testserver") as client:
        yield client


# --- In-memory REST backend for client-side tests ---

class FakeTrackerBackend:
    """
    Serves the tracker REST surface from dicts through httpx.MockTransport.
    Wire shapes match the FastAPI service: snake_case JSON, ISO timestamps.
    """

    def __init__(self):
        self.assignments: Dict[str, Dict[str, Any]] = {}
        self.ranges: Dict[str, Dict[str, Any]] = {}
        self.requests: List[httpx.Request] = []
        self._failures: Dict[Tuple[str, str], Tuple[int, Any]] = {}
        self._clock = itertools.count()
        self._epoch = datetime(2024, 6, 1, tzinfo=timezone.utc)

    def _now(self) -> str:
        return (self._epoch + timedelta(seconds=next(self._clock))).isoformat()

    def fail_on(self, method: str, path: str, status: int = 500, body: Any = None) -> None:
        """Make ``method path`` answer ``status``; body may be a dict or raw text."""
        self._failures[(method, f"/api{path}")] = (status, {"error": "boom"} if body is None else body)

    def seed_assignment(self, **fields) -> Dict[str, Any]:
        now = self._now()
        record = {
            "id": str(uuid.uuid4()),
            "title": "Essay",
            "subject": "History",
            "description": None,
            "due_date": "2024-06-20T00:00:00+00:00",
            "start_date": None,
            "priority": "medium",
            "completed": False,
            "created_at": now,
            "updated_at": now,
        }
        record.update(fields)
        self.assignments[record["id"]] = record
        return record

    def seed_range(self, assignment_id: str, start_date: str, end_date: str) -> Dict[str, Any]:
        record = {"id": str(uuid.uuid4()), "assignment_id": assignment_id, "start_date": start_date, "end_date": end_date}
        self.ranges[record["id"]] = record
        return record

    def ranges_for(self, assignment_id: str) -> List[Dict[str, Any]]:
        found = [r for r in self.ranges.values() if r["assignment_id"] == assignment_id]
        return sorted(found, key=lambda r: r["start_date"])

    @staticmethod
    def _error(status: int, message: str) -> httpx.Response:
        return httpx.Response(status, json={"error": message})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        failure = self._failures.get((request.method, path))
        if failure is not None:
            status, body = failure
            if isinstance(body, (dict, list)):
                return httpx.Response(status, json=body)
            return httpx.Response(status, text=str(body))

        parts = path.removeprefix("/api/").split("/")
        payload = None
        if request.content:
            payload = json.loads(request.content)

        if parts == ["assignments"]:
            if request.method == "GET":
                items = sorted(self.assignments.values(), key=lambda a: a["created_at"], reverse=True)
                return httpx.Response(200, json=items)
            if request.method == "POST":
                record = self.seed_assignment(**payload)
                return httpx.Response(201, json=record)
        elif len(parts) == 2 and parts[0] == "assignments":
            record = self.assignments.get(parts[1])
            if record is None:
                return self._error(404, "Assignment not found")
            if request.method == "GET":
                return httpx.Response(200, json=record)
            if request.method == "PUT":
                record.update(payload)
                record["updated_at"] = self._now()
                return httpx.Response(200, json=record)
            if request.method == "DELETE":
                del self.assignments[parts[1]]
                for range_id in [r["id"] for r in self.ranges_for(parts[1])]:
                    del self.ranges[range_id]
                return httpx.Response(200, json={"success": True})
        elif len(parts) == 3 and parts[0] == "assignments" and parts[2] == "work-ranges":
            if request.method == "GET":
                return httpx.Response(200, json=self.ranges_for(parts[1]))
            if request.method == "POST":
                if parts[1] not in self.assignments:
                    return self._error(404, "Assignment not found")
                record = self.seed_range(parts[1], payload["startDate"], payload["endDate"])
                return httpx.Response(201, json=record)
        elif len(parts) == 2 and parts[0] == "work-ranges" and request.method == "DELETE":
            if self.ranges.pop(parts[1], None) is None:
                return self._error(404, "Work date range not found")
            return httpx.Response(200, json={"success": True})

        return self._error(405, "Method Not Allowed")


@pytest.fixture
def fake_backend() -> FakeTrackerBackend:
    return FakeTrackerBackend()


@pytest_asyncio.fixture
async def api_client(fake_backend: FakeTrackerBackend) -> AsyncGenerator[AssignmentApiClient, None]:
    async with AssignmentApiClient(base_url=TEST_BASE_URL, transport=httpx.MockTransport(fake_backend.handler)) as client:
        yield client


@pytest.fixture
def store(api_client: AssignmentApiClient) -> AssignmentStore:
    return AssignmentStore(api_client)
