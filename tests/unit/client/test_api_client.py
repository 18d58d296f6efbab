# tests/unit/client/test_api_client.py
import json
import uuid
from datetime import datetime, timezone

import httpx
import pytest

from tracker.client.api_client import AssignmentApiClient
from tracker.client.errors import NotFoundError, TransportError
from tracker.models.assignment import AssignmentCreate, AssignmentUpdate

pytestmark = pytest.mark.asyncio

DUE = datetime(2024, 6, 10, 17, 30, tzinfo=timezone.utc)
START = datetime(2024, 6, 3, 9, tzinfo=timezone.utc)

async def test_create_assignment_round_trips_dates(api_client: AssignmentApiClient, fake_backend):
    created = await api_client.create_assignment(
        AssignmentCreate(title="Essay", subject="History", due_date=DUE, start_date=START, priority="high")
    )

    sent = json.loads(fake_backend.requests[-1].content)
    assert sent["due_date"].startswith("2024-06-10T17:30:00")
    assert "id" not in sent and "created_at" not in sent
    assert created.due_date == DUE
    assert created.start_date == START
    assert isinstance(created.created_at, datetime)
    assert created.work_date_ranges == []

async def test_get_assignments_parses_every_date_field(api_client, fake_backend):
    fake_backend.seed_assignment(title="one", start_date="2024-06-01T00:00:00+00:00")
    fake_backend.seed_assignment(title="two")

    assignments = await api_client.get_assignments()

    assert [a.title for a in assignments] == ["two", "one"]
    assert assignments[1].start_date == datetime(2024, 6, 1, tzinfo=timezone.utc)
    assert all(isinstance(a.updated_at, datetime) for a in assignments)

async def test_update_sends_only_set_fields(api_client, fake_backend):
    record = fake_backend.seed_assignment()
    updated = await api_client.update_assignment(uuid.UUID(record["id"]), AssignmentUpdate(completed=True))
    assert json.loads(fake_backend.requests[-1].content) == {"completed": True}
    assert updated.completed is True

async def test_work_range_body_uses_camel_case(api_client, fake_backend):
    record = fake_backend.seed_assignment()
    start = datetime(2024, 6, 5, tzinfo=timezone.utc)
    end = datetime(2024, 6, 8, tzinfo=timezone.utc)

    work_range = await api_client.create_work_range(uuid.UUID(record["id"]), start, end)

    assert set(json.loads(fake_backend.requests[-1].content)) == {"startDate", "endDate"}
    assert work_range.assignment_id == uuid.UUID(record["id"])
    assert (work_range.start_date, work_range.end_date) == (start, end)

async def test_404_raises_not_found_with_server_message(api_client):
    with pytest.raises(NotFoundError) as exc_info:
        await api_client.get_assignment(uuid.uuid4())
    assert exc_info.value.status == 404
    assert exc_info.value.message == "Assignment not found"

async def test_error_body_message_is_surfaced(api_client, fake_backend):
    fake_backend.fail_on("GET", "/assignments", status=500, body={"error": "Failed to fetch assignments"})
    with pytest.raises(TransportError) as exc_info:
        await api_client.get_assignments()
    assert exc_info.value.status == 500
    assert str(exc_info.value) == "Failed to fetch assignments"

async def test_unparseable_error_body_falls_back_to_generic_message(api_client, fake_backend):
    fake_backend.fail_on("GET", "/assignments", status=502, body="<html>Bad gateway</html>")
    with pytest.raises(TransportError) as exc_info:
        await api_client.get_assignments()
    assert exc_info.value.message == "Unknown error"

async def test_network_failure_is_not_retried():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    async with AssignmentApiClient(base_url="http://testserver/api", transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(TransportError) as exc_info:
            await client.get_assignments()

    assert exc_info.value.status is None
    assert len(calls) == 1

async def test_non_json_success_body_raises_transport_error(api_client, fake_backend):
    fake_backend.fail_on("GET", "/assignments", status=200, body="<html>maintenance</html>")
    with pytest.raises(TransportError) as exc_info:
        await api_client.get_assignments()
    assert exc_info.value.status == 200
    assert "Malformed response body" in exc_info.value.message
