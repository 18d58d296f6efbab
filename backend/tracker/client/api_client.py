# tracker/client/api_client.py
"""
Remote sync client for the assignment tracker REST API.

Maps domain operations onto HTTP calls and back:
- dates are sent as ISO-8601 strings and parsed back into aware datetimes
  on every response, list or single object.
- non-2xx responses become TransportError (NotFoundError for 404) carrying
  the status and the server's ``error`` message.
- nothing is retried; a failed call surfaces immediately.
"""

import logging
import uuid
from datetime import datetime
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from tracker.core.config import settings
from tracker.models.assignment import AssignmentCreate, AssignmentUpdate, TrackedAssignment
from tracker.models.work_range import WorkDateRange, WorkDateRangeCreate
from .errors import TransportError, NotFoundError

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "Unknown error"
REQUEST_FAILED_MESSAGE = "Request failed"


def _error_message(response: httpx.Response) -> str:
    """Server-supplied message from an error body, with generic fallbacks."""
    try:
        body = response.json()
    except ValueError:
        return UNKNOWN_ERROR_MESSAGE
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return REQUEST_FAILED_MESSAGE


def _handle_response(response: httpx.Response) -> Any:
    if response.is_success:
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(response.status_code, f"Malformed response body: {e}") from e
    message = _error_message(response)
    logger.warning(f"{response.request.method} {response.request.url} failed with {response.status_code}: {message}")
    if response.status_code == 404:
        raise NotFoundError(message)
    raise TransportError(response.status_code, message)


class AssignmentApiClient:
    """Async client for the assignment and work-range endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.TRACKER_API_URL).rstrip("/")
        client_kwargs = {"base_url": self.base_url}
        timeout = timeout if timeout is not None else settings.CLIENT_TIMEOUT_SECONDS
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        if transport is not None:
            client_kwargs["transport"] = transport
        self._client = httpx.AsyncClient(**client_kwargs)

    async def __aenter__(self) -> "AssignmentApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, json: Any = None) -> Any:
        logger.debug(f"{method} {path}")
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.RequestError as e:
            raise TransportError(None, f"Network error during {method} {path}: {e}") from e
        return _handle_response(response)

    @staticmethod
    def _parse(model, data: Any):
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise TransportError(None, f"Malformed {model.__name__} in response: {e}") from e

    # --- Assignments ---

    async def get_assignments(self) -> List[TrackedAssignment]:
        """All assignments, newest first. Work ranges are loaded separately."""
        data = await self._request("GET", "/assignments")
        return [self._parse(TrackedAssignment, item) for item in data]

    async def get_assignment(self, assignment_id: uuid.UUID) -> TrackedAssignment:
        data = await self._request("GET", f"/assignments/{assignment_id}")
        return self._parse(TrackedAssignment, data)

    async def create_assignment(self, assignment_in: AssignmentCreate) -> TrackedAssignment:
        data = await self._request("POST", "/assignments", json=assignment_in.model_dump(mode="json"))
        return self._parse(TrackedAssignment, data)

    async def update_assignment(self, assignment_id: uuid.UUID, patch: AssignmentUpdate) -> TrackedAssignment:
        # Only fields the caller set are sent; an explicit None clears the field
        body = patch.model_dump(mode="json", exclude_unset=True)
        data = await self._request("PUT", f"/assignments/{assignment_id}", json=body)
        return self._parse(TrackedAssignment, data)

    async def delete_assignment(self, assignment_id: uuid.UUID) -> None:
        await self._request("DELETE", f"/assignments/{assignment_id}")

    # --- Work date ranges ---

    async def get_work_ranges(self, assignment_id: uuid.UUID) -> List[WorkDateRange]:
        data = await self._request("GET", f"/assignments/{assignment_id}/work-ranges")
        return [self._parse(WorkDateRange, item) for item in data]

    async def create_work_range(self, assignment_id: uuid.UUID, start_date: datetime, end_date: datetime) -> WorkDateRange:
        wire = WorkDateRangeCreate(start_date=start_date, end_date=end_date).model_dump(mode="json")
        body = {"startDate": wire["start_date"], "endDate": wire["end_date"]}
        data = await self._request("POST", f"/assignments/{assignment_id}/work-ranges", json=body)
        return self._parse(WorkDateRange, data)

    async def delete_work_range(self, range_id: uuid.UUID) -> None:
        await self._request("DELETE", f"/work-ranges/{range_id}")
