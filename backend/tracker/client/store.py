# tracker/client/store.py
"""
Client-side cache of assignments and their work ranges.

The cache only changes after the server confirms a mutation (no optimistic
updates). Every operation clears the previous error first; on failure the
message is recorded in ``error`` and the exception is re-raised. There is
no locking: when two requests for the same assignment race, whichever
response arrives last is what the cache keeps.
"""

import asyncio
import logging
import uuid
from datetime import datetime
from typing import Dict, List, Optional

from tracker.models.assignment import AssignmentCreate, AssignmentUpdate, TrackedAssignment
from tracker.models.filters import FilterOptions
from tracker.models.work_range import WorkDateRange
from .api_client import AssignmentApiClient
from .errors import TrackerError, TransportError
from .projection import project
from .selectors import completion_stats

logger = logging.getLogger(__name__)

class AssignmentStore:
    def __init__(self, client: AssignmentApiClient, filters: Optional[FilterOptions] = None):
        self.client = client
        self.filters = filters or FilterOptions()
        self.loading = False
        self.error: Optional[str] = None
        self._assignments: Dict[uuid.UUID, TrackedAssignment] = {}

    # --- Read side ---

    @property
    def assignments(self) -> List[TrackedAssignment]:
        """All cached assignments in cache order (load order, then creation order)."""
        return list(self._assignments.values())

    def get(self, assignment_id: uuid.UUID) -> Optional[TrackedAssignment]:
        return self._assignments.get(assignment_id)

    def visible(self) -> List[TrackedAssignment]:
        """The cache projected through the current filters."""
        return project(self.assignments, self.filters)

    def stats(self):
        return completion_stats(self.assignments)

    def dismiss_error(self) -> None:
        self.error = None

    def _record_failure(self, action: str, exc: Exception) -> None:
        message = str(exc) if isinstance(exc, TrackerError) else f"Failed to {action}"
        logger.error(f"Error trying to {action}: {exc}")
        self.error = message

    # --- Loading ---

    async def _load_ranges(self, assignment: TrackedAssignment) -> List[WorkDateRange]:
        try:
            return await self.client.get_work_ranges(assignment.id)
        except TransportError as e:
            # One assignment's ranges failing should not fail the whole load
            logger.error(f"Error loading work ranges for assignment {assignment.id}: {e}")
            return []

    async def load(self) -> None:
        """Fetch every assignment, then each one's work ranges, and replace the cache."""
        self.loading = True
        self.error = None
        try:
            fetched = await self.client.get_assignments()
            ranges = await asyncio.gather(*(self._load_ranges(a) for a in fetched))
            self._assignments = {
                a.id: a.model_copy(update={"work_date_ranges": r})
                for a, r in zip(fetched, ranges)
            }
            logger.info(f"Loaded {len(self._assignments)} assignment(s)")
        except Exception as e:
            self._record_failure("load assignments", e)
            raise
        finally:
            self.loading = False

    async def retry(self) -> None:
        """Manual retry from the error banner: a full reload."""
        await self.load()

    # --- Assignment mutations ---

    async def add(self, assignment_in: AssignmentCreate) -> TrackedAssignment:
        self.error = None
        try:
            created = await self.client.create_assignment(assignment_in)
        except Exception as e:
            self._record_failure("create assignment", e)
            raise
        self._assignments[created.id] = created
        return created

    async def update(self, assignment_id: uuid.UUID, patch: AssignmentUpdate) -> TrackedAssignment:
        """
        Send a partial update and replace the cached entry with the server's copy.

        The server does not return work ranges, so the previously cached ranges
        are carried over onto the replacement.
        """
        self.error = None
        try:
            updated = await self.client.update_assignment(assignment_id, patch)
        except Exception as e:
            self._record_failure("update assignment", e)
            raise
        previous = self._assignments.get(assignment_id)
        if previous is not None:
            updated = updated.model_copy(update={"work_date_ranges": list(previous.work_date_ranges)})
            self._assignments[assignment_id] = updated
        return updated

    async def remove(self, assignment_id: uuid.UUID) -> None:
        self.error = None
        try:
            await self.client.delete_assignment(assignment_id)
        except Exception as e:
            self._record_failure("delete assignment", e)
            raise
        # Its work ranges go with it
        self._assignments.pop(assignment_id, None)

    async def toggle_completion(self, assignment_id: uuid.UUID) -> Optional[TrackedAssignment]:
        current = self._assignments.get(assignment_id)
        if current is None:
            return None
        return await self.update(assignment_id, AssignmentUpdate(completed=not current.completed))

    # --- Work range mutations ---

    async def add_work_range(self, assignment_id: uuid.UUID, start_date: datetime, end_date: datetime) -> WorkDateRange:
        self.error = None
        try:
            new_range = await self.client.create_work_range(assignment_id, start_date, end_date)
        except Exception as e:
            self._record_failure("create work date range", e)
            raise
        current = self._assignments.get(assignment_id)
        if current is not None:
            self._assignments[assignment_id] = current.model_copy(
                update={"work_date_ranges": [*current.work_date_ranges, new_range]}
            )
        return new_range

    async def remove_work_range(self, assignment_id: uuid.UUID, range_id: uuid.UUID) -> None:
        self.error = None
        try:
            await self.client.delete_work_range(range_id)
        except Exception as e:
            self._record_failure("delete work date range", e)
            raise
        current = self._assignments.get(assignment_id)
        if current is not None:
            self._assignments[assignment_id] = current.model_copy(
                update={"work_date_ranges": [r for r in current.work_date_ranges if r.id != range_id]}
            )
