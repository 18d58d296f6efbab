# tracker/client/calendar.py
"""
Drag-to-select interaction on the calendar.

States are ``Idle`` and ``Dragging(anchor, current)``. A pointer-down on a
day cell starts a drag, pointer-enter moves its free end, and pointer-up
commits the normalized span as a work range for the selected assignment.
Single-day spans are discarded. The machine is back to Idle as soon as
pointer-up returns; the range request runs in the background and its
failure is reported through the store's error state.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Set, Union

from tracker.models.assignment import TrackedAssignment
from .dates import is_same_day, is_within_interval, normalize_range, start_of_day
from .selectors import assignments_for_date, work_range_assignments_for_date
from .store import AssignmentStore

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Idle:
    pass

@dataclass(frozen=True)
class Dragging:
    anchor: datetime
    current: datetime

    def span(self):
        return normalize_range(self.anchor, self.current)

IDLE = Idle()

GestureState = Union[Idle, Dragging]

class CalendarInteraction:
    def __init__(self, store: AssignmentStore, selected_date: Optional[datetime] = None):
        self.store = store
        self.state: GestureState = IDLE
        self.selected_assignment_id: Optional[uuid.UUID] = None
        self.selected_date = start_of_day(selected_date) if selected_date is not None else None
        self._pending: Set[asyncio.Task] = set()

    @property
    def selected_assignment(self) -> Optional[TrackedAssignment]:
        if self.selected_assignment_id is None:
            return None
        return self.store.get(self.selected_assignment_id)

    @property
    def is_dragging(self) -> bool:
        return isinstance(self.state, Dragging)

    def select_assignment(self, assignment_id: Optional[uuid.UUID]) -> None:
        """Change the assignment being planned. An in-progress drag is cancelled."""
        if assignment_id != self.selected_assignment_id and self.is_dragging:
            logger.info(f"Selection changed to {assignment_id} mid-drag; cancelling gesture")
            self.cancel()
        self.selected_assignment_id = assignment_id

    def select_date(self, day: datetime) -> None:
        self.selected_date = start_of_day(day)

    def cancel(self) -> None:
        self.state = IDLE

    # --- Pointer events ---

    def pointer_down(self, day: datetime) -> None:
        if self.selected_assignment_id is None:
            return
        cell = start_of_day(day)
        self.state = Dragging(anchor=cell, current=cell)

    def pointer_enter(self, day: datetime) -> None:
        if not isinstance(self.state, Dragging):
            return
        self.state = Dragging(anchor=self.state.anchor, current=start_of_day(day))

    def pointer_up(self) -> Optional[asyncio.Task]:
        """
        Commit the drag. Returns the background task adding the work range,
        or None when nothing was emitted (not dragging, no selection, or a
        single-day span).
        """
        state, self.state = self.state, IDLE
        if not isinstance(state, Dragging) or self.selected_assignment_id is None:
            return None

        start, end = state.span()
        if is_same_day(start, end):
            return None

        assignment_id = self.selected_assignment_id
        logger.info(f"Committing work range {start.date()} - {end.date()} for assignment {assignment_id}")
        task = asyncio.create_task(self.store.add_work_range(assignment_id, start, end))
        self._pending.add(task)
        task.add_done_callback(self._on_commit_done)
        return task

    def _on_commit_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            # Already recorded in store.error; retrieving it here keeps asyncio quiet
            logger.warning(f"Work range request failed: {exc}")

    # --- Derived queries ---

    def is_in_drag_selection(self, day: datetime) -> bool:
        if not isinstance(self.state, Dragging):
            return False
        start, end = self.state.span()
        return is_within_interval(start_of_day(day), start, end)

    def day_markers(self, day: datetime) -> Dict[str, List[TrackedAssignment]]:
        """What a day cell shows: due dates, start dates and work periods."""
        assignments = self.store.assignments
        on_day = assignments_for_date(assignments, day)
        return {
            "due": [a for a in on_day if is_same_day(a.due_date, day)],
            "start": [a for a in on_day if a.start_date is not None and is_same_day(a.start_date, day)],
            "work": work_range_assignments_for_date(assignments, day),
        }

    def assignments_for_selected_date(self) -> List[TrackedAssignment]:
        if self.selected_date is None:
            return []
        return assignments_for_date(self.store.assignments, self.selected_date)

    async def remove_work_range(self, range_id: uuid.UUID) -> None:
        """Delete one of the selected assignment's work ranges."""
        if self.selected_assignment_id is None:
            return
        await self.store.remove_work_range(self.selected_assignment_id, range_id)
