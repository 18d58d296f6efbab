# tracker/client/selectors.py
"""
Date-derived views over assignments: overdue and due-soon flags, the
upcoming and overdue panels, per-day calendar membership and completion
stats. All functions are pure and take ``now``/``day`` explicitly.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Union

from tracker.core.config import settings
from tracker.models.assignment import Assignment, TrackedAssignment
from .dates import add_days, is_after, is_before, is_same_day, is_within_interval, start_of_day

def is_overdue(assignment: Assignment, now: datetime) -> bool:
    return not assignment.completed and is_before(assignment.due_date, now)

def is_due_soon(assignment: Assignment, now: datetime, days: Optional[int] = None) -> bool:
    days = settings.DUE_SOON_DAYS if days is None else days
    return not assignment.completed and is_before(assignment.due_date, add_days(now, days))

def is_started(assignment: Assignment, now: datetime) -> bool:
    return assignment.start_date is not None and is_before(assignment.start_date, now)

def overdue(assignments: Iterable[Assignment], now: datetime) -> List[Assignment]:
    """Incomplete assignments past their due date, earliest due first."""
    return sorted((a for a in assignments if is_overdue(a, now)), key=lambda a: a.due_date)

def upcoming(
    assignments: Iterable[Assignment],
    now: datetime,
    days: Optional[int] = None,
    limit: Optional[int] = None,
) -> List[Assignment]:
    """Incomplete assignments due within the next ``days`` days, earliest first, at most ``limit``."""
    days = settings.UPCOMING_DAYS if days is None else days
    limit = settings.UPCOMING_LIMIT if limit is None else limit
    horizon = add_days(now, days)
    due_next = [
        a for a in assignments
        if not a.completed and is_after(a.due_date, now) and is_before(a.due_date, horizon)
    ]
    return sorted(due_next, key=lambda a: a.due_date)[:limit]

def assignments_for_date(assignments: Iterable[Assignment], day: datetime) -> List[Assignment]:
    """Assignments that are due or start on ``day``."""
    return [
        a for a in assignments
        if is_same_day(a.due_date, day) or (a.start_date is not None and is_same_day(a.start_date, day))
    ]

def is_date_in_work_range(day: datetime, assignment: TrackedAssignment) -> bool:
    cell = start_of_day(day)
    return any(
        is_within_interval(cell, start_of_day(r.start_date), start_of_day(r.end_date))
        for r in assignment.work_date_ranges
    )

def work_range_assignments_for_date(assignments: Iterable[TrackedAssignment], day: datetime) -> List[TrackedAssignment]:
    """Assignments with a planned work period covering ``day``."""
    return [a for a in assignments if is_date_in_work_range(day, a)]

def completion_stats(assignments: Iterable[Assignment]) -> Dict[str, Union[int, float]]:
    """Totals shown in the sidebar: count, completed count and completion percentage."""
    items = list(assignments)
    total = len(items)
    completed = sum(1 for a in items if a.completed)
    rate = (completed / total) * 100 if total else 0.0
    return {"total": total, "completed": completed, "completion_rate": rate}
