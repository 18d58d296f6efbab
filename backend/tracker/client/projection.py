# tracker/client/projection.py
"""Filtered, sorted view of the cached assignments."""

from typing import Callable, Dict, Iterable, List

from tracker.models.assignment import Assignment
from tracker.models.enums import PRIORITY_RANK, PriorityFilter, SortField, SortOrder
from tracker.models.filters import FilterOptions

SORT_KEYS: Dict[str, Callable[[Assignment], object]] = {
    SortField.DUE_DATE: lambda a: a.due_date,
    SortField.PRIORITY: lambda a: PRIORITY_RANK[a.priority],
    SortField.CREATED_AT: lambda a: a.created_at,
}

def _matches(assignment: Assignment, filters: FilterOptions) -> bool:
    if not filters.show_completed and assignment.completed:
        return False
    if filters.priority != PriorityFilter.ALL and assignment.priority != filters.priority:
        return False
    if filters.subject and filters.subject.lower() not in assignment.subject.lower():
        return False
    return True

def project(assignments: Iterable[Assignment], filters: FilterOptions) -> List[Assignment]:
    """
    Filter then sort ``assignments`` according to ``filters``.

    Returns a new list; the input is left untouched. The sort is stable in
    both directions, so items with equal keys keep their input order.
    """
    selected = [a for a in assignments if _matches(a, filters)]
    return sorted(
        selected,
        key=SORT_KEYS[filters.sort_by],
        reverse=filters.sort_order == SortOrder.DESC,
    )
