# tests/unit/client/test_state.py
from datetime import datetime, timezone

import pytest

from tracker.client.state import TrackerState
from tracker.models.enums import SortOrder, View
from tracker.models.filters import FilterOptions

pytestmark = pytest.mark.asyncio

async def test_defaults(store):
    state = TrackerState(store)
    assert state.current_view == View.LIST
    assert store.filters == FilterOptions()

async def test_leaving_calendar_cancels_drag(store, fake_backend):
    record = fake_backend.seed_assignment()
    await store.load()
    state = TrackerState(store)
    state.set_view(View.CALENDAR)
    state.calendar.select_assignment(store.assignments[0].id)
    state.calendar.pointer_down(datetime(2024, 6, 5, tzinfo=timezone.utc))
    assert state.calendar.is_dragging

    state.set_view("add")

    assert state.current_view == View.ADD
    assert state.calendar.is_dragging is False
    assert str(state.calendar.selected_assignment_id) == record["id"]

async def test_filters_and_sort_toggle_drive_visible_list(store, fake_backend):
    fake_backend.seed_assignment(title="later", due_date="2024-06-25T00:00:00+00:00")
    fake_backend.seed_assignment(title="sooner", due_date="2024-06-10T00:00:00+00:00")
    fake_backend.seed_assignment(title="done", due_date="2024-06-01T00:00:00+00:00", completed=True)
    await store.load()
    state = TrackerState(store)

    state.set_filters(FilterOptions(show_completed=False))
    assert [a.title for a in state.visible_assignments()] == ["sooner", "later"]

    state.toggle_sort_order()
    assert store.filters.sort_order == SortOrder.DESC
    assert [a.title for a in state.visible_assignments()] == ["later", "sooner"]
