# tracker/client/state.py
from datetime import datetime
from typing import List, Optional

from tracker.models.assignment import TrackedAssignment
from tracker.models.enums import View
from tracker.models.filters import FilterOptions
from .calendar import CalendarInteraction
from .store import AssignmentStore

class TrackerState:
    """
    UI state passed through the presentation layer: which view is showing,
    the list filters (held by the store) and the calendar interaction.
    """

    def __init__(self, store: AssignmentStore, today: Optional[datetime] = None):
        self.store = store
        self.current_view: View = View.LIST
        self.calendar = CalendarInteraction(store, selected_date=today)

    def set_view(self, view: View) -> None:
        if view != View.CALENDAR:
            # Leaving the calendar abandons any drag in progress
            self.calendar.cancel()
        self.current_view = View(view)

    def set_filters(self, filters: FilterOptions) -> None:
        self.store.filters = filters

    def toggle_sort_order(self) -> None:
        self.store.filters = self.store.filters.toggled_order()

    def visible_assignments(self) -> List[TrackedAssignment]:
        return self.store.visible()
