# tracker/models/filters.py
from pydantic import BaseModel, Field, ConfigDict

from .enums import PriorityFilter, SortField, SortOrder

class FilterOptions(BaseModel):
    """Filter and sort configuration for the assignment list."""
    show_completed: bool = Field(default=True, description="Include completed assignments")
    priority: PriorityFilter = Field(default=PriorityFilter.ALL, validate_default=True)
    subject: str = Field(default="", description="Case-insensitive substring match on subject; empty matches all")
    sort_by: SortField = Field(default=SortField.DUE_DATE, validate_default=True)
    sort_order: SortOrder = Field(default=SortOrder.ASC, validate_default=True)

    model_config = ConfigDict(
        use_enum_values=True,
        frozen=True,
    )

    def toggled_order(self) -> "FilterOptions":
        """Same filters with the sort direction flipped."""
        new_order = SortOrder.DESC if self.sort_order == SortOrder.ASC else SortOrder.ASC
        return self.model_copy(update={"sort_order": new_order.value})
