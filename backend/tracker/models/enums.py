# tracker/models/enums.py

from enum import Enum

# --- Assignment Related Enums ---

class Priority(str, Enum):
    """Enumeration for assignment priority."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

# Rank used when sorting by priority (higher is more urgent)
PRIORITY_RANK = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}

# --- List View Enums ---

class PriorityFilter(str, Enum):
    """Priority filter for the assignment list. ALL disables priority filtering."""
    ALL = "all"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

class SortField(str, Enum):
    """Fields the assignment list can be sorted by."""
    DUE_DATE = "dueDate"
    PRIORITY = "priority"
    CREATED_AT = "createdAt"

class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

# --- UI Enums ---

class View(str, Enum):
    """Top-level views of the tracker UI."""
    LIST = "list"
    CALENDAR = "calendar"
    ADD = "add"
