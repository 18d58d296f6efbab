# tracker/client/validation.py
from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field, ConfigDict, field_validator

from tracker.models.assignment import AssignmentCreate, START_BEFORE_DUE_MESSAGE
from tracker.models.enums import Priority
from tracker.models.work_range import ensure_utc
from .dates import start_of_day
from .errors import ValidationError

class AssignmentForm(BaseModel):
    """Raw values of the new-assignment form, before trimming and checks."""
    title: str = ""
    description: str = ""
    subject: str = ""
    due_date: Optional[datetime] = None
    start_date: Optional[datetime] = None
    priority: Priority = Field(default=Priority.MEDIUM, validate_default=True)
    completed: bool = False

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("due_date", "start_date")
    @classmethod
    def _coerce_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value) if value is not None else value

def validate_assignment_form(form: AssignmentForm, today: datetime) -> Dict[str, str]:
    """Returns a field -> message map; empty when the form is valid."""
    errors: Dict[str, str] = {}

    if not form.title.strip():
        errors["title"] = "Title is required"

    if not form.subject.strip():
        errors["subject"] = "Subject is required"

    if form.due_date is None:
        errors["due_date"] = "Due date is required"
    elif form.due_date < start_of_day(ensure_utc(today)):
        errors["due_date"] = "Due date cannot be in the past"

    if form.start_date is not None and form.due_date is not None and form.start_date >= form.due_date:
        errors["start_date"] = START_BEFORE_DUE_MESSAGE

    return errors

def build_assignment_input(form: AssignmentForm, today: datetime) -> AssignmentCreate:
    """Validates ``form`` and returns the trimmed creation payload, or raises ValidationError."""
    errors = validate_assignment_form(form, today)
    if errors:
        raise ValidationError(errors)
    return AssignmentCreate(
        title=form.title.strip(),
        description=form.description.strip() or None,
        subject=form.subject.strip(),
        due_date=form.due_date,
        start_date=form.start_date,
        priority=form.priority,
        completed=form.completed,
    )
