# tracker/models/assignment.py
from pydantic import BaseModel, Field, ConfigDict, AliasChoices, field_validator, model_validator
from typing import Optional, List
from datetime import datetime, timezone
import uuid

from .enums import Priority
from .work_range import WorkDateRange, ensure_utc

START_BEFORE_DUE_MESSAGE = "Start date must be before due date"

# Shared base properties
class AssignmentBase(BaseModel):
    title: str = Field(..., min_length=1, description="Title of the assignment")
    subject: str = Field(..., min_length=1, description="Subject or course the assignment belongs to")
    description: Optional[str] = Field(default=None, description="Optional free-text description")
    due_date: datetime = Field(..., description="When the assignment is due")
    start_date: Optional[datetime] = Field(default=None, description="Optional planned start; must be before the due date")
    priority: Priority = Field(default=Priority.MEDIUM, validate_default=True, description="low, medium or high")
    completed: bool = Field(default=False, description="Completion flag")

    model_config = ConfigDict(
        use_enum_values=True,
        from_attributes=True,
        populate_by_name=True,
    )

    @field_validator("due_date", "start_date")
    @classmethod
    def _coerce_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value) if value is not None else value

# Properties required on creation
class AssignmentCreate(AssignmentBase):
    # id and timestamps are set by the backend

    @model_validator(mode="after")
    def _check_start_before_due(self):
        if self.start_date is not None and self.start_date >= self.due_date:
            raise ValueError(START_BEFORE_DUE_MESSAGE)
        return self

# Properties stored in DB
class AssignmentInDBBase(AssignmentBase):
    # 'id' on the wire, '_id' in MongoDB
    id: uuid.UUID = Field(default_factory=uuid.uuid4, validation_alias=AliasChoices("id", "_id"), description="Internal unique identifier")

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Timestamp when the assignment record was created")
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Timestamp when the assignment record was last updated")

    model_config = ConfigDict(
        use_enum_values=True,
        populate_by_name=True,
        from_attributes=True,
        arbitrary_types_allowed=True
    )

    @field_validator("created_at", "updated_at")
    @classmethod
    def _coerce_timestamps_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

# Final model representing an Assignment read from DB
class Assignment(AssignmentInDBBase):
    pass

# Client-side cached assignment: the server model plus its work periods
class TrackedAssignment(Assignment):
    work_date_ranges: List[WorkDateRange] = Field(default_factory=list, description="Work periods owned by this assignment")

# Model for updating - every field optional, only fields explicitly set are sent/applied
class AssignmentUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    subject: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    start_date: Optional[datetime] = None
    priority: Optional[Priority] = None
    completed: Optional[bool] = None

    model_config = ConfigDict(
        use_enum_values=True,
    )

    @field_validator("due_date", "start_date")
    @classmethod
    def _coerce_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value) if value is not None else value

    # Only description and start_date may be cleared with an explicit null
    @field_validator("title", "subject", "due_date", "priority", "completed")
    @classmethod
    def _reject_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value

    def apply_to(self, assignment: Assignment) -> Assignment:
        """Return a copy of ``assignment`` with the explicitly set fields merged in."""
        return assignment.model_copy(update=self.model_dump(exclude_unset=True))
