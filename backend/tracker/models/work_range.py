# tracker/models/work_range.py
from pydantic import BaseModel, Field, ConfigDict, AliasChoices, field_validator, model_validator
from datetime import datetime, timezone
import uuid

def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so stored and parsed values stay comparable."""
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value

# Shared base properties
class WorkDateRangeBase(BaseModel):
    # Request bodies send camelCase (startDate/endDate); DB documents and responses use snake_case
    start_date: datetime = Field(..., validation_alias=AliasChoices("start_date", "startDate"), description="First day of the work period (inclusive)")
    end_date: datetime = Field(..., validation_alias=AliasChoices("end_date", "endDate"), description="Last day of the work period (inclusive)")

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )

    @field_validator("start_date", "end_date")
    @classmethod
    def _coerce_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    @model_validator(mode="after")
    def _check_order(self):
        if self.start_date > self.end_date:
            raise ValueError("Start date must not be after end date")
        return self

# Properties required on creation (assignment_id comes from the URL)
class WorkDateRangeCreate(WorkDateRangeBase):
    pass

# Final model representing a WorkDateRange read from DB
class WorkDateRange(WorkDateRangeBase):
    # 'id' on the wire, '_id' in MongoDB
    id: uuid.UUID = Field(default_factory=uuid.uuid4, validation_alias=AliasChoices("id", "_id"), description="Internal unique identifier")
    assignment_id: uuid.UUID = Field(..., validation_alias=AliasChoices("assignment_id", "assignmentId"), description="ID of the owning assignment")

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
        arbitrary_types_allowed=True
    )
