"""ScheduledBlock data model for weekgrid."""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from weekgrid.models.constants import DAYS_IN_WEEK
from weekgrid.models.time_key import require_naive


class ScheduledBlock(BaseModel):
    """ScheduledBlock represents an activity placed on the calendar."""

    start: datetime = Field(..., description="Block start time")
    end: datetime = Field(..., description="Block end time")
    activity_name: str = Field(..., description="Name of the placed activity")
    locked: bool = Field(False, description="Whether this block is locked from movement")
    column_index: int = Field(..., ge=0, lt=DAYS_IN_WEEK, description="Grid column (Monday=0)")

    class Config:
        """Pydantic configuration."""
        frozen = True

    @field_validator("start", "end")
    @classmethod
    def _naive_only(cls, value):
        return require_naive(value)

    def overlaps(self, other_start: datetime, other_end: datetime, column_index: Optional[int] = None) -> bool:
        """Inclusive overlap test; when column_index is given, other columns never overlap."""
        if column_index is not None and column_index != self.column_index:
            return False
        return not (other_end < self.start or other_start > self.end)
