"""BlockedTime data model for weekgrid."""

from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from weekgrid.models.constants import DEFAULT_BLOCKED_DESCRIPTION, DAYS_IN_WEEK
from weekgrid.models.time_key import require_naive


class BlockedTime(BaseModel):
    """A user-blocked period on one grid column.

    end >= start is enforced by callers (see engine.block_off), not here.
    """

    start: datetime = Field(..., description="Blocked period start")
    end: datetime = Field(..., description="Blocked period end")
    description: str = Field(DEFAULT_BLOCKED_DESCRIPTION, description="Why the time is blocked")
    column_index: int = Field(..., ge=0, lt=DAYS_IN_WEEK, description="Grid column (Monday=0)")

    class Config:
        """Pydantic configuration."""
        frozen = True

    @field_validator("start", "end")
    @classmethod
    def _naive_only(cls, value):
        return require_naive(value)

    @field_validator("description", mode="before")
    @classmethod
    def _default_description(cls, value):
        if value is None or value == "":
            return DEFAULT_BLOCKED_DESCRIPTION
        return value

    def overlaps(self, other_start: datetime, other_end: datetime) -> bool:
        """Inclusive overlap: touching intervals count as overlapping."""
        return not (other_end < self.start or other_start > self.end)
