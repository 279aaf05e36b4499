"""ProposedEvent data model for weekgrid."""

from datetime import time
from pydantic import BaseModel, Field, field_validator

from weekgrid.models.time_key import Weekday, parse_clock_time, parse_day, format_time_key


class ProposedEvent(BaseModel):
    """An event proposed upstream, waiting to be placed on the weekly grid."""

    day: Weekday = Field(..., description="Requested day of week")
    start_time: time = Field(..., description="Requested start time (HH:MM[:SS])")
    duration_minutes: int = Field(..., ge=0, description="Duration in minutes")
    name: str = Field(..., description="Activity name")
    locked: bool = Field(False, description="Locked events are placed verbatim")

    class Config:
        """Pydantic configuration."""
        frozen = True

    @field_validator("day", mode="before")
    @classmethod
    def _parse_day(cls, value):
        if isinstance(value, str) and not isinstance(value, Weekday):
            return parse_day(value) or value
        return value

    @field_validator("start_time", mode="before")
    @classmethod
    def _parse_start_time(cls, value):
        if isinstance(value, str):
            return parse_clock_time(value)
        return value

    @property
    def column_index(self) -> int:
        return self.day.column_index

    @property
    def time_key(self) -> str:
        return format_time_key(self.day, self.start_time)
