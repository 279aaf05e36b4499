"""Data models for weekgrid."""

from weekgrid.models.time_key import (
    Weekday,
    TimeParseError,
    format_time_key,
    parse_time_key,
    parse_day,
    parse_clock_time,
)
from weekgrid.models.proposed_event import ProposedEvent
from weekgrid.models.blocked_time import BlockedTime
from weekgrid.models.scheduled_block import ScheduledBlock
from weekgrid.models.schedule import Schedule, ScheduleSnapshot, ScheduleId

__all__ = [
    "Weekday",
    "TimeParseError",
    "format_time_key",
    "parse_time_key",
    "parse_day",
    "parse_clock_time",
    "ProposedEvent",
    "BlockedTime",
    "ScheduledBlock",
    "Schedule",
    "ScheduleSnapshot",
    "ScheduleId",
]
