"""Block-off-time use case for weekgrid.

Validates a requested blocked interval, clears unlocked activities underneath
it, and saves the updated schedule. Failures are returned, not raised.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from weekgrid.database.store import ScheduleStore
from weekgrid.models.blocked_time import BlockedTime
from weekgrid.models.constants import DAYS_IN_WEEK
from weekgrid.models.schedule import Schedule, ScheduleId

logger = logging.getLogger(__name__)

SCHEDULE_NOT_FOUND = "Schedule not found."
INVALID_TIME_RANGE = "Invalid time range."
TIMEZONE_NOT_SUPPORTED = "Times must be local, without a timezone offset."
INVALID_COLUMN = "Invalid day column."
OVERLAPS_BLOCKED = "The selected time overlaps with an existing blocked period."
BLOCKED_OK = "Time successfully blocked."


@dataclass(frozen=True)
class BlockOffResult:
    """Typed outcome of a block-off request."""
    success: bool
    message: str
    blocked_times: List[BlockedTime] = field(default_factory=list)
    schedule: Optional[Schedule] = None


def _fail(message: str) -> BlockOffResult:
    return BlockOffResult(success=False, message=message)


def block_off_time(
    store: ScheduleStore,
    schedule_id: ScheduleId,
    start: datetime,
    end: datetime,
    description: str = "",
    column_index: int = 0,
) -> BlockOffResult:
    """Block [start, end] on a day column of a stored schedule.

    Returns:
        BlockOffResult; on success it carries the saved schedule and its blocked times
    """
    existing = store.get(schedule_id)
    if existing is None:
        return _fail(SCHEDULE_NOT_FOUND)
    if start.utcoffset() is not None or end.utcoffset() is not None:
        return _fail(TIMEZONE_NOT_SUPPORTED)
    if end <= start:
        return _fail(INVALID_TIME_RANGE)
    if not 0 <= column_index < DAYS_IN_WEEK:
        return _fail(INVALID_COLUMN)
    if existing.overlaps_with_existing_blocks(start, end, column_index):
        return _fail(OVERLAPS_BLOCKED)

    schedule = existing.copy()
    schedule.remove_overlapping_activities(start, end, column_index)
    schedule.add_blocked_time(BlockedTime(
        start=start,
        end=end,
        description=description,
        column_index=column_index,
    ))
    store.put(schedule)
    logger.info(f"Blocked {start:%a %H:%M}-{end:%H:%M} (column {column_index}) on schedule {schedule_id}")
    return BlockOffResult(
        success=True,
        message=BLOCKED_OK,
        blocked_times=schedule.blocked_times,
        schedule=schedule,
    )
