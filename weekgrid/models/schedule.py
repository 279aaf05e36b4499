"""Schedule aggregate for weekgrid.

The Schedule holds placed blocks, blocked intervals, the time-key -> activity map
and the set of locked time keys. It is populated by the placement engine and
superseded, never edited in place, on every lock/regenerate cycle.
"""

import math
from datetime import datetime, time
from typing import Dict, Iterable, List, Optional, Set, Union

from pydantic import BaseModel, Field

from weekgrid.models.blocked_time import BlockedTime
from weekgrid.models.constants import DEFAULT_SCHEDULE_TYPE
from weekgrid.models.scheduled_block import ScheduledBlock
from weekgrid.models.time_key import format_time_key, parse_time_key, time_key_sort_key

ScheduleId = Union[int, str]


class ScheduleSnapshot(BaseModel):
    """Serializable view of a Schedule (API responses and persistence)."""

    schedule_id: ScheduleId = Field(..., description="Schedule identifier")
    schedule_type: str = Field(DEFAULT_SCHEDULE_TYPE, description="'day' or 'week'")
    activities: Dict[str, str] = Field(default_factory=dict, description="Time key -> activity name, in insertion order")
    locked_slot_keys: List[str] = Field(default_factory=list, description="Pinned time keys, in grid order")
    locked_blocks: List[ScheduledBlock] = Field(default_factory=list)
    unlocked_blocks: List[ScheduledBlock] = Field(default_factory=list)
    blocked_times: List[BlockedTime] = Field(default_factory=list)
    unplaced_activities: List[str] = Field(default_factory=list, description="Names the engine could not place")


class Schedule:
    """Mutable weekly schedule."""

    def __init__(self, schedule_id: ScheduleId = 0, schedule_type: str = DEFAULT_SCHEDULE_TYPE):
        self.schedule_id = schedule_id
        self.schedule_type = schedule_type
        self._activities: Dict[str, str] = {}
        self._locked_slot_keys: Set[str] = set()
        self._locked_blocks: List[ScheduledBlock] = []
        self._unlocked_blocks: List[ScheduledBlock] = []
        self._blocked_times: List[BlockedTime] = []
        self._unplaced_activities: List[str] = []

    def __repr__(self) -> str:
        return (
            f"Schedule(id={self.schedule_id!r}, type={self.schedule_type!r}, "
            f"activities={len(self._activities)}, locked={len(self._locked_slot_keys)})"
        )

    # Read access (copies, so callers cannot mutate internal state)

    @property
    def activities(self) -> Dict[str, str]:
        return dict(self._activities)

    @property
    def locked_slot_keys(self) -> Set[str]:
        return set(self._locked_slot_keys)

    @property
    def locked_blocks(self) -> List[ScheduledBlock]:
        return list(self._locked_blocks)

    @property
    def unlocked_blocks(self) -> List[ScheduledBlock]:
        return list(self._unlocked_blocks)

    @property
    def blocked_times(self) -> List[BlockedTime]:
        return list(self._blocked_times)

    @property
    def unplaced_activities(self) -> List[str]:
        return list(self._unplaced_activities)

    # Activities

    def add_activity(self, time_key: str, activity_name: str) -> None:
        self._activities[time_key] = activity_name

    def remove_activity(self, time_key: str) -> Optional[str]:
        return self._activities.pop(time_key, None)

    def clear_unlocked_activities(self) -> None:
        """Drop every activity whose key is not locked."""
        self._activities = {
            key: name for key, name in self._activities.items() if key in self._locked_slot_keys
        }

    def place_activity(self, day_index: int, start_hour: int, description: str) -> None:
        self._activities[format_time_key(day_index, time(start_hour))] = description

    def place_activity_duration(self, day_index: int, start_hour: int, duration_hours: float, description: str) -> None:
        """Write one activity entry per started hour, e.g. 1.5h at 9 fills 09:00 and 10:00."""
        hours = max(1, math.ceil(duration_hours))
        for offset in range(hours):
            hour = start_hour + offset
            if hour > 23:
                break
            self._activities[format_time_key(day_index, time(hour))] = description

    # Locks

    def lock_slot_key(self, time_key: Optional[str]) -> None:
        if time_key is None:
            return
        self._locked_slot_keys.add(time_key)

    def unlock_slot_key(self, time_key: Optional[str]) -> None:
        if time_key is None:
            return
        self._locked_slot_keys.discard(time_key)

    def replace_locked_slot_keys(self, new_locked_keys: Optional[Iterable[str]]) -> None:
        self._locked_slot_keys = set(new_locked_keys or ())

    def clear_locked_slot_keys(self) -> None:
        self._locked_slot_keys.clear()

    def is_locked_key(self, time_key: Optional[str]) -> bool:
        return time_key is not None and time_key in self._locked_slot_keys

    # Blocks

    def add_locked_block(self, block: Optional[ScheduledBlock]) -> None:
        if block is not None:
            self._locked_blocks.append(block)

    def add_unlocked_block(self, block: Optional[ScheduledBlock]) -> None:
        if block is not None:
            self._unlocked_blocks.append(block)

    def add_blocked_time(self, blocked_time: BlockedTime) -> None:
        self._blocked_times.append(blocked_time)

    def remove_blocked_time(self, blocked_time: BlockedTime) -> None:
        if blocked_time in self._blocked_times:
            self._blocked_times.remove(blocked_time)

    def clear_blocked_times(self) -> None:
        self._blocked_times.clear()

    def add_unplaced_activity(self, activity_name: Optional[str]) -> None:
        if activity_name and activity_name.strip():
            self._unplaced_activities.append(activity_name)

    # Overlap queries

    def overlaps_with_existing_blocks(self, start: datetime, end: datetime, column_index: int) -> bool:
        """True if [start, end] touches a blocked time on the same column."""
        return any(
            blocked.column_index == column_index and blocked.overlaps(start, end)
            for blocked in self._blocked_times
        )

    def overlaps_with_activities(
        self,
        start: datetime,
        end: datetime,
        column_index: int,
        *,
        column_scoped_unlocked: bool = True,
    ) -> bool:
        """True if [start, end] touches a placed block.

        Locked blocks are always compared on the same column only. Unlocked blocks
        are too unless column_scoped_unlocked is False, in which case any column
        counts.
        """
        if any(block.overlaps(start, end, column_index) for block in self._locked_blocks):
            return True
        unlocked_column = column_index if column_scoped_unlocked else None
        return any(block.overlaps(start, end, unlocked_column) for block in self._unlocked_blocks)

    def remove_overlapping_activities(
        self,
        start: datetime,
        end: datetime,
        column_index: int,
        *,
        column_scoped_unlocked: bool = True,
    ) -> None:
        """Drop unlocked blocks and unlocked activity keys that fall inside [start, end].

        Activity keys are matched on the given column by time of day (inclusive);
        when end falls on a later date, everything from start to midnight matches.
        Locked keys are never removed.
        """
        unlocked_column = column_index if column_scoped_unlocked else None
        self._unlocked_blocks = [
            block for block in self._unlocked_blocks
            if not block.overlaps(start, end, unlocked_column)
        ]

        range_start, range_end = start.time(), end.time()
        # A range ending on a later date covers the rest of its start day.
        runs_past_midnight = end.date() > start.date()
        kept: Dict[str, str] = {}
        for key, name in self._activities.items():
            parsed = parse_time_key(key)
            if (
                parsed is not None
                and parsed[0] == column_index
                and key not in self._locked_slot_keys
                and range_start <= parsed[1]
                and (runs_past_midnight or parsed[1] <= range_end)
            ):
                continue
            kept[key] = name
        self._activities = kept

    # Copying

    def copy_locked_activities_from(self, source: Optional["Schedule"]) -> None:
        """Copy every locked key that has an activity in source (and lock it here)."""
        if source is None:
            return
        source_activities = source.activities
        for key in source.locked_slot_keys:
            activity = source_activities.get(key)
            if activity is not None:
                self._activities[key] = activity
                self._locked_slot_keys.add(key)

    def copy(self) -> "Schedule":
        """Independent copy; blocks and blocked times are immutable and shared."""
        clone = Schedule(self.schedule_id, self.schedule_type)
        clone._activities = dict(self._activities)
        clone._locked_slot_keys = set(self._locked_slot_keys)
        clone._locked_blocks = list(self._locked_blocks)
        clone._unlocked_blocks = list(self._unlocked_blocks)
        clone._blocked_times = list(self._blocked_times)
        clone._unplaced_activities = list(self._unplaced_activities)
        return clone

    def snapshot(self) -> ScheduleSnapshot:
        return ScheduleSnapshot(
            schedule_id=self.schedule_id,
            schedule_type=self.schedule_type,
            activities=dict(self._activities),
            locked_slot_keys=sorted(self._locked_slot_keys, key=time_key_sort_key),
            locked_blocks=list(self._locked_blocks),
            unlocked_blocks=list(self._unlocked_blocks),
            blocked_times=list(self._blocked_times),
            unplaced_activities=list(self._unplaced_activities),
        )

    @classmethod
    def from_snapshot(cls, snapshot: ScheduleSnapshot) -> "Schedule":
        schedule = cls(snapshot.schedule_id, snapshot.schedule_type)
        schedule._activities = dict(snapshot.activities)
        schedule._locked_slot_keys = set(snapshot.locked_slot_keys)
        schedule._locked_blocks = list(snapshot.locked_blocks)
        schedule._unlocked_blocks = list(snapshot.unlocked_blocks)
        schedule._blocked_times = list(snapshot.blocked_times)
        schedule._unplaced_activities = list(snapshot.unplaced_activities)
        return schedule
