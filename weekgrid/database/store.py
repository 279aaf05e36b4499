"""Schedule persistence contract and the in-memory store."""

import logging
from typing import Dict, Optional, Protocol

from weekgrid.models.schedule import Schedule, ScheduleId

logger = logging.getLogger(__name__)


def store_key(schedule_id: ScheduleId) -> str:
    """Stores key schedules by string id so 7 and "7" address the same schedule."""
    return str(schedule_id)


class ScheduleStore(Protocol):
    """Minimal keyed get/put store. Last writer wins; no versioning."""

    def get(self, schedule_id: ScheduleId) -> Optional[Schedule]:
        ...

    def put(self, schedule: Schedule) -> Schedule:
        ...


class InMemoryScheduleStore:
    """Dict-backed ScheduleStore.

    Stored schedules are copies, so later edits to the caller's object do not
    leak into the store (and vice versa).
    """

    def __init__(self):
        self._schedules: Dict[str, Schedule] = {}

    def get(self, schedule_id: ScheduleId) -> Optional[Schedule]:
        schedule = self._schedules.get(store_key(schedule_id))
        return schedule.copy() if schedule is not None else None

    def put(self, schedule: Schedule) -> Schedule:
        self._schedules[store_key(schedule.schedule_id)] = schedule.copy()
        logger.debug(f"Saved schedule {schedule.schedule_id}")
        return schedule

    def delete(self, schedule_id: ScheduleId) -> bool:
        return self._schedules.pop(store_key(schedule_id), None) is not None

    def __len__(self) -> int:
        return len(self._schedules)
