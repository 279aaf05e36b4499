"""Random fill for regenerated schedules.

Re-populates the unlocked part of a schedule with activities drawn from a small
catalog. Locked keys and hours inside blocked times are never touched.
"""

import logging
import random
from datetime import time
from typing import Iterable, Optional, Sequence

from weekgrid.engine.solver import blocked_hour_range
from weekgrid.models.constants import ACTIVITY_CATALOG, DAYS_IN_WEEK, HOURS_IN_DAY, RANDOM_FILL_PROBABILITY
from weekgrid.models.schedule import Schedule
from weekgrid.models.time_key import format_time_key

logger = logging.getLogger(__name__)


def _blocked_hours(schedule: Schedule) -> set:
    blocked = set()
    for blocked_time in schedule.blocked_times:
        start_hour, end_hour = blocked_hour_range(blocked_time)
        for hour in range(max(0, start_hour), min(HOURS_IN_DAY, end_hour)):
            blocked.add((blocked_time.column_index, hour))
    return blocked


def populate_randomly(
    schedule: Schedule,
    rng: random.Random,
    locked_keys: Optional[Iterable[str]] = None,
    catalog: Sequence[str] = ACTIVITY_CATALOG,
    fill_probability: float = RANDOM_FILL_PROBABILITY,
) -> int:
    """Fill every unlocked hour key of the week at random.

    Existing unlocked activities are discarded first. Each remaining hour key
    ("Mon 00:00" .. "Sun 23:00") gets a catalog activity with probability
    fill_probability.

    Args:
        schedule: Schedule to fill in place
        rng: Random source
        locked_keys: Extra keys to skip besides the schedule's own locked keys
        catalog: Activity names to draw from
        fill_probability: Chance that a free hour gets an activity

    Returns:
        Number of activities added
    """
    schedule.clear_unlocked_activities()
    if not catalog:
        return 0

    skip = schedule.locked_slot_keys | set(locked_keys or ())
    blocked = _blocked_hours(schedule)
    added = 0
    for column in range(DAYS_IN_WEEK):
        for hour in range(HOURS_IN_DAY):
            key = format_time_key(column, time(hour))
            if key in skip or (column, hour) in blocked:
                continue
            if rng.random() < fill_probability:
                schedule.add_activity(key, rng.choice(catalog))
                added += 1

    logger.debug(f"Random fill added {added} activities to schedule {schedule.schedule_id}")
    return added
