"""Lock/regenerate workflow for weekgrid.

On every lock-state change a brand-new Schedule is built: locked activities are
copied forward from the stored schedule, newly locked keys are pinned (keeping
whatever activity already sat there), and the rest of the week is re-filled at
random. The previous snapshot is never edited in place.
"""

import logging
import random
import threading
import weakref
from typing import Callable, Iterable, Optional, Sequence, Set

from weekgrid.config import load_settings
from weekgrid.database.store import ScheduleStore, store_key
from weekgrid.engine.random_fill import populate_randomly
from weekgrid.models.constants import ACTIVITY_CATALOG, DEFAULT_SCHEDULE_TYPE
from weekgrid.models.schedule import Schedule, ScheduleId
from weekgrid.models.time_key import canonical_time_key, format_time_key

logger = logging.getLogger(__name__)

# Regeneration is read-modify-write on the store; same-id calls must not interleave.
# Entries disappear once no caller holds the lock.
_schedule_locks = weakref.WeakValueDictionary()
_schedule_locks_guard = threading.Lock()


def _lock_for(schedule_id: ScheduleId) -> threading.Lock:
    key = store_key(schedule_id)
    with _schedule_locks_guard:
        lock = _schedule_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _schedule_locks[key] = lock
        return lock


def _default_schedule_factory(schedule_id: ScheduleId) -> Schedule:
    return Schedule(schedule_id, DEFAULT_SCHEDULE_TYPE)


def _canonical_keys(keys: Optional[Iterable[str]]) -> Set[str]:
    """Canonicalize keys, skipping (and logging) malformed ones."""
    result: Set[str] = set()
    for key in keys or ():
        canonical = canonical_time_key(key)
        if canonical is None:
            logger.warning(f"Skipping malformed time key {key!r}")
            continue
        result.add(canonical)
    return result


class LockAndRegenerate:
    """Produce a new Schedule that keeps locked activities and re-randomizes the rest.

    Args:
        store: Where schedules are read from and saved to
        rng: Random source for the fill (seed it for reproducible output)
        catalog: Activity names the fill draws from
        fill_probability: Chance that a free hour gets an activity
        schedule_factory: Builds the schedule used when none is stored yet
    """

    def __init__(
        self,
        store: ScheduleStore,
        rng: Optional[random.Random] = None,
        catalog: Optional[Sequence[str]] = None,
        fill_probability: Optional[float] = None,
        schedule_factory: Optional[Callable[[ScheduleId], Schedule]] = None,
    ):
        settings = load_settings()
        self.store = store
        self.rng = rng if rng is not None else random.Random(settings.random_seed)
        self.catalog = ACTIVITY_CATALOG if catalog is None else tuple(catalog)
        self.fill_probability = settings.fill_probability if fill_probability is None else fill_probability
        self.schedule_factory = schedule_factory or _default_schedule_factory

    def execute(
        self,
        schedule_id: ScheduleId,
        new_locked_keys: Optional[Iterable[str]],
        unlocked_keys: Optional[Iterable[str]] = None,
    ) -> Schedule:
        """Lock new_locked_keys (and release unlocked_keys), then regenerate.

        Returns:
            The newly built and persisted Schedule
        """
        lock = _lock_for(schedule_id)
        with lock:
            existing = self.store.get(schedule_id)
            if existing is None:
                schedule = self.schedule_factory(schedule_id)
                self.store.put(schedule)
                logger.info(f"Schedule {schedule_id} not found; created an empty one")
                return schedule

            regenerated = self._regenerate(existing, _canonical_keys(new_locked_keys), _canonical_keys(unlocked_keys))
            self.store.put(regenerated)
            return regenerated

    def _regenerate(self, existing: Schedule, new_locked: Set[str], released: Set[str]) -> Schedule:
        old_activities = existing.activities

        # Carry over what was locked before, minus anything explicitly released.
        carried = existing.copy()
        for key in released:
            carried.unlock_slot_key(key)

        schedule = Schedule(existing.schedule_id, existing.schedule_type)
        for blocked_time in existing.blocked_times:
            schedule.add_blocked_time(blocked_time)
        schedule.copy_locked_activities_from(carried)

        for key in new_locked - released:
            schedule.lock_slot_key(key)
            if key in old_activities:
                schedule.add_activity(key, old_activities[key])

        locked_keys = schedule.locked_slot_keys
        for block in existing.locked_blocks + existing.unlocked_blocks:
            key = format_time_key(block.column_index, block.start.time())
            if key not in locked_keys:
                continue
            if block.locked:
                schedule.add_locked_block(block)
            else:
                schedule.add_locked_block(block.model_copy(update={"locked": True}))

        added = populate_randomly(
            schedule,
            self.rng,
            catalog=self.catalog,
            fill_probability=self.fill_probability,
        )
        logger.info(
            f"Regenerated schedule {schedule.schedule_id}: {len(locked_keys)} locked keys, "
            f"{added} activities re-filled"
        )
        return schedule


def lock_and_regenerate(
    schedule_id: ScheduleId,
    locked_keys: Optional[Iterable[str]],
    store: ScheduleStore,
    rng: Optional[random.Random] = None,
) -> Schedule:
    """Convenience wrapper around LockAndRegenerate.execute."""
    return LockAndRegenerate(store, rng=rng).execute(schedule_id, locked_keys)
