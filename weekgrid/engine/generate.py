"""Generate-schedule use case for weekgrid.

Combines already-proposed events with the user's fixed activities and whatever
was locked in the stored schedule, runs the solver, and saves the result.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Set, Tuple

from weekgrid.database.store import ScheduleStore
from weekgrid.engine.fixed_events import parse_fixed_events
from weekgrid.engine.solver import ConstraintSolver
from weekgrid.models.constants import DEFAULT_SCHEDULE_TYPE, LOCKED_CARRY_OVER_DURATION_MINUTES
from weekgrid.models.proposed_event import ProposedEvent
from weekgrid.models.schedule import Schedule, ScheduleId
from weekgrid.models.time_key import Weekday, parse_time_key

logger = logging.getLogger(__name__)

NOTHING_TO_PLACE_MESSAGE = "Please add at least one proposed or fixed activity."
EMPTY_PLAN_MESSAGE = "No plan could be generated for the provided details."
UNPLACED_MESSAGE = "Some activities could not be placed and were left unassigned."


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a generate run; schedule is None when nothing was generated."""
    schedule: Optional[Schedule]
    message: Optional[str] = None


def collect_locked_events(existing: Optional[Schedule]) -> List[ProposedEvent]:
    """Turn a stored schedule's locked blocks and locked keys into locked events.

    Locked blocks keep their duration; key-only locks (no block) last one hour.
    Duplicates by (day, start) are dropped, blocks taking precedence.
    """
    if existing is None:
        return []

    seen: Set[Tuple[int, object]] = set()
    events: List[ProposedEvent] = []

    for block in existing.locked_blocks:
        start = block.start.time()
        duration = int((block.end - block.start).total_seconds() // 60)
        if duration <= 0:
            duration = LOCKED_CARRY_OVER_DURATION_MINUTES
        if (block.column_index, start) in seen:
            continue
        seen.add((block.column_index, start))
        events.append(ProposedEvent(
            day=Weekday.from_column(block.column_index),
            start_time=start,
            duration_minutes=duration,
            name=block.activity_name,
            locked=True,
        ))

    activities = existing.activities
    for key in sorted(existing.locked_slot_keys):
        parsed = parse_time_key(key)
        name = activities.get(key)
        if parsed is None or not name or not name.strip():
            continue
        if parsed in seen:
            continue
        seen.add(parsed)
        events.append(ProposedEvent(
            day=Weekday.from_column(parsed[0]),
            start_time=parsed[1],
            duration_minutes=LOCKED_CARRY_OVER_DURATION_MINUTES,
            name=name,
            locked=True,
        ))
    return events


def build_generation_message(schedule: Optional[Schedule]) -> Optional[str]:
    if schedule is None:
        return "No plan was generated."
    has_placements = bool(schedule.activities or schedule.locked_blocks or schedule.unlocked_blocks)
    if not has_placements:
        return EMPTY_PLAN_MESSAGE
    if schedule.unplaced_activities:
        return UNPLACED_MESSAGE
    return None


class GenerateSchedule:
    """Build and persist a schedule from proposals, fixed activities and existing locks."""

    def __init__(self, store: ScheduleStore, solver: Optional[ConstraintSolver] = None):
        self.store = store
        self.solver = solver or ConstraintSolver()

    def execute(
        self,
        schedule_id: ScheduleId,
        proposals: Optional[Iterable[ProposedEvent]] = None,
        fixed_activities: Optional[str] = None,
        schedule_type: str = DEFAULT_SCHEDULE_TYPE,
    ) -> GenerationResult:
        proposals = list(proposals or ())
        fixed_events = parse_fixed_events(fixed_activities)
        logger.debug(f"Generate {schedule_id}: {len(proposals)} proposals, {len(fixed_events)} fixed events")

        if not proposals and not fixed_events:
            return GenerationResult(schedule=None, message=NOTHING_TO_PLACE_MESSAGE)

        existing = self.store.get(schedule_id)
        carried = collect_locked_events(existing)
        blocked_times = existing.blocked_times if existing is not None else []

        schedule = self.solver.solve(
            schedule_id,
            schedule_type,
            carried + fixed_events + proposals,
            blocked_times,
        )
        self.store.put(schedule)
        logger.info(
            f"Generated schedule {schedule_id}: {len(schedule.activities)} activities, "
            f"{len(schedule.unplaced_activities)} unplaced"
        )
        return GenerationResult(schedule=schedule, message=build_generation_message(schedule))
