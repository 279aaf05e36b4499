"""Greedy grid scheduler for weekgrid.

Places proposed events on a 7x24 hour grid. Locked events are placed exactly as
proposed and always win conflicts; flexible events are nudged to the nearest
free hour on their day. Events that cannot be placed are recorded as unplaced
rather than raising.
"""

import logging
import math
import random
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Optional

from weekgrid.config import load_settings
from weekgrid.engine.occupancy import OccupancyGrid
from weekgrid.engine.time_rules import find_rule, is_dinner_activity
from weekgrid.models.blocked_time import BlockedTime
from weekgrid.models.constants import DAY_ABBREVIATIONS, DAYS_IN_WEEK, HOURS_IN_DAY, MINUTES_PER_SLOT
from weekgrid.models.proposed_event import ProposedEvent
from weekgrid.models.schedule import Schedule, ScheduleId
from weekgrid.models.scheduled_block import ScheduledBlock
from weekgrid.models.time_key import Weekday, format_time_key

logger = logging.getLogger(__name__)


def most_recent_monday(today: Optional[date] = None) -> date:
    """Monday of the current week (today itself if today is a Monday)."""
    today = today or date.today()
    return today - timedelta(days=today.weekday())


def required_slots(duration_minutes: int) -> int:
    """Number of hour slots an event needs (at least one)."""
    return max(1, math.ceil(duration_minutes / MINUTES_PER_SLOT))


def blocked_hour_range(blocked_time: BlockedTime) -> tuple:
    """Hours [start, end) covered by a blocked interval on its own day.

    A partial final hour counts as blocked; an interval running past midnight
    blocks the rest of the start day.
    """
    start_hour = blocked_time.start.hour
    if blocked_time.end.date() > blocked_time.start.date():
        return start_hour, HOURS_IN_DAY
    end = blocked_time.end
    end_hour = end.hour + (1 if (end.minute or end.second or end.microsecond) else 0)
    return start_hour, end_hour


def candidate_start_hours(
    preferred_hour: int,
    slots: int,
    window_start: int = 0,
    window_end: int = HOURS_IN_DAY,
) -> List[int]:
    """Every valid start hour ordered by distance from preferred_hour.

    Alternates outward (+delta before -delta) so equal distances keep a stable
    order; each start hour appears once.
    """
    candidates: List[int] = []
    seen = set()
    for delta in range(HOURS_IN_DAY):
        for candidate in (preferred_hour + delta, preferred_hour - delta):
            if candidate in seen:
                continue
            if candidate >= window_start and candidate + slots <= window_end:
                seen.add(candidate)
                candidates.append(candidate)
    return candidates


class ConstraintSolver:
    """Greedy, grid-based placement engine.

    Args:
        week_start: Date of the Monday that anchors block datetimes (defaults to
            the most recent Monday)
        rng: Random source for shuffling and tie-breaks; pass a seeded
            random.Random for reproducible runs
        tie_break_window: Pick uniformly among at most this many closest free
            start hours
        use_time_rules: Restrict flexible events to their activity time window
        spill_to_other_days: Try other days when the requested day is full
    """

    def __init__(
        self,
        week_start: Optional[date] = None,
        rng: Optional[random.Random] = None,
        tie_break_window: Optional[int] = None,
        use_time_rules: Optional[bool] = None,
        spill_to_other_days: Optional[bool] = None,
    ):
        settings = load_settings()
        self.week_start = week_start or most_recent_monday()
        if rng is None:
            rng = random.Random(settings.random_seed)
        self.rng = rng
        self.tie_break_window = max(1, tie_break_window or settings.tie_break_window)
        self.use_time_rules = settings.use_time_rules if use_time_rules is None else use_time_rules
        self.spill_to_other_days = (
            settings.spill_to_other_days if spill_to_other_days is None else spill_to_other_days
        )

    def solve(
        self,
        schedule_id: ScheduleId,
        schedule_type: str,
        proposed_events: Optional[Iterable[ProposedEvent]],
        blocked_times: Optional[Iterable[BlockedTime]],
    ) -> Schedule:
        """Place proposed events into a new Schedule.

        Order matters: blocked times are applied first, then locked events
        (unconditionally), then flexible events in shuffled order.

        Args:
            schedule_id: Identifier of the schedule to build
            schedule_type: "day" or "week"
            proposed_events: Events to place (None is treated as empty)
            blocked_times: User-blocked periods (None is treated as empty)

        Returns:
            Schedule with placed blocks, activities, locks and unplaced names
        """
        schedule = Schedule(schedule_id, schedule_type)
        grid = OccupancyGrid()

        for blocked_time in blocked_times or ():
            schedule.add_blocked_time(blocked_time)
            start_hour, end_hour = blocked_hour_range(blocked_time)
            grid.mark_occupied(blocked_time.column_index, start_hour, end_hour)

        events = list(proposed_events or ())
        if not events:
            return schedule

        ordered = sorted(events, key=lambda e: (e.day.column_index, e.start_time))

        for event in ordered:
            if event.locked:
                self._place_locked_event(schedule, grid, event)

        flexible = [event for event in ordered if not event.locked]
        self.rng.shuffle(flexible)
        if self.spill_to_other_days:
            # Stable sort keeps the shuffle order among equally loaded days.
            flexible.sort(key=lambda e: (grid.occupied_hours(e.day.column_index), e.day.column_index))
        logger.debug(f"Placing {len(flexible)} flexible events")

        for event in flexible:
            self._place_flexible_event(schedule, grid, event)

        self._log_per_day_summary(schedule)
        return schedule

    def find_nearest_available_slot(
        self,
        grid: OccupancyGrid,
        column: int,
        preferred_hour: int,
        slots: int,
        window_start: int = 0,
        window_end: int = HOURS_IN_DAY,
    ) -> Optional[int]:
        """Find and claim a free start hour near preferred_hour.

        Returns:
            The chosen start hour (its range is marked occupied), or None when
            no free range exists on the column
        """
        free = [
            candidate
            for candidate in candidate_start_hours(preferred_hour, slots, window_start, window_end)
            if grid.is_range_free(column, candidate, candidate + slots)
        ]
        if not free:
            return None

        limit = min(self.tie_break_window, len(free))
        chosen = free[self.rng.randrange(limit)]
        if limit > 1:
            logger.debug(
                f"Column {column}, preferred {preferred_hour}: chose {chosen} among {limit} options"
            )
        grid.mark_occupied(column, chosen, chosen + slots)
        return chosen

    def _to_datetime(self, column: int, at: time) -> datetime:
        return datetime.combine(self.week_start + timedelta(days=column), at)

    def _place_locked_event(self, schedule: Schedule, grid: OccupancyGrid, event: ProposedEvent) -> None:
        column = event.day.column_index
        start = self._to_datetime(column, event.start_time)
        end = start + timedelta(minutes=event.duration_minutes)

        schedule.add_locked_block(ScheduledBlock(
            start=start,
            end=end,
            activity_name=event.name,
            locked=True,
            column_index=column,
        ))
        time_key = format_time_key(event.day, event.start_time)
        schedule.add_activity(time_key, event.name)
        schedule.lock_slot_key(time_key)

        start_hour = event.start_time.hour
        grid.mark_occupied(column, start_hour, min(HOURS_IN_DAY, start_hour + required_slots(event.duration_minutes)))
        logger.debug(f"Locked {event.name!r} at {time_key}")

    def _place_flexible_event(self, schedule: Schedule, grid: OccupancyGrid, event: ProposedEvent) -> None:
        preferred_column = event.day.column_index
        slots = required_slots(event.duration_minutes)
        preferred_hour = event.start_time.hour
        window_start, window_end = 0, HOURS_IN_DAY
        weekdays_only = False

        rule = find_rule(event.name) if self.use_time_rules else None
        if rule is not None:
            window_start, window_end = rule.window_start_hour, rule.window_end_hour
            preferred_hour = rule.choose_preferred_hour(preferred_hour, slots)
            weekdays_only = rule.weekdays_only
            if rule.must_precede_dinner:
                dinner_start = self._find_dinner_start_hour(schedule, preferred_column)
                if dinner_start is not None:
                    window_end = min(window_end, dinner_start)
                    latest_start = max(window_start, dinner_start - slots)
                    preferred_hour = max(window_start, min(preferred_hour, latest_start))

        for column in self._column_order(grid, preferred_column, weekdays_only):
            hour = self.find_nearest_available_slot(grid, column, preferred_hour, slots, window_start, window_end)
            if hour is None:
                continue

            placement_start = time(hour, event.start_time.minute)
            start = self._to_datetime(column, placement_start)
            end = start + timedelta(minutes=event.duration_minutes)
            schedule.add_unlocked_block(ScheduledBlock(
                start=start,
                end=end,
                activity_name=event.name,
                locked=False,
                column_index=column,
            ))
            time_key = format_time_key(column, placement_start)
            schedule.add_activity(time_key, event.name)
            logger.debug(f"Placed {event.name!r} at {time_key}")
            return

        logger.debug(f"No free slot for {event.name!r} (requested {event.time_key})")
        schedule.add_unplaced_activity(event.name)

    def _column_order(self, grid: OccupancyGrid, preferred_column: int, weekdays_only: bool) -> List[int]:
        if not self.spill_to_other_days:
            return [preferred_column]
        others = [
            column for column in range(DAYS_IN_WEEK)
            if column != preferred_column
            and not (weekdays_only and column >= Weekday.SAT.column_index)
        ]
        others.sort(key=lambda column: (grid.occupied_hours(column), column))
        return [preferred_column] + others

    def _find_dinner_start_hour(self, schedule: Schedule, column: int) -> Optional[int]:
        hours = [
            block.start.hour
            for block in schedule.locked_blocks + schedule.unlocked_blocks
            if block.column_index == column and is_dinner_activity(block.activity_name)
        ]
        return min(hours) if hours else None

    def _log_per_day_summary(self, schedule: Schedule) -> None:
        counts = [0] * DAYS_IN_WEEK
        for block in schedule.locked_blocks + schedule.unlocked_blocks:
            counts[block.column_index] += 1
        summary = " ".join(f"{abbr}={count}" for abbr, count in zip(DAY_ABBREVIATIONS, counts))
        logger.info(
            f"Schedule {schedule.schedule_id}: placed per day {summary}; "
            f"unplaced={len(schedule.unplaced_activities)}"
        )
