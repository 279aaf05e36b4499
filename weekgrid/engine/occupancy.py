"""Per-column hour occupancy for weekgrid.

The grid is engine-local: it is rebuilt at the start of every placement run and
never persisted or shared between runs.
"""

from typing import Dict, List

from weekgrid.models.constants import DAYS_IN_WEEK, HOURS_IN_DAY


def initialize_grid() -> Dict[int, List[bool]]:
    """Map every column (0..6) to 24 free hours."""
    return {column: [False] * HOURS_IN_DAY for column in range(DAYS_IN_WEEK)}


class OccupancyGrid:
    """Boolean hour-availability table, one row per day column."""

    def __init__(self):
        self.columns: Dict[int, List[bool]] = initialize_grid()

    def mark_occupied(self, column: int, start_hour: int, end_hour: int) -> None:
        """Mark [start_hour, end_hour) as taken, clamped to the day. Unknown columns are ignored."""
        hours = self.columns.get(column)
        if hours is None:
            return
        for hour in range(max(0, start_hour), min(HOURS_IN_DAY, end_hour)):
            hours[hour] = True

    def is_range_free(self, column: int, start_hour: int, end_hour: int) -> bool:
        """True only if every hour in [start_hour, end_hour) is inside the day and free."""
        hours = self.columns.get(column, [False] * HOURS_IN_DAY)
        for hour in range(start_hour, end_hour):
            if hour < 0 or hour >= HOURS_IN_DAY:
                return False
            if hours[hour]:
                return False
        return True

    def occupied_hours(self, column: int) -> int:
        return sum(self.columns.get(column, ()))
