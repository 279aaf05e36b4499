"""Activity time rules for weekgrid.

Maps activity name patterns to placement windows (e.g. lunch between 11:00 and
13:00). The solver only consults these when time rules are enabled.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from weekgrid.models.constants import HOURS_IN_DAY


@dataclass(frozen=True)
class ActivityTimeRule:
    """Preferred placement window for an activity.

    The window is [window_start_hour, window_end_hour): a placement must start at
    or after the start and finish by the end.
    """

    window_start_hour: int
    window_end_hour: int
    preferred_start_hour: int
    must_precede_dinner: bool = False
    weekdays_only: bool = False

    def __post_init__(self):
        object.__setattr__(self, "window_start_hour", max(0, self.window_start_hour))
        object.__setattr__(self, "window_end_hour", min(HOURS_IN_DAY, self.window_end_hour))

    def choose_preferred_hour(self, proposed_hour: int, required_slots: int) -> int:
        """Keep proposed_hour if it fits the window, else fall back to the rule's preference, clamped."""
        max_start = self.window_end_hour - required_slots
        if max_start < self.window_start_hour:
            return self.window_start_hour

        candidate = proposed_hour
        if candidate < self.window_start_hour or candidate > max_start:
            candidate = self.preferred_start_hour
        return min(max(candidate, self.window_start_hour), max_start)


def is_dinner_activity(activity_name: Optional[str]) -> bool:
    if not activity_name:
        return False
    normalized = activity_name.lower()
    return "dinner" in normalized and "prep" not in normalized


def _is_dinner_prep(normalized: str) -> bool:
    return "dinner" in normalized and "prep" in normalized


# Checked in order; first match wins. Dinner prep must be tested before dinner.
_RULES: List[Tuple[Callable[[str], bool], ActivityTimeRule]] = [
    (lambda n: "gym" in n, ActivityTimeRule(5, 10, 6)),
    (lambda n: "breakfast" in n, ActivityTimeRule(7, 9, 8)),
    (lambda n: "morning routine" in n or "morning ritual" in n, ActivityTimeRule(5, 11, 7)),
    (_is_dinner_prep, ActivityTimeRule(16, 18, 17, must_precede_dinner=True)),
    (lambda n: "lunch" in n, ActivityTimeRule(11, 13, 12)),
    (is_dinner_activity, ActivityTimeRule(18, 20, 19)),
    (
        lambda n: "focus block" in n or "deep work" in n or "focus session" in n,
        ActivityTimeRule(8, 15, 9, weekdays_only=True),
    ),
    (lambda n: "work" in n, ActivityTimeRule(9, 17, 9, weekdays_only=True)),
    (lambda n: "grocery" in n or "groceries" in n, ActivityTimeRule(15, 20, 18)),
]


def find_rule(activity_name: Optional[str]) -> Optional[ActivityTimeRule]:
    """Return the first rule whose pattern matches the activity name."""
    if not activity_name or not activity_name.strip():
        return None
    normalized = activity_name.lower()
    for matches, rule in _RULES:
        if matches(normalized):
            return rule
    return None
