"""Parser for fixed-activity text.

Users list fixed commitments one per line (or separated by ";"), e.g.

    Mon 09:00-10:00 Gym
    tue 18:30 90 Choir practice
    Friday 7:00 Breakfast with Sam

Each parsed line becomes a locked ProposedEvent. Lines that do not match are
skipped, so one typo does not discard the rest.
"""

import logging
import re
from datetime import datetime, time
from typing import List, Optional

from weekgrid.models.constants import DEFAULT_FIXED_DURATION_MINUTES
from weekgrid.models.proposed_event import ProposedEvent
from weekgrid.models.time_key import TimeParseError, parse_clock_time, parse_day

logger = logging.getLogger(__name__)

FIXED_EVENT_PATTERN = re.compile(
    r"^(mon|monday|tue|tuesday|wed|wednesday|thu|thursday|fri|friday|sat|saturday|sun|sunday)\s+"
    r"(\d{1,2}:\d{2})(?:\s*-\s*(\d{1,2}:\d{2}))?(?:\s+(\d+))?\s+(.+)$",
    re.IGNORECASE,
)


def _duration_minutes(start: time, end: Optional[time], explicit: Optional[str]) -> int:
    """Explicit minutes win, then end - start, then the default hour."""
    if explicit:
        parsed = int(explicit)
        if parsed > 0:
            return parsed
    if end is not None:
        today = datetime.today().date()
        between = (datetime.combine(today, end) - datetime.combine(today, start)).total_seconds() // 60
        if between > 0:
            return int(between)
    return DEFAULT_FIXED_DURATION_MINUTES


def parse_fixed_event(line: str) -> Optional[ProposedEvent]:
    """Parse a single fixed-activity line (None if it does not match)."""
    if not line or not line.strip():
        return None
    match = FIXED_EVENT_PATTERN.match(line.strip())
    if not match:
        return None

    day = parse_day(match.group(1))
    name = match.group(5).strip()
    if day is None or not name:
        return None
    try:
        start = parse_clock_time(match.group(2))
        end = parse_clock_time(match.group(3)) if match.group(3) else None
    except TimeParseError:
        return None

    return ProposedEvent(
        day=day,
        start_time=start,
        duration_minutes=_duration_minutes(start, end, match.group(4)),
        name=name,
        locked=True,
    )


def parse_fixed_events(text: Optional[str]) -> List[ProposedEvent]:
    """Parse newline- or ';'-separated fixed activities into locked events."""
    if not text or not text.strip():
        return []
    events: List[ProposedEvent] = []
    for raw_line in re.split(r"[\n;]", text):
        event = parse_fixed_event(raw_line)
        if event is None:
            if raw_line.strip():
                logger.warning(f"Skipping unrecognized fixed activity: {raw_line.strip()[:80]!r}")
            continue
        events.append(event)
    return events
