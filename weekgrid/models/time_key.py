"""Weekdays and time keys for weekgrid.

A time key is the canonical "<DayAbbrev> HH:MM" string (e.g. "Mon 09:00") that
identifies a placement on the weekly grid. It is both the activities map key and
the lock-tracking key.
"""

from __future__ import annotations

import re
from datetime import datetime, time
from enum import Enum
from typing import Optional, Tuple, Union

from weekgrid.models.constants import DAY_ABBREVIATIONS, DAYS_IN_WEEK


class TimeParseError(ValueError):
    """Raised when a clock time string cannot be parsed."""


class Weekday(str, Enum):
    """Day of week; the ordinal is the grid column (Monday=0 ... Sunday=6)."""
    MON = "MON"
    TUE = "TUE"
    WED = "WED"
    THU = "THU"
    FRI = "FRI"
    SAT = "SAT"
    SUN = "SUN"

    @property
    def column_index(self) -> int:
        return _WEEKDAY_ORDER.index(self)

    @property
    def abbreviation(self) -> str:
        return DAY_ABBREVIATIONS[self.column_index]

    @classmethod
    def from_column(cls, column_index: int) -> "Weekday":
        if not 0 <= column_index < DAYS_IN_WEEK:
            raise ValueError(f"column index out of range: {column_index}")
        return _WEEKDAY_ORDER[column_index]


_WEEKDAY_ORDER = list(Weekday)

_DAY_ALIASES = {
    "MON": Weekday.MON, "MONDAY": Weekday.MON,
    "TUE": Weekday.TUE, "TUES": Weekday.TUE, "TUESDAY": Weekday.TUE,
    "WED": Weekday.WED, "WEDNESDAY": Weekday.WED,
    "THU": Weekday.THU, "THUR": Weekday.THU, "THURS": Weekday.THU, "THURSDAY": Weekday.THU,
    "FRI": Weekday.FRI, "FRIDAY": Weekday.FRI,
    "SAT": Weekday.SAT, "SATURDAY": Weekday.SAT,
    "SUN": Weekday.SUN, "SUNDAY": Weekday.SUN,
}

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def parse_day(token: Optional[str]) -> Optional[Weekday]:
    """Parse "Mon", "monday", "MON", ... into a Weekday (None if unknown)."""
    if token is None:
        return None
    return _DAY_ALIASES.get(token.strip().upper())


def parse_clock_time(value: str) -> time:
    """Parse "H:MM", "HH:MM" or "HH:MM:SS" into a time.

    Raises:
        TimeParseError: If the value is not a valid clock time
    """
    match = _CLOCK_RE.match((value or "").strip())
    if not match:
        raise TimeParseError(f"Invalid clock time: {value!r}")
    hour, minute = int(match.group(1)), int(match.group(2))
    second = int(match.group(3)) if match.group(3) else 0
    if hour > 23 or minute > 59 or second > 59:
        raise TimeParseError(f"Clock time out of range: {value!r}")
    return time(hour, minute, second)


def format_time_key(day: Union[Weekday, int], at: time) -> str:
    """Format the canonical time key, e.g. (Weekday.MON, 09:00) -> "Mon 09:00"."""
    column_index = day.column_index if isinstance(day, Weekday) else int(day)
    return f"{DAY_ABBREVIATIONS[column_index]} {at.hour:02d}:{at.minute:02d}"


def parse_time_key(key: Optional[str]) -> Optional[Tuple[int, time]]:
    """Parse a time key into (column_index, time).

    Fails closed: malformed keys return None so a single corrupt key can be
    skipped without aborting the caller.
    """
    if not key or " " not in key.strip():
        return None
    parts = key.split()
    if len(parts) != 2:
        return None
    day = parse_day(parts[0])
    if day is None:
        return None
    try:
        parsed = parse_clock_time(parts[1])
    except TimeParseError:
        return None
    return day.column_index, parsed


def canonical_time_key(key: Optional[str]) -> Optional[str]:
    """Normalize "mon 9:00" style keys to "Mon 09:00" (None if malformed)."""
    parsed = parse_time_key(key)
    if parsed is None:
        return None
    return format_time_key(*parsed)


def time_key_sort_key(key: str) -> tuple:
    """Sort key ordering time keys by grid position; malformed keys go last."""
    parsed = parse_time_key(key)
    if parsed is None:
        return (1, DAYS_IN_WEEK, time.max, key)
    return (0, parsed[0], parsed[1], key)


def require_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Reject timezone-aware datetimes; grid times are local wall-clock times.

    Raises:
        ValueError: If value carries a UTC offset
    """
    if value is not None and value.utcoffset() is not None:
        raise ValueError("timezone-aware datetimes are not supported; use local time without an offset")
    return value
