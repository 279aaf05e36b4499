"""Constants for weekgrid.

This module centralizes all magic numbers and default values used throughout the application.
"""


# Grid shape
HOURS_IN_DAY = 24
DAYS_IN_WEEK = 7
DAY_ABBREVIATIONS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

# Schedule defaults
DEFAULT_SCHEDULE_TYPE = "week"
DEFAULT_BLOCKED_DESCRIPTION = "Blocked"

# Placement
TIE_BREAK_WINDOW = 5  # Pick among at most this many closest free start hours
MINUTES_PER_SLOT = 60

# Random fill
ACTIVITY_CATALOG = ("Work", "Gym", "Study", "Relax", "Sleep")
RANDOM_FILL_PROBABILITY = 0.3

# Fixed activities / locked carry-over
DEFAULT_FIXED_DURATION_MINUTES = 60
LOCKED_CARRY_OVER_DURATION_MINUTES = 60
