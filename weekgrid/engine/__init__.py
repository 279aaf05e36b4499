"""Placement engine for weekgrid."""

from weekgrid.engine.occupancy import OccupancyGrid, initialize_grid
from weekgrid.engine.solver import ConstraintSolver, most_recent_monday, required_slots
from weekgrid.engine.random_fill import populate_randomly
from weekgrid.engine.regenerate import LockAndRegenerate, lock_and_regenerate
from weekgrid.engine.generate import GenerateSchedule, GenerationResult
from weekgrid.engine.block_off import BlockOffResult, block_off_time
from weekgrid.engine.fixed_events import parse_fixed_events

__all__ = [
    "OccupancyGrid",
    "initialize_grid",
    "ConstraintSolver",
    "most_recent_monday",
    "required_slots",
    "populate_randomly",
    "LockAndRegenerate",
    "lock_and_regenerate",
    "GenerateSchedule",
    "GenerationResult",
    "BlockOffResult",
    "block_off_time",
    "parse_fixed_events",
]
