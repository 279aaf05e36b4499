"""Runtime configuration for weekgrid.

Values come from the environment (optionally a .env file) and are read at call
time so tests can override them with monkeypatch.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from weekgrid.models.constants import RANDOM_FILL_PROBABILITY, TIE_BREAK_WINDOW

load_dotenv()

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    tie_break_window: int = TIE_BREAK_WINDOW
    fill_probability: float = RANDOM_FILL_PROBABILITY
    use_time_rules: bool = False
    spill_to_other_days: bool = False
    random_seed: Optional[int] = None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: Optional[int], minimum: Optional[int] = None) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not an integer")
        return default
    if minimum is not None and value < minimum:
        logger.warning(f"Ignoring {name}={raw!r}: must be >= {minimum}")
        return default
    return value


def _env_probability(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not a number")
        return default
    if not 0.0 <= value <= 1.0:
        logger.warning(f"Ignoring {name}={raw!r}: must be between 0 and 1")
        return default
    return value


def load_settings() -> Settings:
    """Build Settings from WEEKGRID_* environment variables."""
    return Settings(
        tie_break_window=_env_int("WEEKGRID_TIE_BREAK_WINDOW", TIE_BREAK_WINDOW, minimum=1),
        fill_probability=_env_probability("WEEKGRID_FILL_PROBABILITY", RANDOM_FILL_PROBABILITY),
        use_time_rules=_env_bool("WEEKGRID_USE_TIME_RULES", False),
        spill_to_other_days=_env_bool("WEEKGRID_SPILL_TO_OTHER_DAYS", False),
        random_seed=_env_int("WEEKGRID_RANDOM_SEED", None),
    )
