"""Goal entry helpers: turning what the user picked into goal minutes."""

from __future__ import annotations

import math
from datetime import datetime
from enum import Enum


class GoalMode(str, Enum):
    """How the user expresses a goal: a duration, or a clock time to stop at."""

    DURATION = "duration"
    END_TIME = "end_time"


def is_goal_valid(
    mode: GoalMode,
    selected_hours: int = 0,
    selected_minutes: int = 0,
    minutes_until_end: int = 0,
) -> bool:
    if mode is GoalMode.DURATION:
        return selected_hours > 0 or selected_minutes > 0
    return minutes_until_end > 0


def minutes_until(end_time: datetime, now: datetime) -> int:
    """Whole minutes from *now* until *end_time*, 0 if it has passed."""
    seconds = (end_time - now).total_seconds()
    return max(0, int(seconds // 60))


def compute_goal_minutes(
    mode: GoalMode,
    selected_hours: int = 0,
    selected_minutes: int = 0,
    minutes_until_end: int = 0,
) -> int:
    if mode is GoalMode.DURATION:
        return selected_hours * 60 + selected_minutes
    return minutes_until_end


def goal_minutes_from_hours(hours: float) -> int:
    """16 -> 960, 18.5 -> 1110. Fractions of a minute are dropped."""
    if not math.isfinite(hours) or hours < 0:
        raise ValueError("Goal hours must be a non-negative number.")
    return int(hours * 60)
