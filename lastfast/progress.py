"""Fasting progress model.

Every surface (TUI, web page, API, reminders, history stats) derives what it
shows from the same three session fields and one sampled instant:

    start_time, end_time (optional), goal_minutes (optional), now

The functions here are pure. ``now`` is always an explicit argument and must
be sampled once by the caller and reused for every derived value of a single
render, so elapsed time and progress never disagree.

Goal semantics:

- ``goal_minutes is None`` means "no goal": goal_met is False, remaining and
  progress are 0, and there is no projected end.
- ``goal_minutes == 0`` is a real goal that is always met; progress stays 0.
- goal_met / remaining_minutes work on *whole* elapsed minutes, while
  progress_ratio uses *fractional* minutes so a progress bar moves smoothly
  and the "met" transition lands on a minute boundary.

Out-of-range input is clamped rather than rejected: a negative goal counts
as 0 and an end before the start gives a zero duration.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from lastfast.models import FastingSession, format_instant

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600


def _clamp_goal(goal_minutes: int | None) -> int | None:
    if goal_minutes is None:
        return None
    return max(0, int(goal_minutes))


def elapsed_seconds(
    start_time: datetime,
    end_time: datetime | None = None,
    now: datetime | None = None,
) -> float:
    """Seconds from *start_time* to *end_time* (or *now* while active), never negative."""
    reference = end_time if end_time is not None else now
    if reference is None:
        raise ValueError("now is required while the session has no end time")
    return max(0.0, (reference - start_time).total_seconds())


def whole_minutes(duration: float) -> int:
    return int(math.floor(max(0.0, duration) / SECONDS_PER_MINUTE))


def is_goal_met(duration: float, goal_minutes: int | None) -> bool:
    goal = _clamp_goal(goal_minutes)
    if goal is None:
        return False
    return whole_minutes(duration) >= goal


def remaining_minutes(duration: float, goal_minutes: int | None) -> int:
    goal = _clamp_goal(goal_minutes)
    if goal is None:
        return 0
    return max(0, goal - whole_minutes(duration))


def progress_ratio(duration: float, goal_minutes: int | None) -> float:
    goal = _clamp_goal(goal_minutes)
    if not goal:
        return 0.0
    return min(1.0, (max(0.0, duration) / SECONDS_PER_MINUTE) / goal)


def split_minutes(minutes: int) -> tuple[int, int]:
    """(hours, minutes) for a whole-minute count."""
    return minutes // 60, minutes % 60


def split_elapsed(duration: float) -> tuple[int, int]:
    """(hours, minutes-of-hour) for an elapsed duration in seconds."""
    total = int(math.floor(max(0.0, duration)))
    return total // SECONDS_PER_HOUR, (total // SECONDS_PER_MINUTE) % 60


def projected_end_time(start_time: datetime, goal_minutes: int | None) -> datetime | None:
    """Originally targeted end of the fast, independent of when it actually stopped."""
    goal = _clamp_goal(goal_minutes)
    if goal is None:
        return None
    return start_time + timedelta(minutes=goal)


@dataclass(frozen=True)
class FastingProgress:
    duration: float
    goal_minutes: int | None
    goal_met: bool
    remaining_minutes: int
    progress_ratio: float
    elapsed_hours_and_minutes: tuple[int, int]
    remaining_hours_and_minutes: tuple[int, int]
    projected_end_time: datetime | None

    @property
    def has_goal(self) -> bool:
        return self.goal_minutes is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "duration": self.duration,
            "goalMinutes": self.goal_minutes,
            "goalMet": self.goal_met,
            "remainingMinutes": self.remaining_minutes,
            "progressRatio": self.progress_ratio,
            "elapsed": list(self.elapsed_hours_and_minutes),
            "remaining": list(self.remaining_hours_and_minutes),
            "projectedEndTime": format_instant(self.projected_end_time),
        }


def compute_progress(
    start_time: datetime,
    end_time: datetime | None = None,
    goal_minutes: int | None = None,
    now: datetime | None = None,
) -> FastingProgress:
    """Derive every display value for one session at one instant."""
    duration = elapsed_seconds(start_time, end_time, now)
    goal = _clamp_goal(goal_minutes)
    remaining = remaining_minutes(duration, goal)
    return FastingProgress(
        duration=duration,
        goal_minutes=goal,
        goal_met=is_goal_met(duration, goal),
        remaining_minutes=remaining,
        progress_ratio=progress_ratio(duration, goal),
        elapsed_hours_and_minutes=split_elapsed(duration),
        remaining_hours_and_minutes=split_minutes(remaining),
        projected_end_time=projected_end_time(start_time, goal),
    )


def session_progress(session: FastingSession, now: datetime | None = None) -> FastingProgress:
    return compute_progress(session.start_time, session.end_time, session.goal_minutes, now)
