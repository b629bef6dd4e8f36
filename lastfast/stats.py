"""History statistics and chart scaling."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from lastfast.models import FastingSession, HistoryStats
from lastfast.progress import session_progress

DEFAULT_CHART_SCALE = 3600.0


def compute_stats(sessions: Iterable[FastingSession], now: datetime) -> HistoryStats:
    """Totals over *sessions*; active ones count up to *now*."""
    progresses = [session_progress(s, now) for s in sessions]
    if not progresses:
        return HistoryStats()

    durations = [p.duration for p in progresses]
    total = sum(durations)
    return HistoryStats(
        total_fasts=len(progresses),
        goals_met=sum(1 for p in progresses if p.goal_met),
        average_duration=total / len(durations),
        longest_duration=max(durations),
        total_duration=total,
    )


def chart_scale(sessions: Iterable[FastingSession], now: datetime) -> float:
    """Seconds represented by a full-height bar.

    The longest fast or the largest goal, whichever is bigger, so goal
    markers always fit on the chart.
    """
    sessions = list(sessions)
    longest = max(
        (session_progress(s, now).duration for s in sessions),
        default=DEFAULT_CHART_SCALE,
    )
    largest_goal = max(
        (s.goal_minutes * 60.0 for s in sessions if s.goal_minutes is not None),
        default=0.0,
    )
    return max(longest, largest_goal)


def bar_fraction(session: FastingSession, scale: float, now: datetime) -> float:
    if scale <= 0:
        return 0.0
    return min(1.0, session_progress(session, now).duration / scale)
