"""Status summaries built from the progress model for the TUI and the API."""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Any

from lastfast.formatting import (
    format_24h_time,
    format_duration,
    format_duration_long,
    format_elapsed_natural,
    format_goal_description,
    format_remaining_natural,
)
from lastfast.models import FastingSession, format_instant
from lastfast.progress import session_progress


def build_status(
    session: FastingSession | None,
    now: datetime,
    tz: tzinfo | None = None,
) -> dict[str, Any]:
    """Everything a surface needs to render one fast at instant *now*."""
    if session is None:
        return {"active": False, "session": None, "message": status_message(None, now)}

    progress = session_progress(session, now)
    projected = progress.projected_end_time
    return {
        "active": session.is_active,
        "session": session.to_dict(),
        "progress": progress.to_dict(),
        "elapsedText": format_duration(*progress.elapsed_hours_and_minutes),
        "timerText": format_duration_long(progress.duration),
        "remainingText": (
            format_duration(*progress.remaining_hours_and_minutes) if progress.has_goal else None
        ),
        "startedAt": format_24h_time(session.start_time, tz),
        "projectedEndAt": format_24h_time(projected, tz) if projected else None,
        "projectedEndTime": format_instant(projected),
        "celebrate": progress.goal_met and not session.goal_celebration_shown,
        "message": status_message(session, now),
    }


def status_message(session: FastingSession | None, now: datetime) -> str:
    """One-sentence answer to 'how long have I been fasting?'."""
    if session is None or not session.is_active:
        return "You're not currently fasting."

    progress = session_progress(session, now)
    elapsed = format_elapsed_natural(progress.duration)
    if not progress.has_goal:
        return f"You've been fasting for {elapsed}."
    if progress.goal_met:
        goal = format_goal_description(progress.goal_minutes or 0)
        return f"You've been fasting for {elapsed}. You've reached your goal of {goal}!"
    remaining = format_remaining_natural(progress.remaining_minutes)
    return f"You've been fasting for {elapsed}. You have {remaining} left to reach your goal."


def stop_message(session: FastingSession) -> str:
    """Confirmation for a fast that has just been stopped."""
    progress = session_progress(session)
    elapsed = format_elapsed_natural(progress.duration)
    if progress.goal_met:
        return f"Congratulations! You fasted for {elapsed} and reached your goal!"
    return f"You fasted for {elapsed}."
