"""Fasting session store: start, stop, edit and list fasts.

Sessions live in lastfast/sessions.json. At most one session is active
(has no end time) at any moment; every mutating call enforces that before
writing.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from lastfast.fileio import read_json, write_json_atomic
from lastfast.goals import GoalMode, compute_goal_minutes, is_goal_valid, minutes_until
from lastfast.hooks import run_hooks
from lastfast.models import FastingSession, SessionsFile, format_instant, parse_instant
from lastfast.progress import session_progress
from lastfast.workspace import load_settings, now_local, sessions_path, workspace_root

logger = logging.getLogger(__name__)

_UNSET: Any = object()


def _now(now: datetime | None, root: Path) -> datetime:
    if now is None:
        now = now_local(root)
    return now.replace(microsecond=0)


def _hook_context(session: FastingSession, now: datetime) -> dict[str, Any]:
    progress = session_progress(session, now)
    return {
        "session": session.to_dict(),
        "durationSeconds": int(progress.duration),
        "goalMet": progress.goal_met,
        "at": format_instant(now),
    }


# ── Load / save ───────────────────────────────────────────────


def load_sessions(root: Path | None = None) -> SessionsFile:
    return SessionsFile.from_dict(read_json(sessions_path(root)))


def save_sessions(sessions_file: SessionsFile, root: Path | None = None) -> None:
    actives = [s for s in sessions_file.sessions if s.is_active]
    if len(actives) > 1:
        raise ValueError("Only one fast can be active at a time.")
    write_json_atomic(sessions_path(root), sessions_file.to_dict())


def find_session(sessions_file: SessionsFile, session_id: str) -> FastingSession | None:
    for s in sessions_file.sessions:
        if s.id == session_id:
            return s
    return None


def get_active_session(root: Path | None = None) -> FastingSession | None:
    """The fast currently in progress, or None."""
    return load_sessions(root).active_session


def list_history(root: Path | None = None, include_active: bool = False) -> list[FastingSession]:
    """Sessions newest first; completed only unless *include_active*."""
    sessions = load_sessions(root).sessions
    if not include_active:
        sessions = [s for s in sessions if not s.is_active]
    return sorted(sessions, key=lambda s: s.start_time, reverse=True)


# ── Lifecycle ─────────────────────────────────────────────────


def start_fast(
    goal_minutes: int | None = None,
    use_default_goal: bool = True,
    start_time: datetime | None = None,
    now: datetime | None = None,
    root: Path | None = None,
) -> FastingSession:
    """Start a new fast. Raises if one is already active.

    Without *goal_minutes* the configured default goal is used, unless
    *use_default_goal* is False, in which case the fast has no goal.
    """
    if root is None:
        root = workspace_root()
    now = _now(now, root)

    sessions_file = load_sessions(root)
    active = sessions_file.active_session
    if active is not None:
        raise ValueError(
            f"You're already fasting. Your fast started at {format_instant(active.start_time)}."
        )

    if goal_minutes is None and use_default_goal:
        goal_minutes = load_settings(root).default_goal_minutes
    if goal_minutes is not None and goal_minutes < 0:
        raise ValueError("Goal must not be negative.")

    start = now if start_time is None else parse_instant(start_time).replace(microsecond=0)
    if start > now:
        raise ValueError("Start time cannot be in the future.")

    session = FastingSession(start_time=start, goal_minutes=goal_minutes)
    sessions_file.sessions.append(session)
    save_sessions(sessions_file, root)
    logger.info("Started fast %s (goal=%s min)", session.id, goal_minutes)

    run_hooks("on_fast_start", _hook_context(session, now), root)
    return session


def start_fast_until(
    end_time: datetime,
    now: datetime | None = None,
    root: Path | None = None,
) -> FastingSession:
    """Start a fast whose goal is the whole minutes between now and *end_time*."""
    if root is None:
        root = workspace_root()
    now = _now(now, root)
    until_end = minutes_until(parse_instant(end_time), now)
    if not is_goal_valid(GoalMode.END_TIME, minutes_until_end=until_end):
        raise ValueError("The end time must be in the future.")
    goal = compute_goal_minutes(GoalMode.END_TIME, minutes_until_end=until_end)
    return start_fast(goal_minutes=goal, now=now, root=root)


def stop_fast(now: datetime | None = None, root: Path | None = None) -> FastingSession:
    """Stop the active fast and return it."""
    if root is None:
        root = workspace_root()
    now = _now(now, root)

    sessions_file = load_sessions(root)
    session = sessions_file.active_session
    if session is None:
        raise ValueError("You're not currently fasting.")

    session.end_time = max(now, session.start_time)
    save_sessions(sessions_file, root)
    logger.info("Stopped fast %s", session.id)

    run_hooks("on_fast_stop", _hook_context(session, now), root)
    return session


def mark_celebration_shown(
    session_id: str,
    now: datetime | None = None,
    root: Path | None = None,
) -> FastingSession:
    """Record that the goal-reached celebration was shown for a session.

    Nothing is recorded while the goal is not met yet, so an early call
    cannot suppress the celebration. Fires on_goal_met the first time the
    flag is set.
    """
    if root is None:
        root = workspace_root()
    now = _now(now, root)

    sessions_file = load_sessions(root)
    session = find_session(sessions_file, session_id)
    if session is None:
        raise KeyError(session_id)
    if session.goal_celebration_shown or not session_progress(session, now).goal_met:
        return session

    session.goal_celebration_shown = True
    save_sessions(sessions_file, root)
    logger.info("Goal met for fast %s", session.id)

    run_hooks("on_goal_met", _hook_context(session, now), root)
    return session


# ── Editing ───────────────────────────────────────────────────


def update_session(
    session_id: str,
    start_time: Any = _UNSET,
    end_time: Any = _UNSET,
    goal_minutes: Any = _UNSET,
    root: Path | None = None,
) -> FastingSession:
    """Edit a stored fast. Only the fields that are passed change.

    Passing ``end_time=None`` reopens the fast, which is refused while a
    different fast is active. ``goal_minutes=None`` removes the goal.
    """
    if root is None:
        root = workspace_root()

    sessions_file = load_sessions(root)
    session = find_session(sessions_file, session_id)
    if session is None:
        raise KeyError(session_id)

    new_start = session.start_time if start_time is _UNSET else parse_instant(start_time)
    new_end = session.end_time if end_time is _UNSET else parse_instant(end_time)
    new_goal = session.goal_minutes if goal_minutes is _UNSET else goal_minutes

    if new_start is None:
        raise ValueError("Start time is required.")
    if new_end is not None and new_end < new_start:
        raise ValueError("End time must be after the start time.")
    if new_goal is not None and new_goal < 0:
        raise ValueError("Goal must not be negative.")
    if new_end is None:
        active = sessions_file.active_session
        if active is not None and active.id != session.id:
            raise ValueError("Another fast is already active.")

    session.start_time = new_start
    session.end_time = new_end
    session.goal_minutes = new_goal
    save_sessions(sessions_file, root)
    logger.info("Updated fast %s", session.id)
    return session


def delete_session(session_id: str, root: Path | None = None) -> FastingSession:
    sessions_file = load_sessions(root)
    session = find_session(sessions_file, session_id)
    if session is None:
        raise KeyError(session_id)
    sessions_file.sessions.remove(session)
    save_sessions(sessions_file, root)
    logger.info("Deleted fast %s", session.id)
    return session


def clear_sessions(root: Path | None = None) -> int:
    """Delete every stored session. Returns how many were removed."""
    count = len(load_sessions(root).sessions)
    save_sessions(SessionsFile(), root)
    logger.info("Cleared %d sessions", count)
    return count
