"""When to remind the user about an active fast.

Only the timing is computed here; whatever delivers the reminder owns the
wording.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from lastfast.models import FastingSession, Reminder
from lastfast.progress import projected_end_time

ONE_HOUR_BEFORE = "one_hour_before"
GOAL_MET = "goal_met"


def plan_reminders(
    session: FastingSession | None,
    now: datetime,
    lead_minutes: int = 60,
) -> list[Reminder]:
    """Reminders still due for *session*, earliest first.

    Nothing is planned for a stopped fast, a fast without a goal, or for
    moments that are already in the past.
    """
    if session is None or not session.is_active:
        return []

    goal_at = projected_end_time(session.start_time, session.goal_minutes)
    if goal_at is None:
        return []

    reminders = []
    if lead_minutes > 0:
        lead_at = goal_at - timedelta(minutes=lead_minutes)
        if lead_at > now:
            reminders.append(Reminder(kind=ONE_HOUR_BEFORE, fire_at=lead_at))
    if goal_at > now:
        reminders.append(Reminder(kind=GOAL_MET, fire_at=goal_at))
    return reminders
