"""Tests for lastfast/reminders.py."""

from datetime import timedelta

from lastfast.models import FastingSession
from lastfast.reminders import GOAL_MET, ONE_HOUR_BEFORE, plan_reminders


def test_both_reminders_for_fresh_fast(t0):
    s = FastingSession(start_time=t0, goal_minutes=960)
    reminders = plan_reminders(s, t0)
    assert [r.kind for r in reminders] == [ONE_HOUR_BEFORE, GOAL_MET]
    assert reminders[0].fire_at == t0 + timedelta(hours=15)
    assert reminders[1].fire_at == t0 + timedelta(hours=16)


def test_lead_reminder_skipped_when_past(t0):
    s = FastingSession(start_time=t0, goal_minutes=960)
    reminders = plan_reminders(s, t0 + timedelta(hours=15, minutes=30))
    assert [r.kind for r in reminders] == [GOAL_MET]


def test_nothing_after_goal(t0):
    s = FastingSession(start_time=t0, goal_minutes=60)
    assert plan_reminders(s, t0 + timedelta(hours=1)) == []


def test_short_goal_only_goal_reminder(t0):
    s = FastingSession(start_time=t0, goal_minutes=30)
    assert [r.kind for r in plan_reminders(s, t0)] == [GOAL_MET]


def test_no_reminders_without_goal_or_when_stopped(t0):
    assert plan_reminders(None, t0) == []
    assert plan_reminders(FastingSession(start_time=t0), t0) == []
    stopped = FastingSession(start_time=t0, end_time=t0 + timedelta(minutes=5), goal_minutes=960)
    assert plan_reminders(stopped, t0 + timedelta(minutes=10)) == []


def test_custom_lead(t0):
    s = FastingSession(start_time=t0, goal_minutes=960)
    reminders = plan_reminders(s, t0, lead_minutes=30)
    assert reminders[0].fire_at == t0 + timedelta(hours=15, minutes=30)
    assert [r.kind for r in plan_reminders(s, t0, lead_minutes=0)] == [GOAL_MET]
    assert reminders[0].to_dict()["kind"] == ONE_HOUR_BEFORE
