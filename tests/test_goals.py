"""Tests for lastfast/goals.py."""

from datetime import timedelta

import pytest

from lastfast.goals import (
    GoalMode,
    compute_goal_minutes,
    goal_minutes_from_hours,
    is_goal_valid,
    minutes_until,
)


def test_duration_mode_validity():
    assert is_goal_valid(GoalMode.DURATION, selected_hours=16) is True
    assert is_goal_valid(GoalMode.DURATION, selected_minutes=30) is True
    assert is_goal_valid(GoalMode.DURATION) is False


def test_end_time_mode_validity():
    assert is_goal_valid(GoalMode.END_TIME, minutes_until_end=1) is True
    assert is_goal_valid(GoalMode.END_TIME, selected_hours=16, minutes_until_end=0) is False


def test_compute_goal_minutes():
    assert compute_goal_minutes(GoalMode.DURATION, 16, 30, 999) == 990
    assert compute_goal_minutes(GoalMode.END_TIME, 16, 30, 45) == 45


def test_minutes_until(t0):
    assert minutes_until(t0 + timedelta(minutes=90, seconds=59), t0) == 90
    assert minutes_until(t0 - timedelta(hours=1), t0) == 0


def test_goal_minutes_from_hours():
    assert goal_minutes_from_hours(16) == 960
    assert goal_minutes_from_hours(18.5) == 1110
    with pytest.raises(ValueError):
        goal_minutes_from_hours(-1)
    with pytest.raises(ValueError):
        goal_minutes_from_hours(float("inf"))
    with pytest.raises(ValueError):
        goal_minutes_from_hours(float("nan"))


def test_goal_mode_values():
    assert GoalMode("end_time") is GoalMode.END_TIME
