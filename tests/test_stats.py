"""Tests for lastfast/stats.py."""

from datetime import timedelta

from lastfast.models import FastingSession
from lastfast.stats import DEFAULT_CHART_SCALE, bar_fraction, chart_scale, compute_stats


def _fast(t0, hours, goal=None, day=0):
    start = t0 + timedelta(days=day)
    return FastingSession(start_time=start, end_time=start + timedelta(hours=hours), goal_minutes=goal)


def test_empty_history(t0):
    stats = compute_stats([], t0)
    assert stats.total_fasts == 0
    assert stats.average_duration is None
    assert chart_scale([], t0) == DEFAULT_CHART_SCALE


def test_stats(t0):
    sessions = [_fast(t0, 16, 960, 0), _fast(t0, 12, 960, 1), _fast(t0, 20, None, 2)]
    stats = compute_stats(sessions, t0 + timedelta(days=10))
    assert stats.total_fasts == 3
    assert stats.goals_met == 1
    assert stats.average_duration == 16 * 3600
    assert stats.longest_duration == 20 * 3600
    assert stats.total_duration == 48 * 3600
    assert stats.to_dict()["averageDuration"] == 57600.0


def test_chart_scale_includes_goals(t0):
    sessions = [_fast(t0, 10, 18 * 60), _fast(t0, 12, None, 1)]
    scale = chart_scale(sessions, t0 + timedelta(days=3))
    assert scale == 18 * 3600
    assert bar_fraction(sessions[0], scale, t0) == 10 / 18
    assert bar_fraction(sessions[0], 0, t0) == 0.0
