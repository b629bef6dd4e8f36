"""Tests for lastfast/formatting.py."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from lastfast.formatting import (
    format_24h_time,
    format_duration,
    format_duration_long,
    format_duration_natural,
    format_duration_seconds,
    format_duration_short,
    format_goal_description,
    format_remaining_natural,
    hours_and_minutes,
)


def test_format_24h_time():
    dt = datetime(2026, 2, 11, 8, 5, tzinfo=timezone.utc)
    assert format_24h_time(dt) == "08:05"
    assert format_24h_time(dt, ZoneInfo("Asia/Tokyo")) == "17:05"


def test_format_duration():
    assert format_duration(8, 30) == "8h 30m"
    assert format_duration(8, 0) == "8h"
    assert format_duration(0, 30) == "30m"
    assert format_duration(0, 0) == "0m"


def test_seconds_based_formats():
    assert hours_and_minutes(5400) == (1, 30)
    assert format_duration_seconds(5400) == "1h 30m"
    assert format_duration_long(3723) == "1h 2m 3s"
    assert format_duration_long(123) == "2m 3s"
    assert format_duration_long(7) == "7s"
    assert format_duration_short(3723) == "1:02"
    assert format_duration_short(300) == "0:05"


def test_natural_language():
    assert format_duration_natural(16, 30) == "16 hours and 30 minutes"
    assert format_duration_natural(1, 0) == "1 hour"
    assert format_duration_natural(2, 0) == "2 hours"
    assert format_duration_natural(0, 1) == "1 minute"
    assert format_duration_natural(0, 45) == "45 minutes"
    assert format_remaining_natural(61) == "1 hour and 1 minute"
    assert format_goal_description(960) == "16 hours"
