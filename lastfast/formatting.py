"""Duration and clock-time text used by the TUI, the web page and status replies."""

from __future__ import annotations

from datetime import datetime, tzinfo

from lastfast.progress import split_elapsed, split_minutes


def format_24h_time(value: datetime, tz: tzinfo | None = None) -> str:
    """'08:30', '14:45'. Converted to *tz* first when given."""
    if tz is not None:
        value = value.astimezone(tz)
    return value.strftime("%H:%M")


def hours_and_minutes(seconds: float) -> tuple[int, int]:
    return split_elapsed(seconds)


def format_duration(hours: int, minutes: int) -> str:
    """'8h 30m', '8h' or '30m'."""
    if hours > 0 and minutes > 0:
        return f"{hours}h {minutes}m"
    if hours > 0:
        return f"{hours}h"
    return f"{minutes}m"


def format_duration_seconds(seconds: float) -> str:
    return format_duration(*hours_and_minutes(seconds))


def format_duration_long(seconds: float) -> str:
    """Running timer text: '1h 2m 3s', '2m 3s' or '3s'."""
    total = max(0, int(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def format_duration_short(seconds: float) -> str:
    """Compact 'H:MM' as shown on small widgets."""
    hours, minutes = hours_and_minutes(seconds)
    return f"{hours}:{minutes:02d}"


# ── Natural language ──────────────────────────────────────────


def _plural(count: int, unit: str) -> str:
    return f"1 {unit}" if count == 1 else f"{count} {unit}s"


def format_duration_natural(hours: int, minutes: int) -> str:
    """'16 hours and 30 minutes', '1 hour', '1 minute'."""
    if hours > 0 and minutes > 0:
        return f"{_plural(hours, 'hour')} and {_plural(minutes, 'minute')}"
    if hours > 0:
        return _plural(hours, "hour")
    return _plural(minutes, "minute")


def format_elapsed_natural(seconds: float) -> str:
    return format_duration_natural(*hours_and_minutes(seconds))


def format_remaining_natural(remaining_minutes: int) -> str:
    return format_duration_natural(*split_minutes(remaining_minutes))


def format_goal_description(goal_minutes: int) -> str:
    return format_duration_natural(*split_minutes(goal_minutes))
