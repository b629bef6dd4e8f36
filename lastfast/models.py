"""Typed dataclasses for the LastFast data model.

All models use from_dict/to_dict for JSON/YAML serialization.
camelCase in JSON is mapped to snake_case in Python.
Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

DEFAULT_GOAL_MINUTES = 720
SNAPSHOT_VERSION = 1


# ── Datetime helpers ──────────────────────────────────────────


def parse_instant(value: Any) -> datetime | None:
    """Parse an ISO-8601 string (or pass through a datetime) as an aware instant.

    Naive values are taken to be UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_instant(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat(timespec="seconds")


def _optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


# ── Sessions ──────────────────────────────────────────────────


@dataclass
class FastingSession:
    """One fasting attempt. Active while ``end_time`` is None."""

    start_time: datetime
    end_time: datetime | None = None
    goal_minutes: int | None = None
    goal_celebration_shown: bool = False
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def is_active(self) -> bool:
        return self.end_time is None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> FastingSession:
        start = parse_instant(d.get("startTime", d.get("start_time")))
        if start is None:
            raise ValueError("Session is missing startTime")
        return cls(
            id=str(d.get("id") or uuid.uuid4().hex),
            start_time=start,
            end_time=parse_instant(d.get("endTime", d.get("end_time"))),
            goal_minutes=_optional_int(d.get("goalMinutes", d.get("goal_minutes"))),
            goal_celebration_shown=bool(
                d.get("goalCelebrationShown", d.get("goal_celebration_shown", False))
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "startTime": format_instant(self.start_time),
            "endTime": format_instant(self.end_time),
            "goalMinutes": self.goal_minutes,
            "goalCelebrationShown": self.goal_celebration_shown,
        }


@dataclass
class SessionsFile:
    sessions: list[FastingSession] = field(default_factory=list)

    @property
    def active_session(self) -> FastingSession | None:
        for s in self.sessions:
            if s.is_active:
                return s
        return None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> SessionsFile:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            sessions=[
                FastingSession.from_dict(s)
                for s in (d.get("sessions") or [])
                if isinstance(s, dict)
            ]
        )

    def to_dict(self) -> dict[str, Any]:
        return {"sessions": [s.to_dict() for s in self.sessions]}


def _session_entry(d: Any) -> FastingSession:
    if not isinstance(d, dict):
        raise ValueError("Snapshot session must be an object")
    return FastingSession.from_dict(d)


@dataclass
class DataSnapshot:
    """Versioned export of every stored session."""

    export_date: datetime
    sessions: list[FastingSession] = field(default_factory=list)
    version: int = SNAPSHOT_VERSION

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> DataSnapshot:
        raw_sessions = d.get("sessions")
        if not isinstance(raw_sessions, list):
            raise ValueError("Snapshot has no sessions list")
        return cls(
            version=int(d.get("version", SNAPSHOT_VERSION)),
            export_date=parse_instant(d.get("exportDate")) or datetime.now(timezone.utc),
            sessions=[_session_entry(s) for s in raw_sessions],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "exportDate": format_instant(self.export_date),
            "sessions": [s.to_dict() for s in self.sessions],
        }


# ── Settings ──────────────────────────────────────────────────


@dataclass
class Settings:
    timezone: str = "UTC"
    default_goal_minutes: int = DEFAULT_GOAL_MINUTES
    reminder_lead_minutes: int = 60
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Settings:
        if not d or not isinstance(d, dict):
            return cls()
        defaults = cls()
        try:
            goal = int(d.get("default_goal_minutes", defaults.default_goal_minutes))
        except (TypeError, ValueError):
            goal = defaults.default_goal_minutes
        try:
            lead = int(d.get("reminder_lead_minutes", defaults.reminder_lead_minutes))
        except (TypeError, ValueError):
            lead = defaults.reminder_lead_minutes
        return cls(
            timezone=str(d.get("timezone") or defaults.timezone),
            default_goal_minutes=goal if goal > 0 else defaults.default_goal_minutes,
            reminder_lead_minutes=max(0, lead),
            log_level=str(d.get("log_level") or defaults.log_level).upper(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "timezone": self.timezone,
            "default_goal_minutes": self.default_goal_minutes,
            "reminder_lead_minutes": self.reminder_lead_minutes,
            "log_level": self.log_level,
        }


# ── Derived views ─────────────────────────────────────────────


@dataclass
class Reminder:
    kind: str  # one_hour_before, goal_met
    fire_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "fireAt": format_instant(self.fire_at)}


@dataclass
class HistoryStats:
    total_fasts: int = 0
    goals_met: int = 0
    average_duration: float | None = None  # seconds
    longest_duration: float = 0.0
    total_duration: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalFasts": self.total_fasts,
            "goalsMet": self.goals_met,
            "averageDuration": (
                round(self.average_duration, 1) if self.average_duration is not None else None
            ),
            "longestDuration": round(self.longest_duration, 1),
            "totalDuration": round(self.total_duration, 1),
        }
