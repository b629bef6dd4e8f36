"""Export and import of session snapshots.

A snapshot is a versioned JSON document holding every stored session.
Exports go to lastfast/snapshots/; importing replaces all stored sessions,
which also makes snapshots usable as seed data for demos and tests.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from lastfast.fileio import read_json, write_json_atomic
from lastfast.hooks import run_hooks
from lastfast.models import DataSnapshot, SessionsFile
from lastfast.store import clear_sessions, list_history, save_sessions
from lastfast.workspace import now_local, snapshots_dir, workspace_root

logger = logging.getLogger(__name__)

__all__ = [
    "SnapshotError",
    "build_snapshot",
    "export_snapshot",
    "import_snapshot",
    "load_seed",
    "clear_sessions",
]


class SnapshotError(ValueError):
    """Snapshot data could not be read."""


def build_snapshot(root: Path | None = None, now: datetime | None = None) -> DataSnapshot:
    if now is None:
        now = now_local(root)
    return DataSnapshot(export_date=now, sessions=list_history(root, include_active=True))


def export_snapshot(root: Path | None = None, now: datetime | None = None) -> Path:
    """Write every session to a timestamped JSON file and return its path."""
    if root is None:
        root = workspace_root()
    snapshot = build_snapshot(root, now)
    stamp = snapshot.export_date.strftime("%Y-%m-%dT%H-%M-%S")
    path = snapshots_dir(root) / f"snapshot_{stamp}.json"
    write_json_atomic(path, snapshot.to_dict())
    logger.info("Exported %d sessions to %s", len(snapshot.sessions), path)
    return path


def _decode(data: Any) -> DataSnapshot:
    if isinstance(data, (bytes, str)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise SnapshotError(f"Snapshot is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a JSON object")
    try:
        return DataSnapshot.from_dict(data)
    except (TypeError, ValueError) as e:
        raise SnapshotError(f"Failed to decode snapshot: {e}") from e


def import_snapshot(data: Any, root: Path | None = None) -> DataSnapshot:
    """Replace all stored sessions with the ones in *data*.

    *data* may be raw JSON (str/bytes) or an already-parsed dict.
    """
    if root is None:
        root = workspace_root()
    snapshot = _decode(data)
    if sum(1 for s in snapshot.sessions if s.is_active) > 1:
        raise SnapshotError("Snapshot contains more than one active fast")
    for s in snapshot.sessions:
        if s.end_time is not None and s.end_time < s.start_time:
            raise SnapshotError(f"Session {s.id} ends before it starts")
        if s.goal_minutes is not None and s.goal_minutes < 0:
            raise SnapshotError(f"Session {s.id} has a negative goal")

    save_sessions(SessionsFile(sessions=list(snapshot.sessions)), root)
    logger.info(
        "Imported snapshot version %d with %d sessions", snapshot.version, len(snapshot.sessions)
    )
    run_hooks("on_snapshot_import", {"version": snapshot.version, "sessions": len(snapshot.sessions)}, root)
    return snapshot


def load_seed(path: Path, root: Path | None = None) -> DataSnapshot:
    """Seed the store from a snapshot file on disk."""
    if not path.exists():
        raise SnapshotError(f"Seed file {path} not found")
    try:
        data = read_json(path)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Seed file {path} is not valid JSON: {e}") from e
    return import_snapshot(data, root)
