"""Tests for lastfast/snapshot.py: export, import and seeding."""

import json
from datetime import timedelta

import pytest

from lastfast.snapshot import SnapshotError, export_snapshot, import_snapshot, load_seed
from lastfast.store import get_active_session, list_history, start_fast, stop_fast


def _seed_history(workspace, t0):
    start_fast(goal_minutes=720, now=t0, root=workspace)
    stop_fast(now=t0 + timedelta(hours=13), root=workspace)
    start_fast(goal_minutes=960, now=t0 + timedelta(days=1), root=workspace)


def test_export_writes_versioned_file(workspace, t0):
    _seed_history(workspace, t0)
    path = export_snapshot(workspace, now=t0 + timedelta(days=1, hours=1))

    assert path.parent == workspace / "lastfast" / "snapshots"
    assert path.name == "snapshot_2026-02-12T21-00-00.json"
    data = json.loads(path.read_text())
    assert data["version"] == 1
    assert len(data["sessions"]) == 2
    assert data["sessions"][0]["goalMinutes"] == 960


def test_import_replaces_sessions(workspace, t0):
    _seed_history(workspace, t0)
    path = export_snapshot(workspace, now=t0 + timedelta(days=2))
    exported = path.read_text()

    start = t0 + timedelta(days=5)
    import_snapshot(
        {"version": 1, "sessions": [{"id": "only", "startTime": start.isoformat()}]},
        workspace,
    )
    assert [s.id for s in list_history(workspace, include_active=True)] == ["only"]

    snapshot = import_snapshot(exported, workspace)
    assert len(snapshot.sessions) == 2
    assert get_active_session(workspace).goal_minutes == 960


def test_import_rejects_bad_data(workspace):
    with pytest.raises(SnapshotError, match="not valid JSON"):
        import_snapshot("{nope", workspace)
    with pytest.raises(SnapshotError):
        import_snapshot({"version": 1}, workspace)
    with pytest.raises(SnapshotError):
        import_snapshot("[1, 2]", workspace)
    with pytest.raises(SnapshotError):
        import_snapshot({"sessions": [{"id": "no-start"}]}, workspace)


def test_import_rejects_two_active(workspace, t0):
    sessions = [
        {"id": "a", "startTime": t0.isoformat()},
        {"id": "b", "startTime": (t0 + timedelta(hours=1)).isoformat()},
    ]
    with pytest.raises(SnapshotError, match="more than one active"):
        import_snapshot({"sessions": sessions}, workspace)


def test_load_seed(workspace, t0, tmp_path):
    seed = tmp_path / "seed.json"
    seed.write_text(json.dumps({
        "version": 1,
        "exportDate": t0.isoformat(),
        "sessions": [
            {"id": "s1", "startTime": t0.isoformat(), "endTime": (t0 + timedelta(hours=16)).isoformat(), "goalMinutes": 960},
        ],
    }))
    snapshot = load_seed(seed, workspace)
    assert snapshot.sessions[0].id == "s1"
    assert list_history(workspace)[0].goal_minutes == 960

    with pytest.raises(SnapshotError, match="not found"):
        load_seed(tmp_path / "missing.json", workspace)


def test_import_rejects_malformed_session_entry(workspace):
    with pytest.raises(SnapshotError, match="must be an object"):
        import_snapshot({"sessions": ["x"]}, workspace)
    with pytest.raises(SnapshotError):
        import_snapshot({"sessions": [None]}, workspace)


def test_import_checks_session_invariants(workspace, t0):
    backwards = {
        "id": "b",
        "startTime": t0.isoformat(),
        "endTime": (t0 - timedelta(hours=1)).isoformat(),
    }
    with pytest.raises(SnapshotError, match="ends before it starts"):
        import_snapshot({"sessions": [backwards]}, workspace)

    negative = {"id": "n", "startTime": t0.isoformat(), "goalMinutes": -5}
    with pytest.raises(SnapshotError, match="negative goal"):
        import_snapshot({"sessions": [negative]}, workspace)

    assert list_history(workspace, include_active=True) == []
