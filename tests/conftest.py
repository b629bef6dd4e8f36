"""Shared test fixtures for LastFast tests."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path

import pytest
import yaml


T0 = datetime(2026, 2, 11, 20, 0, tzinfo=timezone.utc)


@pytest.fixture
def t0() -> datetime:
    """A fixed start instant: 2026-02-11 20:00 UTC."""
    return T0


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with settings and an empty session store."""
    root = tmp_path / "workspace"
    (root / "lastfast").mkdir(parents=True)

    settings = {
        "timezone": "UTC",
        "default_goal_minutes": 960,
        "reminder_lead_minutes": 60,
        "log_level": "DEBUG",
    }
    (root / "lastfast" / "settings.yaml").write_text(
        yaml.dump(settings, default_flow_style=False), encoding="utf-8"
    )

    os.environ["LASTFAST_ROOT"] = str(root)
    yield root
    if "LASTFAST_ROOT" in os.environ:
        del os.environ["LASTFAST_ROOT"]


@pytest.fixture
def write_hooks(workspace: Path):
    """Write a hooks.yaml into the workspace."""

    def _write(config: dict) -> Path:
        path = workspace / "lastfast" / "hooks.yaml"
        path.write_text(yaml.dump(config), encoding="utf-8")
        return path

    return _write
