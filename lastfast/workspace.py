"""Workspace root, settings, timezone and path helpers for LastFast."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from lastfast.fileio import read_yaml
from lastfast.models import Settings

logger = logging.getLogger(__name__)


def workspace_root() -> Path:
    """Directory holding the ``lastfast/`` data folder (``$LASTFAST_ROOT``)."""
    return Path(
        os.environ.get("LASTFAST_ROOT", str(Path.home() / "lastfast"))
    ).expanduser().resolve()


def load_settings(root: Path | None = None) -> Settings:
    """Read settings.yaml, falling back to defaults for anything missing."""
    return Settings.from_dict(read_yaml(settings_path(root)))


def get_user_timezone(root: Path | None = None) -> ZoneInfo:
    """Timezone from settings.yaml, defaulting to UTC."""
    name = load_settings(root).timezone
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r in settings, using UTC", name)
        return ZoneInfo("UTC")


def now_local(root: Path | None = None) -> datetime:
    """Current instant in the user's timezone."""
    return datetime.now(get_user_timezone(root))


# ── Path helpers ──────────────────────────────────────────────

def data_dir(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "lastfast"


def sessions_path(root: Path | None = None) -> Path:
    return data_dir(root) / "sessions.json"


def settings_path(root: Path | None = None) -> Path:
    return data_dir(root) / "settings.yaml"


def hooks_config_path(root: Path | None = None) -> Path:
    return data_dir(root) / "hooks.yaml"


def snapshots_dir(root: Path | None = None) -> Path:
    return data_dir(root) / "snapshots"
