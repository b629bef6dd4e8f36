"""Atomic JSON/YAML file helpers for the LastFast data directory."""

from __future__ import annotations

import fcntl
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


def read_json(path: Path) -> dict[str, Any]:
    """Load a JSON object from *path*; a missing or blank file reads as {}."""
    if not path.exists():
        return {}
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    data = json.loads(text)
    return data if isinstance(data, dict) else {}


def read_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML mapping from *path*; anything but a mapping reads as {}."""
    if not path.exists():
        return {}
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    data = yaml.safe_load(text)
    return data if isinstance(data, dict) else {}


def _replace_atomically(path: Path, content: str, suffix: str) -> None:
    # Readers never observe a half-written file: write a sibling temp file
    # under an exclusive lock, fsync, then rename over the target.
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=".tmp_", suffix=suffix)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
            try:
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
            finally:
                fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
        os.replace(temp_path, path)
    except Exception:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        logger.warning("Failed to write %s", path)
        raise


def write_json_atomic(path: Path, data: dict[str, Any]) -> None:
    _replace_atomically(
        path,
        json.dumps(data, indent=2, ensure_ascii=False, sort_keys=True) + "\n",
        suffix=".json",
    )
