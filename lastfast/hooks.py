"""Lifecycle hooks for LastFast.

Hooks are shell commands configured in lastfast/hooks.yaml, keyed by hook
point. Each command receives the event context as JSON on stdin, e.g. to
refresh a status bar or post to a home-automation endpoint.

Hook points:
- on_fast_start, on_fast_stop
- on_goal_met
- on_snapshot_import
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any

from lastfast.fileio import read_yaml
from lastfast.workspace import hooks_config_path, workspace_root

logger = logging.getLogger(__name__)

VALID_HOOK_POINTS = {
    "on_fast_start",
    "on_fast_stop",
    "on_goal_met",
    "on_snapshot_import",
}

DEFAULT_TIMEOUT = 30
OUTPUT_LIMIT = 4096


def load_hooks_config(root: Path | None = None) -> dict[str, Any]:
    """Load hooks.yaml; a missing file means no hooks."""
    return read_yaml(hooks_config_path(root))


def _normalize(hook: Any) -> tuple[str, float]:
    if isinstance(hook, str):
        return hook, DEFAULT_TIMEOUT
    if isinstance(hook, dict):
        try:
            timeout = float(hook.get("timeout", DEFAULT_TIMEOUT))
        except (TypeError, ValueError):
            logger.warning("Bad timeout %r in hooks.yaml, using %ss", hook.get("timeout"), DEFAULT_TIMEOUT)
            timeout = DEFAULT_TIMEOUT
        return str(hook.get("command", "")), timeout
    return "", DEFAULT_TIMEOUT


def run_hooks(
    hook_point: str,
    context: dict[str, Any],
    root: Path | None = None,
) -> list[dict[str, Any]]:
    """Run every command registered for *hook_point*.

    Failures are reported in the returned results, never raised.
    """
    if hook_point not in VALID_HOOK_POINTS:
        logger.warning("Ignoring unknown hook point %r", hook_point)
        return []

    if root is None:
        root = workspace_root()

    hooks = load_hooks_config(root).get(hook_point) or []
    if not isinstance(hooks, list):
        return []

    payload = json.dumps({"hook": hook_point, **context}, ensure_ascii=False)
    results = []

    for hook in hooks:
        command, timeout = _normalize(hook)
        if not command:
            continue

        result: dict[str, Any] = {"command": command, "hook_point": hook_point}
        try:
            proc = subprocess.run(
                command,
                shell=True,
                input=payload,
                capture_output=True,
                text=True,
                timeout=timeout,
                cwd=str(root),
            )
            result["exit_code"] = proc.returncode
            result["stdout"] = proc.stdout[:OUTPUT_LIMIT]
            result["stderr"] = proc.stderr[:OUTPUT_LIMIT]
            if proc.returncode != 0:
                logger.warning("Hook %r exited with %d", command, proc.returncode)
        except subprocess.TimeoutExpired:
            result["exit_code"] = -1
            result["error"] = f"Hook timed out after {timeout:g}s"
            logger.warning("Hook %r timed out after %ss", command, timeout)
        except OSError as e:
            result["exit_code"] = -1
            result["error"] = str(e)
            logger.warning("Hook %r failed: %s", command, e)

        results.append(result)

    return results
