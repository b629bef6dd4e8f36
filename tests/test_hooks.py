"""Tests for lastfast/hooks.py: hook system."""

import json

from lastfast.hooks import load_hooks_config, run_hooks


def test_run_hooks_no_config(workspace):
    """No hooks.yaml -> no hooks run."""
    assert load_hooks_config(workspace) == {}
    assert run_hooks("on_fast_start", {"goalMinutes": 960}, workspace) == []


def test_run_hooks_with_cat(workspace, write_hooks):
    """Context arrives on stdin as JSON."""
    write_hooks({"on_fast_stop": ["cat"]})

    results = run_hooks("on_fast_stop", {"goalMet": True}, workspace)
    assert len(results) == 1
    assert results[0]["exit_code"] == 0
    output = json.loads(results[0]["stdout"])
    assert output == {"hook": "on_fast_stop", "goalMet": True}


def test_run_hooks_invalid_hook_point(workspace):
    assert run_hooks("post_finalize", {}, workspace) == []


def test_run_hooks_failure_is_reported(workspace, write_hooks):
    write_hooks({"on_fast_start": ["exit 3", {"command": ""}, 42]})
    results = run_hooks("on_fast_start", {}, workspace)
    assert len(results) == 1
    assert results[0]["exit_code"] == 3


def test_run_hooks_timeout(workspace, write_hooks):
    write_hooks({"on_goal_met": [{"command": "sleep 10", "timeout": 1}]})

    results = run_hooks("on_goal_met", {}, workspace)
    assert len(results) == 1
    assert results[0]["exit_code"] == -1
    assert "timed out" in results[0].get("error", "").lower()


def test_run_hooks_bad_timeout_uses_default(workspace, write_hooks):
    write_hooks({"on_fast_start": [{"command": "cat", "timeout": "soon"}]})
    results = run_hooks("on_fast_start", {"goalMinutes": 60}, workspace)
    assert len(results) == 1
    assert results[0]["exit_code"] == 0
