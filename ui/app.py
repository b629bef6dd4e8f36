from __future__ import annotations

import logging
import os
import secrets
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator

from fastapi import Body, Depends, FastAPI, Form, HTTPException, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from lastfast import (
    SnapshotError,
    build_status,
    chart_scale,
    bar_fraction,
    compute_stats,
    configure_logging,
    delete_session,
    export_snapshot,
    format_24h_time,
    format_duration,
    get_active_session,
    get_user_timezone,
    goal_minutes_from_hours,
    import_snapshot,
    list_history,
    load_settings,
    mark_celebration_shown,
    now_local,
    plan_reminders,
    session_progress,
    split_elapsed,
    split_minutes,
    start_fast,
    start_fast_until,
    stop_fast,
    stop_message,
    update_session,
    workspace_root,
)
from lastfast.models import parse_instant

logger = logging.getLogger(__name__)


# ── HTML helpers ──────────────────────────────────────────────

def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _progress_bar(ratio: float) -> str:
    pct = round(ratio * 100, 1)
    return (
        '<div class="bar"><div class="fill" '
        f'style="width:{pct}%"></div></div><span class="muted">{pct}%</span>'
    )


PAGE_CSS = """
body { font-family: system-ui, sans-serif; max-width: 720px; margin: 2rem auto; padding: 0 1rem; }
.timer { font-size: 2.5rem; font-weight: 600; }
.met { color: #1a7f37; } .pending { color: #bc4c00; }
.bar { display: inline-block; width: 70%; height: 0.8rem; background: #eee; border-radius: 4px; }
.fill { height: 100%; background: #1a7f37; border-radius: 4px; }
.muted { color: #777; margin-left: 0.5rem; }
table { width: 100%; border-collapse: collapse; } td, th { padding: 0.3rem; border-bottom: 1px solid #eee; text-align: left; }
"""


# ── Auth ──────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging(load_settings().log_level)
    yield


app = FastAPI(title="LastFast", version="0.1.0", lifespan=lifespan)

security = HTTPBasic(auto_error=False)


def get_current_user(credentials: HTTPBasicCredentials | None = Depends(security)) -> str:
    expected_username = os.environ.get("LASTFAST_USERNAME", "")
    expected_password = os.environ.get("LASTFAST_PASSWORD", "")

    if not expected_username or not expected_password:
        return "guest"

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )

    correct_username = secrets.compare_digest(credentials.username.encode("utf-8"), expected_username.encode("utf-8"))
    correct_password = secrets.compare_digest(credentials.password.encode("utf-8"), expected_password.encode("utf-8"))

    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


def _parse_when(value: Any, field: str) -> datetime | None:
    try:
        return parse_instant(value)
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail=f"Invalid {field}: {value!r}")


def _parse_goal(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail=f"Invalid goal_minutes: {value!r}")


# ── Pages ─────────────────────────────────────────────────────

@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/", response_class=HTMLResponse)
def index(username: str = Depends(get_current_user)) -> HTMLResponse:
    root = workspace_root()
    tz = get_user_timezone(root)
    now = now_local(root)

    active = get_active_session(root)
    current = build_status(active, now, tz)

    parts = [f"<html><head><title>LastFast</title><style>{PAGE_CSS}</style></head><body>"]
    parts.append("<h1>LastFast</h1>")

    if active is not None:
        progress = current["progress"]
        css = "met" if progress["goalMet"] else "pending"
        parts.append(f'<div class="timer {css}">{_escape(current["timerText"])}</div>')
        parts.append(f'<p>Started at {_escape(current["startedAt"])}')
        if current["projectedEndAt"]:
            parts.append(f' &middot; goal at {_escape(current["projectedEndAt"])}')
            parts.append(f' &middot; {_escape(current["remainingText"])} left')
        parts.append("</p>")
        if progress["goalMinutes"] is not None:
            parts.append(_progress_bar(progress["progressRatio"]))
        parts.append('<form method="post" action="/stop"><button>Stop fast</button></form>')
    else:
        parts.append(f"<p>{_escape(current['message'])}</p>")
        default_hours = load_settings(root).default_goal_minutes / 60
        parts.append(
            '<form method="post" action="/start">'
            f'<input name="hours" type="number" step="0.5" min="0" value="{default_hours:g}"> hours '
            "<button>Start fast</button></form>"
        )

    history = list_history(root)
    stats = compute_stats(history, now)
    parts.append("<h2>History</h2>")
    if stats.average_duration is not None:
        parts.append(
            f"<p>{stats.total_fasts} fasts &middot; {stats.goals_met} goals met &middot; "
            f"average {format_duration(*split_elapsed(stats.average_duration))}</p>"
        )
    scale = chart_scale(history, now)
    parts.append("<table><tr><th>Date</th><th>Start</th><th>Duration</th><th>Goal</th><th></th></tr>")
    for session in history[:30]:
        progress = session_progress(session, now)
        goal = (
            format_duration(*split_minutes(session.goal_minutes))
            if session.goal_minutes is not None
            else "-"
        )
        mark = "&#10003;" if progress.goal_met else ("&#10007;" if session.goal_minutes is not None else "")
        parts.append(
            "<tr>"
            f"<td>{session.start_time.astimezone(tz).date().isoformat()}</td>"
            f"<td>{format_24h_time(session.start_time, tz)}</td>"
            f"<td>{format_duration(*progress.elapsed_hours_and_minutes)} "
            f"{_progress_bar(bar_fraction(session, scale, now))}</td>"
            f"<td>{goal}</td><td>{mark}</td>"
            "</tr>"
        )
    parts.append("</table></body></html>")
    return HTMLResponse("".join(parts))


@app.post("/start")
def start_form(hours: str = Form(""), username: str = Depends(get_current_user)) -> RedirectResponse:
    goal = None
    if hours.strip():
        try:
            goal = goal_minutes_from_hours(float(hours))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    try:
        start_fast(goal_minutes=goal)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return RedirectResponse(url="/", status_code=303)


@app.post("/stop")
def stop_form(username: str = Depends(get_current_user)) -> RedirectResponse:
    try:
        stop_fast()
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return RedirectResponse(url="/", status_code=303)


# ── Fast lifecycle API ────────────────────────────────────────

@app.get("/api/fast/current")
def api_current(username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Active fast with every derived value, sampled at one instant."""
    root = workspace_root()
    now = now_local(root)
    result = build_status(get_active_session(root), now, get_user_timezone(root))
    result["now"] = now.isoformat(timespec="seconds")
    return result


@app.post("/api/fast/start")
def api_start(payload: dict[str, Any] = Body(default={}), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Start a fast.

    Accepts one of ``goal_minutes``, ``hours`` or ``until`` (ISO instant);
    ``no_goal: true`` starts without a goal, nothing uses the default goal.
    ``start_time`` backdates the start.
    """
    root = workspace_root()
    now = now_local(root)
    start_time = _parse_when(payload.get("start_time"), "start_time")
    until = _parse_when(payload.get("until"), "until")
    hours_goal = None
    if payload.get("hours") is not None:
        try:
            hours_goal = goal_minutes_from_hours(float(payload["hours"]))
        except (TypeError, ValueError):
            raise HTTPException(status_code=400, detail=f"Invalid hours: {payload['hours']!r}")
    try:
        if until is not None:
            session = start_fast_until(until, now=now, root=root)
        elif hours_goal is not None:
            session = start_fast(goal_minutes=hours_goal, start_time=start_time, now=now, root=root)
        else:
            session = start_fast(
                goal_minutes=_parse_goal(payload.get("goal_minutes")),
                use_default_goal=not payload.get("no_goal", False),
                start_time=start_time,
                now=now,
                root=root,
            )
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"ok": True, "session": session.to_dict(), "status": build_status(session, now)}


@app.post("/api/fast/stop")
def api_stop(username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        session = stop_fast()
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {
        "ok": True,
        "session": session.to_dict(),
        "progress": session_progress(session).to_dict(),
        "message": stop_message(session),
    }


@app.get("/api/reminders")
def api_reminders(username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = workspace_root()
    now = now_local(root)
    lead = load_settings(root).reminder_lead_minutes
    reminders = plan_reminders(get_active_session(root), now, lead_minutes=lead)
    return {"reminders": [r.to_dict() for r in reminders]}


# ── History API ───────────────────────────────────────────────

@app.get("/api/history")
def api_history(limit: int = 50, username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = workspace_root()
    now = now_local(root)
    sessions = list_history(root)[: max(0, limit)]
    return {
        "count": len(sessions),
        "sessions": [
            {**s.to_dict(), "progress": session_progress(s, now).to_dict()}
            for s in sessions
        ],
    }


@app.get("/api/stats")
def api_stats(username: str = Depends(get_current_user)) -> dict[str, Any]:
    root = workspace_root()
    now = now_local(root)
    history = list_history(root)
    return {**compute_stats(history, now).to_dict(), "chartScale": chart_scale(history, now)}


@app.put("/api/sessions/{session_id}")
def api_update_session(session_id: str, payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    """Edit a fast. Only keys present in the payload change."""
    changes: dict[str, Any] = {}
    if "start_time" in payload:
        changes["start_time"] = _parse_when(payload["start_time"], "start_time")
    if "end_time" in payload:
        changes["end_time"] = _parse_when(payload["end_time"], "end_time")
    if "goal_minutes" in payload:
        changes["goal_minutes"] = _parse_goal(payload["goal_minutes"])
    try:
        session = update_session(session_id, **changes)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"ok": True, "session": session.to_dict()}


@app.delete("/api/sessions/{session_id}")
def api_delete_session(session_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        delete_session(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return {"ok": True, "deleted": session_id}


@app.post("/api/sessions/{session_id}/celebrated")
def api_mark_celebrated(session_id: str, username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        session = mark_celebration_shown(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return {"ok": True, "session": session.to_dict()}


# ── Snapshots ─────────────────────────────────────────────────

@app.post("/api/snapshot/export")
def api_export_snapshot(username: str = Depends(get_current_user)) -> dict[str, Any]:
    path = export_snapshot()
    return {"ok": True, "path": str(path)}


@app.post("/api/snapshot/import")
def api_import_snapshot(payload: dict[str, Any] = Body(...), username: str = Depends(get_current_user)) -> dict[str, Any]:
    try:
        snapshot = import_snapshot(payload)
    except SnapshotError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"ok": True, "version": snapshot.version, "sessions": len(snapshot.sessions)}


def main() -> None:
    import uvicorn

    uvicorn.run(
        "ui.app:app",
        host=os.environ.get("LASTFAST_HOST", "127.0.0.1"),
        port=int(os.environ.get("LASTFAST_PORT", "8765")),
    )


if __name__ == "__main__":
    main()
