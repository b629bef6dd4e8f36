#!/usr/bin/env python3
"""LastFast TUI: fasting timer and history in the terminal, powered by Textual."""

from __future__ import annotations

import logging
import sys

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.reactive import reactive
from textual.widgets import DataTable, Footer, Header, Label, ProgressBar, Static

from lastfast import (
    build_status,
    GoalMode,
    compute_goal_minutes,
    compute_stats,
    configure_logging,
    data_dir,
    format_24h_time,
    format_duration,
    format_goal_description,
    get_active_session,
    get_user_timezone,
    list_history,
    load_settings,
    mark_celebration_shown,
    now_local,
    session_progress,
    split_elapsed,
    split_minutes,
    start_fast,
    stop_fast,
    stop_message,
    workspace_root,
)

logger = logging.getLogger(__name__)

GOAL_PRESETS_HOURS = [12, 13, 14, 16, 18, 20, 24, 36]


# ── Stylesheet ─────────────────────────────────────────────────

CSS = """
Screen {
    background: $surface;
}

#timer-pane {
    height: auto;
    padding: 1 2;
    border: tall $primary-background-darken-2;
}

#timer {
    text-style: bold;
    content-align: center middle;
    height: 3;
}

.goal-met #timer {
    color: $success;
}

.goal-pending #timer {
    color: $warning;
}

#goal-progress {
    width: 100%;
    margin: 1 0;
}

#timer-info {
    height: auto;
    color: $text-muted;
}

.section-title {
    text-style: bold;
    color: $text;
    margin: 1 0 0 0;
    padding: 0 1;
}

#history-screen {
    padding: 1 2;
}

#stats-info {
    height: auto;
    padding: 1 2;
    margin: 0 0 1 0;
    border: tall $primary-background-darken-2;
}

#history-table {
    height: 1fr;
}
"""


# ── Screens ────────────────────────────────────────────────────


class HistoryScreen(Vertical):
    """Completed fasts as a data table plus summary stats."""

    def compose(self) -> ComposeResult:
        yield Label("History", classes="section-title")
        yield Static(id="stats-info")
        yield DataTable(id="history-table")

    def on_mount(self) -> None:
        root = workspace_root()
        tz = get_user_timezone(root)
        now = now_local(root)
        history = list_history(root)
        stats = compute_stats(history, now)

        info = [f"Total fasts: {stats.total_fasts}", f"Goals met: {stats.goals_met}"]
        if stats.average_duration is not None:
            info.append(f"Average: {format_duration(*split_elapsed(stats.average_duration))}")
            info.append(f"Longest: {format_duration(*split_elapsed(stats.longest_duration))}")
        self.query_one("#stats-info", Static).update("   ".join(info))

        table: DataTable = self.query_one("#history-table", DataTable)
        table.add_columns("Date", "Start", "End", "Duration", "Goal", "Met")
        for session in history:
            progress = session_progress(session, now)
            goal = (
                format_duration(*split_minutes(session.goal_minutes))
                if session.goal_minutes is not None
                else "-"
            )
            met = ("yes" if progress.goal_met else "no") if progress.has_goal else "-"
            table.add_row(
                session.start_time.astimezone(tz).date().isoformat(),
                format_24h_time(session.start_time, tz),
                format_24h_time(session.end_time, tz) if session.end_time else "",
                format_duration(*progress.elapsed_hours_and_minutes),
                goal,
                met,
            )


# ── Main app ───────────────────────────────────────────────────


class LastFastApp(App):
    """LastFast: fasting timer."""

    TITLE = "LastFast"
    CSS = CSS
    AUTO_FOCUS = None

    BINDINGS = [
        Binding("space", "toggle_fast", "Start/Stop"),
        Binding("g", "next_goal", "Goal"),
        Binding("h", "show_history", "History"),
        Binding("d", "show_timer", "Timer"),
        Binding("q", "quit", "Quit"),
    ]

    current_view: reactive[str] = reactive("timer")

    def __init__(self) -> None:
        super().__init__()
        self._root = workspace_root()
        self._tz = get_user_timezone(self._root)
        default_goal = load_settings(self._root).default_goal_minutes
        self._goal_minutes = default_goal
        self._active = get_active_session(self._root)
        self._celebrated: set[str] = set()

    def compose(self) -> ComposeResult:
        yield Header()
        yield Horizontal(
            Vertical(
                Static(id="timer"),
                ProgressBar(id="goal-progress", total=1.0, show_eta=False),
                Static(id="timer-info"),
                id="timer-pane",
            ),
            id="main-layout",
        )
        yield Footer()

    def on_mount(self) -> None:
        self._refresh_timer()
        self.set_interval(1.0, self._refresh_timer)

    # ── Rendering ──────────────────────────────────────────────

    def _refresh_timer(self) -> None:
        """Re-derive everything from one sampled instant."""
        now = now_local(self._root)
        session = self._active
        pane = self.query_one("#timer-pane", Vertical)
        timer = self.query_one("#timer", Static)
        info = self.query_one("#timer-info", Static)
        bar = self.query_one("#goal-progress", ProgressBar)

        if session is None:
            pane.remove_class("goal-met", "goal-pending")
            timer.update("Not fasting")
            bar.update(progress=0)
            info.update(
                f"Next goal: {format_goal_description(self._goal_minutes)}  "
                "(g to change, space to start)"
            )
            self.sub_title = ""
            return

        status = build_status(session, now, self._tz)
        progress = session_progress(session, now)
        timer.update(status["timerText"])
        bar.update(progress=progress.progress_ratio)
        pane.set_class(progress.goal_met, "goal-met")
        pane.set_class(progress.has_goal and not progress.goal_met, "goal-pending")

        lines = [f"Started {status['startedAt']}"]
        if progress.has_goal:
            lines.append(f"Goal at {status['projectedEndAt']}  ({status['remainingText']} left)")
        lines.append(status["message"])
        info.update("\n".join(lines))
        self.sub_title = status["elapsedText"]

        if status["celebrate"] and session.id not in self._celebrated:
            self._celebrated.add(session.id)
            self._celebrate(session.id)

    @work(thread=True, exclusive=True, group="celebrate")
    def _celebrate(self, session_id: str) -> None:
        try:
            marked = mark_celebration_shown(session_id, root=self._root)
        except (KeyError, OSError, ValueError) as e:
            logger.warning("Could not record celebration: %s", e)
            return
        if marked.is_active:
            self._active = marked
        self.call_from_thread(
            self.notify, "You reached your fasting goal!", title="Goal met", severity="information"
        )

    # ── Actions ────────────────────────────────────────────────

    def action_next_goal(self) -> None:
        if self._active is not None:
            self.notify("Stop the current fast to change the goal.", severity="warning")
            return
        hours = self._goal_minutes / 60
        later = [h for h in GOAL_PRESETS_HOURS if h > hours]
        self._goal_minutes = compute_goal_minutes(
            GoalMode.DURATION, selected_hours=later[0] if later else GOAL_PRESETS_HOURS[0]
        )
        self._refresh_timer()

    def action_toggle_fast(self) -> None:
        self._toggle_fast()

    @work(thread=True, exclusive=True, group="store")
    def _toggle_fast(self) -> None:
        try:
            if self._active is None:
                self._active = start_fast(goal_minutes=self._goal_minutes, root=self._root)
                message, title = "Fast started. Good luck!", "Started"
            else:
                stopped = stop_fast(root=self._root)
                self._active = None
                message, title = stop_message(stopped), "Stopped"
        except ValueError as e:
            self.call_from_thread(self.notify, str(e), title="Error", severity="error")
            self._active = get_active_session(self._root)
            return
        self.call_from_thread(self.notify, message, title=title, severity="information")
        self.call_from_thread(self._refresh_timer)

    def action_show_history(self) -> None:
        if self.current_view == "history":
            self.action_show_timer()
            return
        self._switch_to("history")

    def action_show_timer(self) -> None:
        self._switch_to("timer")

    def _switch_to(self, view: str) -> None:
        main = self.query_one("#main-layout", Horizontal)
        for old in self.query(".overlay-screen"):
            old.remove()

        pane = self.query_one("#timer-pane")
        if view == "timer":
            pane.display = True
        else:
            pane.display = False
            main.mount(HistoryScreen(id="history-screen", classes="overlay-screen"))
        self.current_view = view


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    root = workspace_root()
    if not root.exists():
        print(f"Workspace not found: {root}")
        print("Set LASTFAST_ROOT or create the directory first.")
        sys.exit(1)
    configure_logging(load_settings(root).log_level, filename=data_dir(root) / "lastfast.log")

    app = LastFastApp()
    app.run()


if __name__ == "__main__":
    main()
