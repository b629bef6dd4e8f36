"""LastFast core library: progress model, session store and helpers.

Public API re-exports for convenient imports:
    from lastfast import compute_progress, start_fast, stop_fast, ...
"""

# Progress model
from lastfast.progress import (
    FastingProgress,
    compute_progress,
    session_progress,
    elapsed_seconds,
    is_goal_met,
    remaining_minutes,
    progress_ratio,
    split_minutes,
    split_elapsed,
    projected_end_time,
)

# Models
from lastfast.models import (
    FastingSession,
    SessionsFile,
    DataSnapshot,
    Settings,
    Reminder,
    HistoryStats,
    DEFAULT_GOAL_MINUTES,
)

# Workspace & paths
from lastfast.workspace import (
    workspace_root,
    load_settings,
    get_user_timezone,
    now_local,
    sessions_path,
    settings_path,
    hooks_config_path,
    data_dir,
    snapshots_dir,
)

# Session store
from lastfast.store import (
    load_sessions,
    save_sessions,
    find_session,
    get_active_session,
    list_history,
    start_fast,
    start_fast_until,
    stop_fast,
    mark_celebration_shown,
    update_session,
    delete_session,
    clear_sessions,
)

# Goals
from lastfast.goals import (
    GoalMode,
    is_goal_valid,
    minutes_until,
    compute_goal_minutes,
    goal_minutes_from_hours,
)

# Formatting
from lastfast.formatting import (
    format_24h_time,
    hours_and_minutes,
    format_duration,
    format_duration_seconds,
    format_duration_long,
    format_duration_short,
    format_duration_natural,
    format_remaining_natural,
    format_goal_description,
)

# Status, reminders, stats
from lastfast.status import build_status, status_message, stop_message
from lastfast.reminders import plan_reminders
from lastfast.stats import compute_stats, chart_scale, bar_fraction

# Snapshots & hooks
from lastfast.snapshot import SnapshotError, export_snapshot, import_snapshot, load_seed
from lastfast.hooks import run_hooks, load_hooks_config

# Logging
from lastfast.log import configure_logging
