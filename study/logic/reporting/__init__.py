"""Read-only progress metrics derived from a canonical Plan."""
from study.logic.reporting.progress import (
    compute_progress,
    compute_week_task_progress,
    split_tasks_by_day,
    build_daily_reminder,
)

__all__ = ["compute_progress", "compute_week_task_progress", "split_tasks_by_day", "build_daily_reminder"]
