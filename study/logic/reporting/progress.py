"""Progress aggregation for the dashboard.

All functions are pure: they read the plan's current flags and return fresh
values, so calling them repeatedly on an unchanged plan gives identical results.
"Today" is always passed in by the caller (``date`` or ISO ``YYYY-MM-DD``
string) and matched against task dates by plain string equality.
"""
from __future__ import annotations
from datetime import date as _date
from typing import Any, Dict, List, Optional, Union

from study.domain.Plan import Plan
from study.domain.Progress import PlanProgress
from study.domain.WeeklyGoal import WeeklyGoal
from study.utilities.constants import ISO_DATE_FORMAT

DateLike = Union[_date, str]


def _day_key(today: DateLike) -> str:
    if isinstance(today, _date):
        return today.strftime(ISO_DATE_FORMAT)
    return str(today)


def _percentage(completed: int, total: int) -> int:
    """Nearest integer percentage, halves rounded up; 0 for an empty total."""
    if total <= 0:
        return 0
    return (200 * completed + total) // (2 * total)


def compute_progress(plan: Plan, today: DateLike) -> PlanProgress:
    """Aggregate completion counts of a plan.

    Overall counts use the flat ``daily_tasks`` list only, so tasks nested under
    weekly goals are not counted twice. Weekly and monthly counts use each
    goal's own ``completed`` flag.
    """
    day = _day_key(today)
    tasks = plan.daily_tasks
    completed_tasks = sum(1 for t in tasks if t.completed)
    todays = [t for t in tasks if t.date and t.date == day]

    return PlanProgress(
        total_tasks=len(tasks),
        completed_tasks=completed_tasks,
        percentage=_percentage(completed_tasks, len(tasks)),
        daily_total=len(todays),
        daily_completed=sum(1 for t in todays if t.completed),
        weekly_total=len(plan.weekly_goals),
        weekly_completed=sum(1 for w in plan.weekly_goals if w.completed),
        monthly_total=len(plan.monthly_goals),
        monthly_completed=sum(1 for g in plan.monthly_goals if g.completed),
    )


def compute_week_task_progress(weekly_goal: WeeklyGoal) -> Dict[str, int]:
    """Task ratio inside one week. Informational only: the week's own flag is left alone."""
    total = len(weekly_goal.tasks)
    completed = len(weekly_goal.completed_tasks())
    return {"completed": completed, "total": total, "percentage": _percentage(completed, total)}


def split_tasks_by_day(plan: Plan, today: DateLike) -> Dict[str, List[Any]]:
    """Group the flat task list into today / upcoming / past / unscheduled.

    Dates are compared as ISO strings. Upcoming tasks are sorted soonest first,
    past tasks most recent first.
    """
    day = _day_key(today)
    todays, upcoming, past, unscheduled = [], [], [], []
    for task in plan.daily_tasks:
        if not task.date:
            unscheduled.append(task)
        elif task.date == day:
            todays.append(task)
        elif task.date > day:
            upcoming.append(task)
        else:
            past.append(task)
    upcoming.sort(key=lambda t: t.date)
    past.sort(key=lambda t: t.date, reverse=True)
    return {"today": todays, "upcoming": upcoming, "past": past, "unscheduled": unscheduled}


def build_daily_reminder(plan: Plan, today: DateLike) -> Optional[Dict[str, Any]]:
    """Reminder payload for the tasks dated today, or None when there are none."""
    day = _day_key(today)
    count = sum(1 for t in plan.daily_tasks if t.date == day)
    if count == 0:
        return None
    suffix = "" if count == 1 else "s"
    return {
        "plan_id": plan.id,
        "date": day,
        "count": count,
        "title": "Daily Study Reminder",
        "body": f"You have {count} task{suffix} to complete today!",
    }


__all__ = ["compute_progress", "compute_week_task_progress", "split_tasks_by_day", "build_daily_reminder"]
