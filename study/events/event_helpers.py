"""Event helper utilities.

Publishing helpers for study plan events on the global event bus.

Quick import:
    from study.events.event_helpers import (
        publish_task_toggled, publish_goal_toggled, publish_plan_imported,
        publish_daily_reminder
    )
"""
from __future__ import annotations
from typing import Any, Dict, Optional
from .Event_Bus import (
    publish_event,
    TASK_COMPLETED, TASK_REOPENED, WEEKLY_GOAL_TOGGLED, MONTHLY_GOAL_TOGGLED,
    PLAN_IMPORTED, PLAN_DAILY_REMINDER,
)

__all__ = [
    'publish_task_toggled', 'publish_goal_toggled', 'publish_plan_imported',
    'publish_daily_reminder',
]


def publish_task_toggled(task: Dict[str, Any], plan_id: int, user_id: Optional[str] = None):
    """Publish task.completed or task.reopened depending on the new flag."""
    event_name = TASK_COMPLETED if task.get('completed') else TASK_REOPENED
    publish_event(event_name, {'task': task, 'plan_id': plan_id, 'user_id': user_id})


def publish_goal_toggled(kind: str, goal: Dict[str, Any], plan_id: int, user_id: Optional[str] = None):
    """Publish weekly_goal.toggled or monthly_goal.toggled (kind is 'weekly' or 'monthly')."""
    if kind not in ('weekly', 'monthly'):
        raise ValueError(f"Unknown goal kind: {kind}")
    event_name = WEEKLY_GOAL_TOGGLED if kind == 'weekly' else MONTHLY_GOAL_TOGGLED
    publish_event(event_name, {'goal': goal, 'plan_id': plan_id, 'user_id': user_id})


def publish_plan_imported(plan_id: int, exam_name: str, tasks: int, user_id: Optional[str] = None):
    publish_event(PLAN_IMPORTED, {'plan_id': plan_id, 'exam_name': exam_name, 'tasks': tasks, 'user_id': user_id})


def publish_daily_reminder(reminder: Optional[Dict[str, Any]], user_id: Optional[str] = None):
    """Publish a plan.daily_reminder event; a None reminder (nothing due today) is skipped.

    Payload structure:
        { 'plan_id', 'date', 'count', 'title', 'body', 'user_id' }
    """
    if not reminder:
        return
    publish_event(PLAN_DAILY_REMINDER, dict(reminder, user_id=user_id))
