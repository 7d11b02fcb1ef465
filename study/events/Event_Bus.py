"""Simple Event Bus / Observer implementation for study plan notifications.

Event names used so far:
  task.completed / task.reopened -> payload {"task": dict, "plan_id": int, "user_id": str}
  weekly_goal.toggled -> payload {"goal": dict, "plan_id": int, "user_id": str}
  monthly_goal.toggled -> payload {"goal": dict, "plan_id": int, "user_id": str}
  plan.imported -> payload {"plan_id": int, "exam_name": str, "tasks": int, "user_id": str}
  plan.daily_reminder -> payload {"plan_id", "date", "count", "title", "body", "user_id"}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
TASK_COMPLETED = "task.completed"
TASK_REOPENED = "task.reopened"
WEEKLY_GOAL_TOGGLED = "weekly_goal.toggled"
MONTHLY_GOAL_TOGGLED = "monthly_goal.toggled"
PLAN_IMPORTED = "plan.imported"
PLAN_DAILY_REMINDER = "plan.daily_reminder"

ALL_EVENTS = (
	TASK_COMPLETED, TASK_REOPENED, WEEKLY_GOAL_TOGGLED,
	MONTHLY_GOAL_TOGGLED, PLAN_IMPORTED, PLAN_DAILY_REMINDER,
)


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def publish(self, event_name: str, payload: Any):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:  # pragma: no cover
				logger.exception("Error delivering %s to %r", event_name, cb)


# A singleton-like instance (can be imported)
GLOBAL_EVENT_BUS = EventBus()


def publish_event(event_name: str, payload: Any = None) -> None:
	"""Publish an event on the global bus (sugar function)."""
	GLOBAL_EVENT_BUS.publish(event_name, payload)


__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS', 'publish_event', 'ALL_EVENTS',
	'TASK_COMPLETED', 'TASK_REOPENED', 'WEEKLY_GOAL_TOGGLED',
	'MONTHLY_GOAL_TOGGLED', 'PLAN_IMPORTED', 'PLAN_DAILY_REMINDER',
]
