"""Notification feed for the dashboard, fed from the global event bus.

Every study plan event (task and goal toggles, imports, daily reminders) is
flattened into a small record and kept in a per-process buffer that
``GET /api/notifications`` polls.

  * Records carry an increasing integer id; clients pass the last id they saw
    as ``since`` and get only newer records back.
  * Records carry the acting user's id so each user only sees their own feed.
  * At most MAX_EVENTS records are kept, oldest dropped first.
"""
from __future__ import annotations
from typing import List, Dict, Any
from threading import Lock
from datetime import datetime, timezone

from study.utilities.constants import MAX_EVENTS
from .Event_Bus import GLOBAL_EVENT_BUS, ALL_EVENTS

_lock = Lock()
_events: List[Dict[str, Any]] = []
_next_id = 1
_started = False


def _record(event_name: str, payload: Any):  # signature expected by EventBus
    global _next_id
    with _lock:
        evt: Dict[str, Any] = {
            'id': _next_id,
            'type': event_name,
            'ts': datetime.now(timezone.utc).isoformat(),
        }
        if isinstance(payload, dict):
            evt['plan_id'] = payload.get('plan_id')
            evt['user_id'] = payload.get('user_id')
            item = payload.get('task') or payload.get('goal')
            if isinstance(item, dict):
                evt['item_id'] = item.get('id')
                evt['label'] = item.get('name') or item.get('goal') or ''
                evt['completed'] = bool(item.get('completed'))
            for k in ('count', 'title', 'body', 'date', 'exam_name', 'tasks'):
                if k in payload:
                    evt[k] = payload[k]
        _events.append(evt)
        _next_id += 1
        # Trim buffer
        if len(_events) > MAX_EVENTS:
            del _events[: len(_events) - MAX_EVENTS]


def start():
    """Idempotent start: subscribe observers once."""
    global _started
    if _started:
        return
    for event_name in ALL_EVENTS:
        GLOBAL_EVENT_BUS.subscribe(event_name, _record)
    _started = True


def get_events(since: int | None = None, user_id: str | None = None) -> Dict[str, Any]:
    """Return events newer than 'since' (exclusive).

    If since is None, returns the last N (up to MAX_EVENTS) events. With user_id only
    that user's events are returned.
    Response includes next_cursor (largest id returned, else 'since') so client can
    poll with since=next_cursor.
    """
    with _lock:
        if since is None:
            data = list(_events)
        else:
            data = [e for e in _events if e['id'] > since]
        if user_id is not None:
            data = [e for e in data if e.get('user_id') == user_id]
        next_cursor = data[-1]['id'] if data else since or 0
    return {'events': data, 'next_cursor': next_cursor}


def clear():
    """Drop buffered events (the cursor keeps counting)."""
    with _lock:
        _events.clear()


__all__ = ['start', 'get_events', 'clear']
