"""Field extraction rules for loosely-shaped plan documents.

Every rule is a pure function ``(element) -> Optional[value]``. A field is
resolved by applying its rules in priority order; the first rule returning a
value other than ``None`` wins, otherwise the field default is used.

    resolve(week, WEEK_NUMBER_RULES, default=position)
"""
from __future__ import annotations
from typing import Any, Callable, Iterable, Optional, Sequence

Rule = Callable[[Any], Optional[Any]]


def resolve(element: Any, rules: Iterable[Rule], default: Any = None) -> Any:
    for rule in rules:
        value = rule(element)
        if value is not None:
            return value
    return default


def text_key(key: str) -> Rule:
    """Non-blank string stored under ``key``."""
    def rule(element: Any) -> Optional[str]:
        if not isinstance(element, dict):
            return None
        value = element.get(key)
        if isinstance(value, str) and value.strip():
            return value
        return None
    rule.__name__ = f"text_key({key!r})"
    return rule


def positive_int_key(key: str) -> Rule:
    """Positive integer (or digit string) stored under ``key``."""
    def rule(element: Any) -> Optional[int]:
        if not isinstance(element, dict):
            return None
        value = element.get(key)
        # bool is an int subclass
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value if value > 0 else None
        if isinstance(value, float) and value.is_integer() and value > 0:
            return int(value)
        if isinstance(value, str) and value.strip().isdigit():
            number = int(value.strip())
            return number if number > 0 else None
        return None
    rule.__name__ = f"positive_int_key({key!r})"
    return rule


def list_key(key: str) -> Rule:
    """List stored under ``key``."""
    def rule(element: Any) -> Optional[list]:
        if not isinstance(element, dict):
            return None
        value = element.get(key)
        return value if isinstance(value, list) else None
    rule.__name__ = f"list_key({key!r})"
    return rule


def plain_string(element: Any) -> Optional[str]:
    """The element itself when it is a bare string (used verbatim, even if blank)."""
    return element if isinstance(element, str) else None


def date_key(key: str) -> Rule:
    """Date string stored under ``key``, kept as written (no parsing, no defaulting)."""
    def rule(element: Any) -> Optional[str]:
        if not isinstance(element, dict):
            return None
        value = element.get(key)
        if isinstance(value, str) and value:
            return value
        return None
    rule.__name__ = f"date_key({key!r})"
    return rule


# --- Field policies (first present wins) ------------------------------------------
EXAM_NAME_RULES: Sequence[Rule] = (text_key("examName"), text_key("exam"))
MONTH_RULES: Sequence[Rule] = (text_key("month"),)
MONTHLY_GOAL_TEXT_RULES: Sequence[Rule] = (plain_string, text_key("goal"), text_key("name"))
WEEKLY_GOAL_TEXT_RULES: Sequence[Rule] = (text_key("goal"), text_key("name"))
WEEK_NUMBER_RULES: Sequence[Rule] = (positive_int_key("weekNumber"), positive_int_key("week"))
WEEK_TASKS_RULES: Sequence[Rule] = (list_key("tasks"), list_key("dailyTasks"))
TASK_NAME_RULES: Sequence[Rule] = (plain_string, text_key("name"), text_key("task"))
TASK_DATE_RULES: Sequence[Rule] = (date_key("date"),)

MONTHLY_GOALS_RULES: Sequence[Rule] = (list_key("monthlyGoals"),)
WEEKLY_GOALS_RULES: Sequence[Rule] = (list_key("weeklyGoals"),)
STANDALONE_TASKS_RULES: Sequence[Rule] = (list_key("dailyTasks"),)

__all__ = [
    "Rule", "resolve", "text_key", "positive_int_key", "list_key", "plain_string", "date_key",
    "EXAM_NAME_RULES", "MONTH_RULES", "MONTHLY_GOAL_TEXT_RULES", "WEEKLY_GOAL_TEXT_RULES",
    "WEEK_NUMBER_RULES", "WEEK_TASKS_RULES", "TASK_NAME_RULES", "TASK_DATE_RULES",
    "MONTHLY_GOALS_RULES", "WEEKLY_GOALS_RULES", "STANDALONE_TASKS_RULES",
]
