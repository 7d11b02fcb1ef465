"""Plan normalization: uploaded plan text -> canonical Plan.

Pipeline used by the upload endpoint and the importer:

    document = parse_document(text)      # ParseError on malformed input
    validate_document(document)          # ValidationError on missing sections
    plan = normalize_document(document)  # never fails on missing fields

Completion flags found in the input are ignored: every goal and task of a
freshly normalized plan starts out not completed.
"""
from __future__ import annotations
import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4

from study.domain.DailyTask import DailyTask
from study.domain.MonthlyGoal import MonthlyGoal
from study.domain.Plan import Plan
from study.domain.WeeklyGoal import WeeklyGoal
from study.logic.parsing.errors import ParseError, ValidationError
from study.logic.parsing.rules import (
    resolve,
    EXAM_NAME_RULES, MONTH_RULES, MONTHLY_GOAL_TEXT_RULES, WEEKLY_GOAL_TEXT_RULES,
    WEEK_NUMBER_RULES, WEEK_TASKS_RULES, TASK_NAME_RULES, TASK_DATE_RULES,
    MONTHLY_GOALS_RULES, WEEKLY_GOALS_RULES, STANDALONE_TASKS_RULES,
)
from study.utilities.constants import DEFAULT_EXAM_NAME, ID_PREFIXES, MONTH_LABEL_FORMAT

logger = logging.getLogger(__name__)

SECTION_KEYS = ("weeklyGoals", "monthlyGoals", "dailyTasks")


def _new_id(kind: str) -> str:
    return f"{ID_PREFIXES[kind]}-{uuid4().hex}"


def _present(value: Any) -> bool:
    # Empty lists and objects count as present; blanks, zero and false do not
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0
    return True


# -------------------- Decoding & validation --------------------
def parse_document(text) -> Dict[str, Any]:
    """Decode JSON text into a generic mapping."""
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError("Invalid JSON format") from e
    if not isinstance(text, str):
        raise ParseError("Invalid JSON format")
    try:
        document = json.loads(text)
    except (ValueError, RecursionError) as e:
        # ValueError also covers integer literals past the int conversion limit
        logger.info("Rejected plan input: %s", type(e).__name__)
        raise ParseError("Invalid JSON format") from e
    if not isinstance(document, dict):
        raise ParseError("Invalid JSON format: expected an object at the top level")
    return document


def validate_document(document: Dict[str, Any]) -> None:
    """Minimal shape check run before normalization."""
    if not isinstance(document, dict):
        raise ParseError("Invalid JSON format: expected an object at the top level")
    if not _present(document.get("examName")) and not _present(document.get("exam")):
        raise ValidationError("Missing examName field")
    if not any(_present(document.get(key)) for key in SECTION_KEYS):
        raise ValidationError("Must include at least one of: weeklyGoals, monthlyGoals, or dailyTasks")


def validate_plan_json(text) -> Tuple[bool, Optional[str]]:
    """Return (valid, error) for raw plan text without raising."""
    try:
        validate_document(parse_document(text))
    except ParseError:
        return False, "Invalid JSON format"
    except ValidationError as e:
        return False, e.reason
    return True, None


# -------------------- Normalization --------------------
def _normalize_task(raw: Any, kind: str, weekly_goal_id: Optional[str] = None) -> DailyTask:
    return DailyTask(
        id=_new_id(kind),
        name=resolve(raw, TASK_NAME_RULES, default=""),
        date=resolve(raw, TASK_DATE_RULES, default=""),
        completed=False,
        weekly_goal_id=weekly_goal_id,
    )


def _normalize_week(raw: Any, position: int) -> WeeklyGoal:
    week_id = _new_id("weekly")
    raw_tasks = resolve(raw, WEEK_TASKS_RULES, default=[])
    return WeeklyGoal(
        id=week_id,
        week_number=resolve(raw, WEEK_NUMBER_RULES, default=position),
        goal=resolve(raw, WEEKLY_GOAL_TEXT_RULES, default=f"Week {position}"),
        completed=False,
        tasks=[_normalize_task(t, "task", weekly_goal_id=week_id) for t in raw_tasks],
    )


def normalize_document(document: Dict[str, Any], *, now: Optional[datetime] = None) -> Plan:
    """Build a canonical Plan from a decoded document.

    ``now`` drives the generated month label and ``createdAt``.
    """
    if not isinstance(document, dict):
        raise ParseError("Invalid JSON format: expected an object at the top level")
    now = now or datetime.now()

    monthly_goals = [
        MonthlyGoal(id=_new_id("monthly"), goal=resolve(raw, MONTHLY_GOAL_TEXT_RULES, default=""), completed=False)
        for raw in resolve(document, MONTHLY_GOALS_RULES, default=[])
    ]
    weekly_goals = [
        _normalize_week(raw, position)
        for position, raw in enumerate(resolve(document, WEEKLY_GOALS_RULES, default=[]), start=1)
    ]

    daily_tasks: List[DailyTask] = [task for week in weekly_goals for task in week.tasks]
    daily_tasks.extend(
        _normalize_task(raw, "task") for raw in resolve(document, STANDALONE_TASKS_RULES, default=[])
    )

    plan = Plan(
        id=_new_id("plan"),
        exam_name=resolve(document, EXAM_NAME_RULES, default=DEFAULT_EXAM_NAME),
        month=resolve(document, MONTH_RULES, default=now.strftime(MONTH_LABEL_FORMAT)),
        monthly_goals=monthly_goals,
        weekly_goals=weekly_goals,
        daily_tasks=daily_tasks,
        created_at=now.isoformat(),
    )
    logger.info("Normalized plan '%s': %d monthly goals, %d weeks, %d tasks",
                plan.exam_name, len(monthly_goals), len(weekly_goals), len(daily_tasks))
    return plan


def parse_plan_json(text, *, now: Optional[datetime] = None) -> Plan:
    """Decode, validate and normalize raw plan text."""
    document = parse_document(text)
    validate_document(document)
    return normalize_document(document, now=now)


__all__ = [
    "parse_document", "validate_document", "validate_plan_json",
    "normalize_document", "parse_plan_json",
]
