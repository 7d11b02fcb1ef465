from typing import Final

ISO_DATE_FORMAT: Final[str] = "%Y-%m-%d"
ISO_DATE_PATTERN: Final[str] = r"^\d{4}-\d{2}-\d{2}$"
MONTH_LABEL_FORMAT: Final[str] = "%B %Y"

DEFAULT_EXAM_NAME: Final[str] = "Exam"
DEFAULT_LIST_LIMIT: Final[int] = 10
MAX_LIST_LIMIT: Final[int] = 100

ID_PREFIXES: Final[dict[str, str]] = {
    "plan": "plan",
    "monthly": "monthly",
    "weekly": "week",
    "task": "task",
}

MAX_EVENTS: Final[int] = 300

PLAN_JSON_FORMAT: Final[str] = (
    """
{
    "examName": str,
    "month": str,
    "monthlyGoals": [str or {"goal": str}],
    "weeklyGoals": [
      {
        "weekNumber": int,
        "goal": str,
        "tasks": [{"name": str, "date": "YYYY-MM-DD"}]
      }
    ],
    "dailyTasks": [{"name": str, "date": "YYYY-MM-DD"}]
}
    """
)
