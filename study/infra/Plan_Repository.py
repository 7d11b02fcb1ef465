"""Plan repository: JSON file store for study plans, goals and tasks.

The file holds one table per entity, rows keyed by numeric ids, plus an id
counter per table:

    {
      "counters": {"plans": 3, "monthly_goals": 7, ...},
      "plans": [{id, userId, examName, month, createdAt, updatedAt}],
      "monthly_goals": [{id, studyPlanId, goal, completed, createdAt}],
      "weekly_goals": [{id, studyPlanId, weekNumber, goal, completed, createdAt}],
      "daily_tasks": [{id, studyPlanId, weeklyGoalId, name, date, completed, createdAt}]
    }

Every public method checks that the plan belongs to the calling user. Each
mutation runs load -> change -> atomic write under one process-wide lock, so
readers never see a half-applied change.
"""
import json
import logging
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from threading import RLock
from typing import Any, Dict, List, Optional

from study.domain.DailyTask import DailyTask
from study.domain.MonthlyGoal import MonthlyGoal
from study.domain.Plan import Plan
from study.domain.WeeklyGoal import WeeklyGoal
from study.infra.paths import PLANS_FILE
from study.utilities.constants import DEFAULT_LIST_LIMIT, MAX_LIST_LIMIT

logger = logging.getLogger(__name__)

TABLES = ("plans", "monthly_goals", "weekly_goals", "daily_tasks")

_lock = RLock()


class RecordNotFoundError(LookupError):
    """No row with the requested id (or it is not part of the requested plan)."""


class OwnershipError(PermissionError):
    """The row exists but belongs to another user's plan."""


def _now() -> str:
    return datetime.now().isoformat()


def _empty_store() -> Dict[str, Any]:
    store: Dict[str, Any] = {table: [] for table in TABLES}
    store["counters"] = {table: 0 for table in TABLES}
    return store


class PlanRepository:
    def __init__(self, plans_file: Optional[Path] = None):
        self.plans_file = Path(plans_file) if plans_file else PLANS_FILE

    # -------------------- File persistence --------------------
    def _load(self) -> Dict[str, Any]:
        if not self.plans_file.exists():
            return _empty_store()
        try:
            with open(self.plans_file, "r", encoding="utf-8") as f:
                store = json.load(f) or {}
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error("Invalid JSON in plans file %s: %s", self.plans_file, e)
            return _empty_store()
        if not isinstance(store, dict):
            logger.error("Unexpected top-level %s in plans file %s", type(store).__name__, self.plans_file)
            return _empty_store()
        for table in TABLES:
            store.setdefault(table, [])
        counters = store.setdefault("counters", {})
        for table in TABLES:
            counters.setdefault(table, max((row["id"] for row in store[table]), default=0))
        return store

    def _save(self, store: Dict[str, Any]) -> None:
        directory = self.plans_file.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(directory), prefix=".plans_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(store, tmp, indent=2, ensure_ascii=False)
            shutil.move(tmp_path, str(self.plans_file))
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    @staticmethod
    def _next_id(store: Dict[str, Any], table: str) -> int:
        store["counters"][table] += 1
        return store["counters"][table]

    # -------------------- Lookups --------------------
    @staticmethod
    def _find(store: Dict[str, Any], table: str, row_id: int) -> Optional[Dict[str, Any]]:
        return next((row for row in store[table] if row["id"] == row_id), None)

    def _owned_plan(self, store: Dict[str, Any], owner_id: str, plan_id: int) -> Dict[str, Any]:
        row = self._find(store, "plans", int(plan_id))
        if row is None:
            raise RecordNotFoundError(f"Study plan {plan_id} not found")
        if row["userId"] != owner_id:
            raise OwnershipError(f"Study plan {plan_id} belongs to another user")
        return row

    def _owned_child(self, store: Dict[str, Any], table: str, owner_id: str, row_id: int,
                     label: str) -> Dict[str, Any]:
        row = self._find(store, table, int(row_id))
        if row is None:
            raise RecordNotFoundError(f"{label} {row_id} not found")
        plan = self._find(store, "plans", row["studyPlanId"])
        if plan is None or plan["userId"] != owner_id:
            raise OwnershipError(f"{label} {row_id} belongs to another user")
        return row

    @staticmethod
    def _rows_for_plan(store: Dict[str, Any], table: str, plan_id: int) -> List[Dict[str, Any]]:
        return [row for row in store[table] if row["studyPlanId"] == plan_id]

    # -------------------- Row <-> domain --------------------
    @staticmethod
    def _task_from_row(row: Dict[str, Any]) -> DailyTask:
        weekly_goal_id = row.get("weeklyGoalId")
        return DailyTask(
            id=str(row["id"]),
            name=row.get("name", ""),
            date=row.get("date", "") or "",
            completed=bool(row.get("completed")),
            weekly_goal_id=str(weekly_goal_id) if weekly_goal_id is not None else None,
        )

    def _to_domain(self, store: Dict[str, Any], plan_row: Dict[str, Any]) -> Plan:
        plan_id = plan_row["id"]
        tasks = [self._task_from_row(row) for row in self._rows_for_plan(store, "daily_tasks", plan_id)]
        weekly_goals = []
        for row in self._rows_for_plan(store, "weekly_goals", plan_id):
            week_id = str(row["id"])
            weekly_goals.append(WeeklyGoal(
                id=week_id,
                week_number=row["weekNumber"],
                goal=row["goal"],
                completed=bool(row.get("completed")),
                tasks=[t for t in tasks if t.weekly_goal_id == week_id],
            ))
        monthly_goals = [
            MonthlyGoal(id=str(row["id"]), goal=row["goal"], completed=bool(row.get("completed")))
            for row in self._rows_for_plan(store, "monthly_goals", plan_id)
        ]
        return Plan(
            id=str(plan_id),
            exam_name=plan_row["examName"],
            month=plan_row["month"],
            monthly_goals=monthly_goals,
            weekly_goals=weekly_goals,
            daily_tasks=tasks,
            created_at=plan_row.get("createdAt", ""),
        )

    # -------------------- Plans --------------------
    def create_plan(self, owner_id: str, plan: Plan) -> Plan:
        """Store a normalized plan under fresh numeric ids and return the stored version."""
        with _lock:
            store = self._load()
            now = _now()
            plan_id = self._next_id(store, "plans")
            store["plans"].append({
                "id": plan_id,
                "userId": owner_id,
                "examName": plan.exam_name.strip(),
                "month": plan.month.strip(),
                "createdAt": plan.created_at or now,
                "updatedAt": now,
            })
            for goal in plan.monthly_goals:
                store["monthly_goals"].append({
                    "id": self._next_id(store, "monthly_goals"),
                    "studyPlanId": plan_id,
                    "goal": goal.goal,
                    "completed": goal.completed,
                    "createdAt": now,
                })
            week_ids: Dict[str, int] = {}
            for week in plan.weekly_goals:
                week_ids[week.id] = self._next_id(store, "weekly_goals")
                store["weekly_goals"].append({
                    "id": week_ids[week.id],
                    "studyPlanId": plan_id,
                    "weekNumber": week.week_number,
                    "goal": week.goal,
                    "completed": week.completed,
                    "createdAt": now,
                })
            for task in plan.daily_tasks:
                store["daily_tasks"].append({
                    "id": self._next_id(store, "daily_tasks"),
                    "studyPlanId": plan_id,
                    "weeklyGoalId": week_ids.get(task.weekly_goal_id) if task.weekly_goal_id else None,
                    "name": task.name,
                    "date": task.date,
                    "completed": task.completed,
                    "createdAt": now,
                })
            self._save(store)
            logger.info("Stored plan %s for user %s (%d tasks)", plan_id, owner_id, len(plan.daily_tasks))
            return self._to_domain(store, self._find(store, "plans", plan_id))

    def create_empty_plan(self, owner_id: str, exam_name: str, month: str) -> Dict[str, Any]:
        with _lock:
            store = self._load()
            now = _now()
            row = {
                "id": self._next_id(store, "plans"),
                "userId": owner_id,
                "examName": exam_name.strip(),
                "month": month.strip(),
                "createdAt": now,
                "updatedAt": now,
            }
            store["plans"].append(row)
            self._save(store)
            return dict(row)

    def list_plans(self, owner_id: str, limit: int = DEFAULT_LIST_LIMIT, offset: int = 0,
                   search: Optional[str] = None) -> List[Dict[str, Any]]:
        """Plans of one user; ``search`` matches exam name or month, case-insensitive."""
        limit = max(0, min(int(limit), MAX_LIST_LIMIT))
        offset = max(0, int(offset))
        store = self._load()
        rows = [row for row in store["plans"] if row["userId"] == owner_id]
        if search:
            needle = search.lower()
            rows = [row for row in rows
                    if needle in row["examName"].lower() or needle in row["month"].lower()]
        return [dict(row) for row in rows[offset:offset + limit]]

    def get_plan(self, owner_id: str, plan_id: int) -> Plan:
        store = self._load()
        return self._to_domain(store, self._owned_plan(store, owner_id, plan_id))

    def update_plan(self, owner_id: str, plan_id: int, exam_name: Optional[str] = None,
                    month: Optional[str] = None) -> Dict[str, Any]:
        with _lock:
            store = self._load()
            row = self._owned_plan(store, owner_id, plan_id)
            if exam_name is not None:
                row["examName"] = exam_name.strip()
            if month is not None:
                row["month"] = month.strip()
            row["updatedAt"] = _now()
            self._save(store)
            return dict(row)

    def delete_plan(self, owner_id: str, plan_id: int) -> Dict[str, Any]:
        """Delete a plan together with its goals and tasks."""
        with _lock:
            store = self._load()
            row = self._owned_plan(store, owner_id, plan_id)
            store["plans"] = [p for p in store["plans"] if p["id"] != row["id"]]
            for table in ("monthly_goals", "weekly_goals", "daily_tasks"):
                store[table] = [r for r in store[table] if r["studyPlanId"] != row["id"]]
            self._save(store)
            logger.info("Deleted plan %s of user %s", row["id"], owner_id)
            return dict(row)

    # -------------------- Daily tasks --------------------
    def list_tasks(self, owner_id: str, plan_id: int, date: Optional[str] = None,
                   weekly_goal_id: Optional[int] = None) -> List[Dict[str, Any]]:
        store = self._load()
        plan = self._owned_plan(store, owner_id, plan_id)
        rows = self._rows_for_plan(store, "daily_tasks", plan["id"])
        if date:
            rows = [r for r in rows if r.get("date") == date]
        if weekly_goal_id is not None:
            rows = [r for r in rows if r.get("weeklyGoalId") == int(weekly_goal_id)]
        return [dict(r) for r in rows]

    def add_task(self, owner_id: str, plan_id: int, name: str, date: str,
                 weekly_goal_id: Optional[int] = None) -> Dict[str, Any]:
        with _lock:
            store = self._load()
            plan = self._owned_plan(store, owner_id, plan_id)
            if weekly_goal_id is not None:
                week = self._find(store, "weekly_goals", int(weekly_goal_id))
                if week is None or week["studyPlanId"] != plan["id"]:
                    raise RecordNotFoundError(f"Weekly goal {weekly_goal_id} not found in plan {plan_id}")
            row = {
                "id": self._next_id(store, "daily_tasks"),
                "studyPlanId": plan["id"],
                "weeklyGoalId": int(weekly_goal_id) if weekly_goal_id is not None else None,
                "name": name.strip(),
                "date": date,
                "completed": False,
                "createdAt": _now(),
            }
            store["daily_tasks"].append(row)
            self._save(store)
            return dict(row)

    def set_task_completed(self, owner_id: str, task_id: int, completed: bool,
                           plan_id: Optional[int] = None) -> Dict[str, Any]:
        """Flip one task's flag. With ``plan_id`` the task must belong to that plan."""
        with _lock:
            store = self._load()
            row = self._owned_child(store, "daily_tasks", owner_id, task_id, "Daily task")
            if plan_id is not None and row["studyPlanId"] != int(plan_id):
                raise RecordNotFoundError(f"Daily task {task_id} does not belong to plan {plan_id}")
            row["completed"] = bool(completed)
            self._save(store)
            return dict(row)

    # -------------------- Weekly goals --------------------
    def list_weekly_goals(self, owner_id: str, plan_id: int, week: Optional[int] = None) -> List[Dict[str, Any]]:
        store = self._load()
        plan = self._owned_plan(store, owner_id, plan_id)
        rows = self._rows_for_plan(store, "weekly_goals", plan["id"])
        if week is not None:
            rows = [r for r in rows if r["weekNumber"] == int(week)]
        return [dict(r) for r in rows]

    def add_weekly_goal(self, owner_id: str, plan_id: int, week_number: int, goal: str) -> Dict[str, Any]:
        with _lock:
            store = self._load()
            plan = self._owned_plan(store, owner_id, plan_id)
            row = {
                "id": self._next_id(store, "weekly_goals"),
                "studyPlanId": plan["id"],
                "weekNumber": int(week_number),
                "goal": goal.strip(),
                "completed": False,
                "createdAt": _now(),
            }
            store["weekly_goals"].append(row)
            self._save(store)
            return dict(row)

    def set_weekly_goal_completed(self, owner_id: str, goal_id: int, completed: bool) -> Dict[str, Any]:
        """Flip the week's own flag; its tasks are left untouched."""
        with _lock:
            store = self._load()
            row = self._owned_child(store, "weekly_goals", owner_id, goal_id, "Weekly goal")
            row["completed"] = bool(completed)
            self._save(store)
            return dict(row)

    # -------------------- Monthly goals --------------------
    def list_monthly_goals(self, owner_id: str, plan_id: int) -> List[Dict[str, Any]]:
        store = self._load()
        plan = self._owned_plan(store, owner_id, plan_id)
        return [dict(r) for r in self._rows_for_plan(store, "monthly_goals", plan["id"])]

    def add_monthly_goal(self, owner_id: str, plan_id: int, goal: str) -> Dict[str, Any]:
        with _lock:
            store = self._load()
            plan = self._owned_plan(store, owner_id, plan_id)
            row = {
                "id": self._next_id(store, "monthly_goals"),
                "studyPlanId": plan["id"],
                "goal": goal.strip(),
                "completed": False,
                "createdAt": _now(),
            }
            store["monthly_goals"].append(row)
            self._save(store)
            return dict(row)

    def set_monthly_goal_completed(self, owner_id: str, goal_id: int, completed: bool) -> Dict[str, Any]:
        with _lock:
            store = self._load()
            row = self._owned_child(store, "monthly_goals", owner_id, goal_id, "Monthly goal")
            row["completed"] = bool(completed)
            self._save(store)
            return dict(row)


__all__ = ["PlanRepository", "RecordNotFoundError", "OwnershipError"]
