"""Plan domain entity: one exam-preparation effort (monthly goals, weekly goals, flat task list)."""
from typing import List, Optional
from study.domain.DailyTask import DailyTask
from study.domain.MonthlyGoal import MonthlyGoal
from study.domain.WeeklyGoal import WeeklyGoal


class Plan:
    def __init__(self, id: str = "", exam_name: str = "", month: str = "",
                 monthly_goals: Optional[List[MonthlyGoal]] = None,
                 weekly_goals: Optional[List[WeeklyGoal]] = None,
                 daily_tasks: Optional[List[DailyTask]] = None,
                 created_at: str = ""):
        self.id = id
        self.exam_name = exam_name
        self.month = month
        self.monthly_goals = monthly_goals[:] if monthly_goals else []
        self.weekly_goals = weekly_goals[:] if weekly_goals else []
        # Authoritative list: every task, including the ones nested under weekly_goals
        self.daily_tasks = daily_tasks[:] if daily_tasks else []
        self.created_at = created_at

    def unassigned_tasks(self) -> List[DailyTask]:
        return [t for t in self.daily_tasks if t.weekly_goal_id is None]

    def find_task(self, task_id: str) -> Optional[DailyTask]:
        return next((t for t in self.daily_tasks if t.id == task_id), None)

    def __str__(self) -> str:
        return (f"{self.exam_name} ({self.month}) - {len(self.monthly_goals)} monthly goals, "
                f"{len(self.weekly_goals)} weeks, {len(self.daily_tasks)} tasks")

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates a Plan from its wire dictionary.

        Nested week tasks are re-linked to the matching objects of the flat list so a
        completion flip through either path is seen by both. Nested tasks missing from
        the flat list are appended to it.
        '''
        d = dict(data) if isinstance(data, dict) else {}
        daily_tasks = [DailyTask.from_dict(t) for t in d.get("dailyTasks", []) or []]
        by_id = {t.id: t for t in daily_tasks}
        weekly_goals = []
        for raw_week in d.get("weeklyGoals", []) or []:
            week = WeeklyGoal.from_dict(raw_week)
            linked = []
            for task in week.tasks:
                flat = by_id.get(task.id)
                if flat is None:
                    daily_tasks.append(task)
                    by_id[task.id] = task
                    flat = task
                if flat.weekly_goal_id is None:
                    flat.weekly_goal_id = week.id
                linked.append(flat)
            week.tasks = linked
            weekly_goals.append(week)
        return Plan(
            id=str(d.get("id", "")),
            exam_name=d.get("examName", "") or "",
            month=d.get("month", "") or "",
            monthly_goals=[MonthlyGoal.from_dict(g) for g in d.get("monthlyGoals", []) or []],
            weekly_goals=weekly_goals,
            daily_tasks=daily_tasks,
            created_at=d.get("createdAt", "") or "",
        )

    def to_dict(self):
        return {
            "id": self.id,
            "examName": self.exam_name,
            "month": self.month,
            "monthlyGoals": [g.to_dict() for g in self.monthly_goals],
            "weeklyGoals": [w.to_dict() for w in self.weekly_goals],
            "dailyTasks": [t.to_dict() for t in self.daily_tasks],
            "createdAt": self.created_at,
        }
