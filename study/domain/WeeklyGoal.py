"""WeeklyGoal domain entity: numbered week, goal text, own completion flag and nested tasks."""
from typing import List, Optional
from study.domain.DailyTask import DailyTask


class WeeklyGoal:
    def __init__(self, id: str = "", week_number: int = 1, goal: str = "", completed: bool = False,
                 tasks: Optional[List[DailyTask]] = None):
        self.id = id
        self.week_number = week_number
        self.goal = goal
        # Set by the user, never derived from the tasks below
        self.completed = completed
        self.tasks = tasks[:] if tasks else []

    def completed_tasks(self) -> List[DailyTask]:
        return [t for t in self.tasks if t.completed]

    def __eq__(self, other) -> bool:
        if not isinstance(other, WeeklyGoal):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __str__(self) -> str:
        return f"Week {self.week_number}: {self.goal} - {len(self.completed_tasks())}/{len(self.tasks)} tasks"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return WeeklyGoal(
            id=str(d.get("id", "")),
            week_number=int(d.get("weekNumber", 1) or 1),
            goal=d.get("goal", "") or "",
            completed=bool(d.get("completed", False)),
            tasks=[DailyTask.from_dict(t) for t in d.get("tasks", []) or []],
        )

    def to_dict(self):
        return {
            "id": self.id,
            "weekNumber": self.week_number,
            "goal": self.goal,
            "completed": self.completed,
            "tasks": [t.to_dict() for t in self.tasks],
        }
