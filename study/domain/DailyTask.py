"""DailyTask domain entity: a single dated study task, optionally owned by a weekly goal."""
from typing import Optional


class DailyTask:
    def __init__(self, id: str = "", name: str = "", date: str = "", completed: bool = False,
                 weekly_goal_id: Optional[str] = None):
        self.id = id
        self.name = name
        # ISO YYYY-MM-DD string, or "" when the source gave no date
        self.date = date
        self.completed = completed
        self.weekly_goal_id = weekly_goal_id

    def is_scheduled(self) -> bool:
        return bool(self.date)

    def __eq__(self, other) -> bool:
        if not isinstance(other, DailyTask):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __str__(self) -> str:
        mark = "x" if self.completed else " "
        return f"[{mark}] {self.name} ({self.date or 'no date'})"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates a DailyTask from its wire dictionary. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        weekly_goal_id = d.get("weeklyGoalId")
        return DailyTask(
            id=str(d.get("id", "")),
            name=d.get("name", "") or "",
            date=d.get("date", "") or "",
            completed=bool(d.get("completed", False)),
            weekly_goal_id=str(weekly_goal_id) if weekly_goal_id is not None else None,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "date": self.date,
            "completed": self.completed,
            "weeklyGoalId": self.weekly_goal_id,
        }
