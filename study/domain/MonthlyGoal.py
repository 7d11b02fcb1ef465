"""MonthlyGoal domain entity: goal text with a completion flag, independent of weeks and tasks."""


class MonthlyGoal:
    def __init__(self, id: str = "", goal: str = "", completed: bool = False):
        self.id = id
        self.goal = goal
        self.completed = completed

    def __eq__(self, other) -> bool:
        if not isinstance(other, MonthlyGoal):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __str__(self) -> str:
        mark = "x" if self.completed else " "
        return f"[{mark}] {self.goal}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        return MonthlyGoal(
            id=str(d.get("id", "")),
            goal=d.get("goal", "") or "",
            completed=bool(d.get("completed", False)),
        )

    def to_dict(self):
        return {"id": self.id, "goal": self.goal, "completed": self.completed}
