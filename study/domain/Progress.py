"""PlanProgress value object: completion counts and the overall percentage of a plan."""


class PlanProgress:
    FIELDS = (
        "total_tasks", "completed_tasks", "percentage",
        "daily_total", "daily_completed",
        "weekly_total", "weekly_completed",
        "monthly_total", "monthly_completed",
    )

    def __init__(self, total_tasks: int = 0, completed_tasks: int = 0, percentage: int = 0,
                 daily_total: int = 0, daily_completed: int = 0,
                 weekly_total: int = 0, weekly_completed: int = 0,
                 monthly_total: int = 0, monthly_completed: int = 0):
        self.total_tasks = total_tasks
        self.completed_tasks = completed_tasks
        self.percentage = percentage
        self.daily_total = daily_total
        self.daily_completed = daily_completed
        self.weekly_total = weekly_total
        self.weekly_completed = weekly_completed
        self.monthly_total = monthly_total
        self.monthly_completed = monthly_completed

    def __eq__(self, other) -> bool:
        if not isinstance(other, PlanProgress):
            return NotImplemented
        return all(getattr(self, f) == getattr(other, f) for f in self.FIELDS)

    def __str__(self) -> str:
        return (f"{self.completed_tasks}/{self.total_tasks} tasks ({self.percentage}%) - "
                f"today {self.daily_completed}/{self.daily_total} - "
                f"weeks {self.weekly_completed}/{self.weekly_total} - "
                f"monthly {self.monthly_completed}/{self.monthly_total}")

    __repr__ = __str__

    def to_dict(self):
        return {
            "totalTasks": self.total_tasks,
            "completedTasks": self.completed_tasks,
            "percentage": self.percentage,
            "dailyTotal": self.daily_total,
            "dailyCompleted": self.daily_completed,
            "weeklyTotal": self.weekly_total,
            "weeklyCompleted": self.weekly_completed,
            "monthlyTotal": self.monthly_total,
            "monthlyCompleted": self.monthly_completed,
        }
