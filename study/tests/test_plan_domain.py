import unittest

from study.domain.DailyTask import DailyTask
from study.domain.Plan import Plan
from study.domain.WeeklyGoal import WeeklyGoal


class TestPlanDomain(unittest.TestCase):
    def setUp(self):
        self.data = {
            "id": "p1",
            "examName": "Bar",
            "month": "June 2025",
            "monthlyGoals": [{"id": "m1", "goal": "Finish", "completed": True}],
            "weeklyGoals": [{
                "id": "w1", "weekNumber": 1, "goal": "Basics", "completed": False,
                "tasks": [
                    {"id": "t1", "name": "Read", "date": "2025-06-01", "completed": False, "weeklyGoalId": "w1"},
                    {"id": "t9", "name": "Only nested", "date": "", "completed": False, "weeklyGoalId": "w1"},
                ],
            }],
            "dailyTasks": [
                {"id": "t1", "name": "Read", "date": "2025-06-01", "completed": False, "weeklyGoalId": "w1"},
                {"id": "t2", "name": "Register", "date": "2025-06-03", "completed": False, "weeklyGoalId": None},
            ],
            "createdAt": "2025-06-01T09:00:00",
        }

    def test_nested_tasks_are_linked_to_flat_list(self):
        plan = Plan.from_dict(self.data)
        self.assertIs(plan.weekly_goals[0].tasks[0], plan.find_task("t1"))
        plan.find_task("t1").completed = True
        self.assertTrue(plan.weekly_goals[0].tasks[0].completed)

    def test_missing_nested_tasks_join_flat_list(self):
        plan = Plan.from_dict(self.data)
        self.assertEqual([t.id for t in plan.daily_tasks], ["t1", "t2", "t9"])
        self.assertEqual([t.id for t in plan.unassigned_tasks()], ["t2"])

    def test_round_trip(self):
        plan = Plan.from_dict(self.data)
        again = Plan.from_dict(plan.to_dict())
        self.assertEqual(again.to_dict(), plan.to_dict())
        self.assertEqual(plan.monthly_goals[0].completed, True)
        self.assertEqual(plan.created_at, "2025-06-01T09:00:00")

    def test_find_task_unknown(self):
        self.assertIsNone(Plan.from_dict(self.data).find_task("nope"))

    def test_entity_helpers(self):
        task = DailyTask(id="a", name="Read", date="")
        self.assertFalse(task.is_scheduled())
        self.assertEqual(str(task), "[ ] Read (no date)")
        week = WeeklyGoal(id="w", week_number=2, goal="G", tasks=[DailyTask(id="b", completed=True), task])
        self.assertEqual(len(week.completed_tasks()), 1)
        self.assertEqual(WeeklyGoal.from_dict(week.to_dict()), week)


if __name__ == '__main__':
    unittest.main()
