import json
import tempfile
import unittest
from pathlib import Path

from fastapi.testclient import TestClient

from study.api.api_run import app
from study.api.dependencies import get_plan_repository, get_session_repository
from study.events import web_observers
from study.infra.Plan_Repository import PlanRepository
from study.infra.Session_Repository import SessionRepository
from study.utilities.config import DEBUG

DOCUMENT = {
    "examName": "Bar Exam",
    "month": "June 2025",
    "monthlyGoals": ["Finish torts", {"goal": "Two mocks"}],
    "weeklyGoals": [
        {"weekNumber": 1, "goal": "Torts", "completed": True,
         "tasks": [{"name": "Read ch. 1", "date": "2025-06-01", "completed": True}, {"name": "Read ch. 2", "date": "2025-06-02"}]},
    ],
    "dailyTasks": [{"name": "Register", "date": "2025-06-01"}],
}


class TestStudyPlanAPI(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        base = Path(self.tmp.name)
        plans = PlanRepository(base / "plans.json")
        sessions = SessionRepository(base / "sessions.json")
        app.dependency_overrides[get_plan_repository] = lambda: plans
        app.dependency_overrides[get_session_repository] = lambda: sessions
        self.client = TestClient(app)
        self.alice = {"Authorization": f"Bearer {sessions.create_session('alice')}"}
        self.bob = {"Authorization": f"Bearer {sessions.create_session('bob')}"}
        web_observers.start()
        web_observers.clear()

    def tearDown(self):
        app.dependency_overrides.clear()
        self.tmp.cleanup()

    def _upload(self, document=DOCUMENT, headers=None):
        return self.client.post('/api/plans/upload', json={"content": json.dumps(document)},
                                headers=headers or self.alice)

    def test_requires_token(self):
        resp = self.client.get('/api/plans')
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["detail"]["code"], "UNAUTHORIZED")
        resp = self.client.get('/api/plans', headers={"Authorization": "Bearer nope"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["detail"]["code"], "INVALID_SESSION")

    def test_upload_normalizes_plan(self):
        resp = self._upload()
        self.assertEqual(resp.status_code, 201)
        data = resp.json()
        self.assertEqual(data["examName"], "Bar Exam")
        self.assertEqual(len(data["dailyTasks"]), 3)
        self.assertEqual([g["goal"] for g in data["monthlyGoals"]], ["Finish torts", "Two mocks"])
        week = data["weeklyGoals"][0]
        self.assertFalse(week["completed"])
        self.assertEqual(len(week["tasks"]), 2)
        self.assertEqual(week["taskProgress"], {"completed": 0, "total": 2, "percentage": 0})
        self.assertFalse(any(t["completed"] for t in data["dailyTasks"]))

    def test_upload_rejections(self):
        resp = self.client.post('/api/plans/upload', json={"content": "{oops"}, headers=self.alice)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"], {"error": "Invalid JSON format", "code": "INVALID_JSON"})

        resp = self._upload({"month": "June", "dailyTasks": []})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"]["error"], "Missing examName field")
        self.assertEqual(resp.json()["detail"]["code"], "INVALID_PLAN")

        resp = self._upload({"examName": "X"})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("at least one of", resp.json()["detail"]["error"])

    def test_validate_endpoint(self):
        resp = self.client.post('/api/plans/validate', json={"content": '{"exam": "Y", "weeklyGoals": []}'},
                                headers=self.alice)
        self.assertEqual(resp.json(), {"valid": True, "error": None})
        resp = self.client.post('/api/plans/validate', json={"content": "[]"}, headers=self.alice)
        self.assertEqual(resp.json(), {"valid": False, "error": "Invalid JSON format"})

    def test_upload_rejects_oversized_number(self):
        huge = '{"examName": "X", "weeklyGoals": [{"weekNumber": 1' + '0' * 5000 + '}]}'
        resp = self.client.post('/api/plans/upload', json={"content": huge}, headers=self.alice)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["detail"], {"error": "Invalid JSON format", "code": "INVALID_JSON"})
        resp = self.client.post('/api/plans/validate', json={"content": huge}, headers=self.alice)
        self.assertEqual(resp.json(), {"valid": False, "error": "Invalid JSON format"})

    def test_debug_flag_follows_config(self):
        self.assertEqual(app.debug, DEBUG)

    def test_format_endpoint(self):
        resp = self.client.get('/api/plans/format')
        self.assertEqual(resp.status_code, 200)
        self.assertIn("examName", resp.text)

    def test_progress_flow(self):
        plan = self._upload().json()
        plan_id = plan["id"]
        resp = self.client.get(f'/api/plans/{plan_id}/progress', params={"today": "2025-06-01"}, headers=self.alice)
        self.assertEqual(resp.status_code, 200)
        progress = resp.json()
        self.assertEqual((progress["completedTasks"], progress["totalTasks"], progress["percentage"]), (0, 3, 0))
        self.assertEqual(progress["dailyTotal"], 2)

        task_id = plan["weeklyGoals"][0]["tasks"][0]["id"]
        resp = self.client.put(f'/api/tasks/{task_id}', json={"completed": True}, headers=self.alice)
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["completed"])

        progress = self.client.get(f'/api/plans/{plan_id}/progress', params={"today": "2025-06-01"},
                                   headers=self.alice).json()
        self.assertEqual((progress["completedTasks"], progress["percentage"]), (1, 33))
        self.assertEqual(progress["dailyCompleted"], 1)
        self.assertEqual(progress["weeklyCompleted"], 0)

        week_id = plan["weeklyGoals"][0]["id"]
        resp = self.client.put(f'/api/weekly-goals/{week_id}', json={"completed": True}, headers=self.alice)
        self.assertTrue(resp.json()["completed"])
        progress = self.client.get(f'/api/plans/{plan_id}/progress', params={"today": "2025-06-01"},
                                   headers=self.alice).json()
        self.assertEqual(progress["weeklyCompleted"], 1)
        self.assertEqual(progress["completedTasks"], 1)

    def test_bad_today_rejected(self):
        plan_id = self._upload().json()["id"]
        resp = self.client.get(f'/api/plans/{plan_id}/progress', params={"today": "June 1"}, headers=self.alice)
        self.assertEqual(resp.status_code, 422)

    def test_completion_must_be_boolean(self):
        plan = self._upload().json()
        task_id = plan["dailyTasks"][0]["id"]
        resp = self.client.put(f'/api/tasks/{task_id}', json={"completed": "yes"}, headers=self.alice)
        self.assertEqual(resp.status_code, 422)

    def test_other_user_is_forbidden(self):
        plan = self._upload().json()
        resp = self.client.get(f'/api/plans/{plan["id"]}', headers=self.bob)
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["detail"]["code"], "FORBIDDEN")
        task_id = plan["dailyTasks"][0]["id"]
        resp = self.client.put(f'/api/tasks/{task_id}', json={"completed": True}, headers=self.bob)
        self.assertEqual(resp.status_code, 403)

    def test_missing_plan(self):
        resp = self.client.get('/api/plans/999', headers=self.alice)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["detail"]["code"], "NOT_FOUND")

    def test_crud_and_children(self):
        resp = self.client.post('/api/plans', json={"examName": "Chemistry", "month": "July 2025"}, headers=self.alice)
        self.assertEqual(resp.status_code, 201)
        plan_id = resp.json()["id"]

        resp = self.client.post('/api/plans', json={"examName": "X", "month": "Y", "userId": "bob"}, headers=self.alice)
        self.assertEqual(resp.status_code, 422)

        week = self.client.post(f'/api/plans/{plan_id}/weekly-goals', json={"weekNumber": 1, "goal": "Atoms"},
                                headers=self.alice).json()
        resp = self.client.post(f'/api/plans/{plan_id}/tasks',
                                json={"name": "Periodic table", "date": "2025-07-02", "weeklyGoalId": week["id"]},
                                headers=self.alice)
        self.assertEqual(resp.status_code, 201)
        task = resp.json()
        self.client.post(f'/api/plans/{plan_id}/monthly-goals', json={"goal": "Pass"}, headers=self.alice)

        tasks = self.client.get(f'/api/plans/{plan_id}/tasks', params={"date": "2025-07-02"}, headers=self.alice).json()
        self.assertEqual([t["id"] for t in tasks], [task["id"]])
        weeks = self.client.get(f'/api/plans/{plan_id}/weekly-goals', params={"week": 1}, headers=self.alice).json()
        self.assertEqual(len(weeks), 1)
        monthly = self.client.get(f'/api/plans/{plan_id}/monthly-goals', headers=self.alice).json()
        self.assertEqual(len(monthly), 1)

        resp = self.client.put(f'/api/plans/{plan_id}/tasks/{task["id"]}', json={"completed": True}, headers=self.alice)
        self.assertTrue(resp.json()["completed"])

        resp = self.client.put(f'/api/plans/{plan_id}', json={"month": "August 2025"}, headers=self.alice)
        self.assertEqual(resp.json()["month"], "August 2025")
        self.assertEqual(resp.json()["examName"], "Chemistry")

        listed = self.client.get('/api/plans', params={"search": "chem"}, headers=self.alice).json()
        self.assertEqual([p["id"] for p in listed], [plan_id])

        resp = self.client.delete(f'/api/plans/{plan_id}', headers=self.alice)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get(f'/api/plans/{plan_id}', headers=self.alice).status_code, 404)

    def test_schedule_and_reminder(self):
        plan_id = self._upload().json()["id"]
        schedule = self.client.get(f'/api/plans/{plan_id}/schedule', params={"today": "2025-06-01"},
                                   headers=self.alice).json()
        self.assertEqual(len(schedule["today"]), 2)
        self.assertEqual(len(schedule["upcoming"]), 1)

        resp = self.client.get(f'/api/plans/{plan_id}/reminder', params={"today": "2025-06-01"}, headers=self.alice)
        self.assertEqual(resp.json()["reminder"]["body"], "You have 2 tasks to complete today!")
        resp = self.client.get(f'/api/plans/{plan_id}/reminder', params={"today": "2030-01-01"}, headers=self.alice)
        self.assertIsNone(resp.json()["reminder"])

    def test_notifications_are_per_user(self):
        plan = self._upload().json()
        task_id = plan["dailyTasks"][0]["id"]
        self.client.put(f'/api/tasks/{task_id}', json={"completed": True}, headers=self.alice)

        events = self.client.get('/api/notifications', headers=self.alice).json()["events"]
        self.assertEqual([e["type"] for e in events], ["plan.imported", "task.completed"])
        self.assertEqual(self.client.get('/api/notifications', headers=self.bob).json()["events"], [])

    def test_export_pdf(self):
        plan_id = self._upload().json()["id"]
        resp = self.client.get(f'/api/plans/{plan_id}/export_pdf', headers=self.alice)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.headers["content-type"], "application/pdf")
        self.assertTrue(resp.content.startswith(b"%PDF"))


if __name__ == '__main__':
    unittest.main()
