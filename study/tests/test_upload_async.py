import json
import pytest
from httpx import ASGITransport, AsyncClient

from study.api.api_run import app
from study.api.dependencies import get_plan_repository, get_session_repository
from study.infra.Plan_Repository import PlanRepository
from study.infra.Session_Repository import SessionRepository


@pytest.mark.asyncio
async def test_upload_then_toggle_task(tmp_path):
    """Upload a plan with synonyms, then complete a nested task and read progress."""

    # Use temporary store files (don't alter the real ones)
    plans = PlanRepository(tmp_path / "plans.json")
    sessions = SessionRepository(tmp_path / "sessions.json")
    app.dependency_overrides[get_plan_repository] = lambda: plans
    app.dependency_overrides[get_session_repository] = lambda: sessions
    headers = {"Authorization": f"Bearer {sessions.create_session('alice')}"}
    document = {
        "exam": "Physics",
        "weeklyGoals": [{"week": 1, "name": "Mechanics", "dailyTasks": ["Newton", {"task": "Energy"}]}],
    }

    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            # === 1. Upload ===
            resp = await ac.post("/api/plans/upload", json={"content": json.dumps(document)}, headers=headers)
            assert resp.status_code == 201, resp.text
            plan = resp.json()
            assert plan["examName"] == "Physics"
            assert [t["name"] for t in plan["weeklyGoals"][0]["tasks"]] == ["Newton", "Energy"]
            assert plan["weeklyGoals"][0]["goal"] == "Mechanics"

            # === 2. Complete a nested task through the plan-scoped route ===
            task_id = plan["weeklyGoals"][0]["tasks"][1]["id"]
            resp = await ac.put(f"/api/plans/{plan['id']}/tasks/{task_id}", json={"completed": True}, headers=headers)
            assert resp.status_code == 200, resp.text

            # === 3. Progress reflects the flat list only ===
            resp = await ac.get(f"/api/plans/{plan['id']}/progress", params={"today": "2025-06-01"}, headers=headers)
            progress = resp.json()
            assert progress["totalTasks"] == 2
            assert progress["completedTasks"] == 1
            assert progress["percentage"] == 50
            assert progress["weeklyCompleted"] == 0
    finally:
        app.dependency_overrides.clear()
