from typing import Optional

from fastapi import APIRouter, Depends, Query

from study.api.dependencies import get_plan_repository, require_user
from study.events.event_helpers import publish_goal_toggled
from study.infra.Plan_Repository import PlanRepository
from study.utilities.validators import CompletionInput, MonthlyGoalInput, WeeklyGoalInput

router = APIRouter(prefix="/api", tags=["goals"])


# -------------------- Weekly goals --------------------
@router.get("/plans/{plan_id}/weekly-goals")
def list_weekly_goals(plan_id: int, week: Optional[int] = Query(default=None, ge=1),
                      user_id: str = Depends(require_user),
                      repo: PlanRepository = Depends(get_plan_repository)):
    return repo.list_weekly_goals(user_id, plan_id, week=week)


@router.post("/plans/{plan_id}/weekly-goals", status_code=201)
def add_weekly_goal(plan_id: int, payload: WeeklyGoalInput, user_id: str = Depends(require_user),
                    repo: PlanRepository = Depends(get_plan_repository)):
    return repo.add_weekly_goal(user_id, plan_id, payload.week_number, payload.goal)


@router.put("/weekly-goals/{goal_id}")
def set_weekly_goal_completed(goal_id: int, payload: CompletionInput, user_id: str = Depends(require_user),
                              repo: PlanRepository = Depends(get_plan_repository)):
    row = repo.set_weekly_goal_completed(user_id, goal_id, payload.completed)
    publish_goal_toggled("weekly", row, row["studyPlanId"], user_id=user_id)
    return row


# -------------------- Monthly goals --------------------
@router.get("/plans/{plan_id}/monthly-goals")
def list_monthly_goals(plan_id: int, user_id: str = Depends(require_user),
                       repo: PlanRepository = Depends(get_plan_repository)):
    return repo.list_monthly_goals(user_id, plan_id)


@router.post("/plans/{plan_id}/monthly-goals", status_code=201)
def add_monthly_goal(plan_id: int, payload: MonthlyGoalInput, user_id: str = Depends(require_user),
                     repo: PlanRepository = Depends(get_plan_repository)):
    return repo.add_monthly_goal(user_id, plan_id, payload.goal)


@router.put("/monthly-goals/{goal_id}")
def set_monthly_goal_completed(goal_id: int, payload: CompletionInput, user_id: str = Depends(require_user),
                               repo: PlanRepository = Depends(get_plan_repository)):
    row = repo.set_monthly_goal_completed(user_id, goal_id, payload.completed)
    publish_goal_toggled("monthly", row, row["studyPlanId"], user_id=user_id)
    return row
