from typing import Optional

from fastapi import APIRouter, Depends, Query

from study.api.dependencies import get_plan_repository, require_user
from study.events.event_helpers import publish_task_toggled
from study.infra.Plan_Repository import PlanRepository
from study.utilities.constants import ISO_DATE_PATTERN
from study.utilities.validators import CompletionInput, TaskInput

router = APIRouter(prefix="/api", tags=["tasks"])


@router.get("/plans/{plan_id}/tasks")
def list_tasks(plan_id: int,
               date: Optional[str] = Query(default=None, pattern=ISO_DATE_PATTERN),
               weekly_goal_id: Optional[int] = Query(default=None, alias="weeklyGoalId"),
               user_id: str = Depends(require_user),
               repo: PlanRepository = Depends(get_plan_repository)):
    return repo.list_tasks(user_id, plan_id, date=date, weekly_goal_id=weekly_goal_id)


@router.post("/plans/{plan_id}/tasks", status_code=201)
def add_task(plan_id: int, payload: TaskInput, user_id: str = Depends(require_user),
             repo: PlanRepository = Depends(get_plan_repository)):
    return repo.add_task(user_id, plan_id, payload.name, payload.date, weekly_goal_id=payload.weekly_goal_id)


@router.put("/plans/{plan_id}/tasks/{task_id}")
def set_plan_task_completed(plan_id: int, task_id: int, payload: CompletionInput,
                            user_id: str = Depends(require_user),
                            repo: PlanRepository = Depends(get_plan_repository)):
    row = repo.set_task_completed(user_id, task_id, payload.completed, plan_id=plan_id)
    publish_task_toggled(row, row["studyPlanId"], user_id=user_id)
    return row


@router.put("/tasks/{task_id}")
def set_task_completed(task_id: int, payload: CompletionInput, user_id: str = Depends(require_user),
                       repo: PlanRepository = Depends(get_plan_repository)):
    row = repo.set_task_completed(user_id, task_id, payload.completed)
    publish_task_toggled(row, row["studyPlanId"], user_id=user_id)
    return row
