from datetime import date as _date
from typing import Optional
import logging

from fastapi import APIRouter, Depends, Query, Response

from study.api.dependencies import get_plan_repository, require_user
from study.events.event_helpers import publish_daily_reminder, publish_plan_imported
from study.infra.Plan_Repository import PlanRepository
from study.infra.pdf_utils import generate_pdf_for_plan
from study.logic.parsing import parse_plan_json, validate_plan_json
from study.logic.reporting import (
    build_daily_reminder,
    compute_progress,
    compute_week_task_progress,
    split_tasks_by_day,
)
from study.utilities.constants import DEFAULT_LIST_LIMIT, ISO_DATE_PATTERN, MAX_LIST_LIMIT, PLAN_JSON_FORMAT
from study.utilities.validators import PlanCreateInput, PlanUpdateInput, PlanUploadInput

router = APIRouter(prefix="/api/plans", tags=["plans"])
logger = logging.getLogger(__name__)


def _today(today: Optional[str]) -> str:
    return today or _date.today().isoformat()


def _plan_view(plan):
    """Plan wire dict plus per-week task ratios for the weekly view."""
    data = plan.to_dict()
    for week_dict, week in zip(data["weeklyGoals"], plan.weekly_goals):
        week_dict["taskProgress"] = compute_week_task_progress(week)
    return data


@router.get("")
def list_plans(
    limit: int = Query(default=DEFAULT_LIST_LIMIT, ge=0),
    offset: int = Query(default=0, ge=0),
    search: Optional[str] = Query(default=None),
    user_id: str = Depends(require_user),
    repo: PlanRepository = Depends(get_plan_repository),
):
    return repo.list_plans(user_id, limit=min(limit, MAX_LIST_LIMIT), offset=offset, search=search)


@router.post("", status_code=201)
def create_plan(payload: PlanCreateInput, user_id: str = Depends(require_user),
                repo: PlanRepository = Depends(get_plan_repository)):
    return repo.create_empty_plan(user_id, payload.exam_name, payload.month)


@router.get("/format")
def plan_format():
    """Example of the accepted upload document."""
    return Response(content=PLAN_JSON_FORMAT.strip(), media_type="text/plain")


@router.post("/validate")
def validate_plan(payload: PlanUploadInput, user_id: str = Depends(require_user)):
    valid, error = validate_plan_json(payload.content)
    return {"valid": valid, "error": error}


@router.post("/upload", status_code=201)
def upload_plan(payload: PlanUploadInput, user_id: str = Depends(require_user),
                repo: PlanRepository = Depends(get_plan_repository)):
    """Parse, validate and normalize an uploaded plan document, then store it."""
    plan = parse_plan_json(payload.content)  # PlanInputError -> 400 via app handler
    stored = repo.create_plan(user_id, plan)
    logger.info("User %s imported plan %s (%s)", user_id, stored.id, stored.exam_name)
    publish_plan_imported(int(stored.id), stored.exam_name, len(stored.daily_tasks), user_id=user_id)
    return _plan_view(stored)


@router.get("/{plan_id}")
def get_plan(plan_id: int, user_id: str = Depends(require_user),
             repo: PlanRepository = Depends(get_plan_repository)):
    return _plan_view(repo.get_plan(user_id, plan_id))


@router.put("/{plan_id}")
def update_plan(plan_id: int, payload: PlanUpdateInput, user_id: str = Depends(require_user),
                repo: PlanRepository = Depends(get_plan_repository)):
    return repo.update_plan(user_id, plan_id, exam_name=payload.exam_name, month=payload.month)


@router.delete("/{plan_id}")
def delete_plan(plan_id: int, user_id: str = Depends(require_user),
                repo: PlanRepository = Depends(get_plan_repository)):
    deleted = repo.delete_plan(user_id, plan_id)
    return {"message": "Study plan deleted successfully", "deletedPlan": deleted}


@router.get("/{plan_id}/progress")
def plan_progress(plan_id: int,
                  today: Optional[str] = Query(default=None, pattern=ISO_DATE_PATTERN),
                  user_id: str = Depends(require_user),
                  repo: PlanRepository = Depends(get_plan_repository)):
    plan = repo.get_plan(user_id, plan_id)
    return compute_progress(plan, _today(today)).to_dict()


@router.get("/{plan_id}/schedule")
def plan_schedule(plan_id: int,
                  today: Optional[str] = Query(default=None, pattern=ISO_DATE_PATTERN),
                  user_id: str = Depends(require_user),
                  repo: PlanRepository = Depends(get_plan_repository)):
    plan = repo.get_plan(user_id, plan_id)
    groups = split_tasks_by_day(plan, _today(today))
    return {name: [t.to_dict() for t in tasks] for name, tasks in groups.items()}


@router.get("/{plan_id}/reminder")
def plan_reminder(plan_id: int,
                  today: Optional[str] = Query(default=None, pattern=ISO_DATE_PATTERN),
                  user_id: str = Depends(require_user),
                  repo: PlanRepository = Depends(get_plan_repository)):
    plan = repo.get_plan(user_id, plan_id)
    reminder = build_daily_reminder(plan, _today(today))
    publish_daily_reminder(reminder, user_id=user_id)
    return {"reminder": reminder}


@router.get("/{plan_id}/export_pdf")
def export_pdf(plan_id: int,
               today: Optional[str] = Query(default=None, pattern=ISO_DATE_PATTERN),
               user_id: str = Depends(require_user),
               repo: PlanRepository = Depends(get_plan_repository)):
    plan = repo.get_plan(user_id, plan_id)
    pdf_bytes = generate_pdf_for_plan(plan, compute_progress(plan, _today(today)))
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=study_plan_{plan_id}.pdf"},
    )
