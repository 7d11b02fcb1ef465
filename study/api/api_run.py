from fastapi import FastAPI, Query, Request, Depends
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Optional
import logging

from study.api.dependencies import require_user
from study.api.routes import plans, tasks, goals
from study.events.web_observers import start as start_event_observers, get_events as get_web_events
from study.infra.Plan_Repository import OwnershipError, RecordNotFoundError
from study.logic.parsing import ParseError, ValidationError
from study.utilities.config import DEBUG

# Logging
logger = logging.getLogger("study_app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Register event bus subscribers for web notifications when the app starts."""
    start_event_observers()
    logger.info("Web observers for study plan events started")
    yield


# Initialize FastAPI app
app = FastAPI(title="Exam Study Planner API", debug=DEBUG, lifespan=lifespan)

# Include routers
app.include_router(plans.router)
app.include_router(tasks.router)
app.include_router(goals.router)


# -------------------- Error mapping --------------------
@app.exception_handler(ParseError)
async def _parse_error(request: Request, exc: ParseError):
    return JSONResponse(status_code=400, content={"detail": {"error": exc.reason, "code": "INVALID_JSON"}})


@app.exception_handler(ValidationError)
async def _validation_error(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": {"error": exc.reason, "code": "INVALID_PLAN"}})


@app.exception_handler(RecordNotFoundError)
async def _not_found(request: Request, exc: RecordNotFoundError):
    return JSONResponse(status_code=404, content={"detail": {"error": str(exc), "code": "NOT_FOUND"}})


@app.exception_handler(OwnershipError)
async def _forbidden(request: Request, exc: OwnershipError):
    logger.warning("Forbidden access on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=403, content={"detail": {"error": "Unauthorized access to this resource",
                                                             "code": "FORBIDDEN"}})


# -------------------- API: Notifications (polled by frontend) --------------------
@app.get('/api/notifications')
def api_notifications(
    since: Optional[int] = Query(default=None, description="Return events with id greater than this value"),
    user_id: str = Depends(require_user),
):
    """
    Return recent study plan events (reminders, completion toggles, imports).

    Client polling strategy:
        1. First call without 'since' to load current backlog (optional).
        2. Store 'next_cursor' from response.
        3. Subsequent polls: /api/notifications?since=<next_cursor>
    """
    return get_web_events(since, user_id=user_id)
