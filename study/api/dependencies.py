"""Shared FastAPI dependencies: repositories and the bearer-token user lookup."""
import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException

from study.infra.Plan_Repository import PlanRepository
from study.infra.Session_Repository import SessionRepository

logger = logging.getLogger(__name__)


def get_plan_repository() -> PlanRepository:
    return PlanRepository()


def get_session_repository() -> SessionRepository:
    return SessionRepository()


def api_error(status_code: int, error: str, code: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"error": error, "code": code})


def require_user(
    authorization: Optional[str] = Header(default=None),
    sessions: SessionRepository = Depends(get_session_repository),
) -> str:
    """Resolve ``Authorization: Bearer <token>`` to a user id or answer 401."""
    if not authorization or not authorization.startswith("Bearer "):
        raise api_error(401, "Authentication required", "UNAUTHORIZED")
    user_id = sessions.resolve(authorization[len("Bearer "):].strip())
    if not user_id:
        logger.warning("Rejected request with unknown or expired token")
        raise api_error(401, "Invalid or expired session", "INVALID_SESSION")
    return user_id
