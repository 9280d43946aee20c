"""
Admin Module - API Endpoints

Administrative operations restricted to the ADMIN role.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from gymflow.core.auth import Principal, require_role
from gymflow.db.session import get_db
from gymflow.models.user import UserRole
from gymflow.schemas.analytics import UsageSummary
from gymflow.services.analytics import analytics_service
from gymflow.services.gym import gym_service

router = APIRouter()


@router.delete("/gyms/{gym_id}", status_code=204)
def delete_gym(
    gym_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.ADMIN)),
) -> Response:
    """
    Delete a gym.

    Its roster rows, membership requests and announcements are removed, so
    its members are left without gym or membership. Trainer slots and plans
    are kept with the gym reference cleared.

    Raises:
        404 NotFoundError: gym not found
    """
    gym_service.delete_gym(db, gym_id)
    return Response(status_code=204)


@router.get("/analytics", response_model=UsageSummary)
def read_usage_summary(
    days: int = Query(30, ge=1, le=365),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.ADMIN)),
) -> Any:
    """Event totals by name, role and page over the last ``days`` days."""
    return analytics_service.usage_summary(db, days=days)
