"""
Gyms Module - API Endpoints

Public gym directory plus roster management for the gym account.
"""

from typing import Any, List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from gymflow.api.deps import get_membership_service
from gymflow.core.auth import Principal, require_role
from gymflow.db.session import get_db
from gymflow.models.user import UserRole
from gymflow.models.user_gym import GymRoleType
from gymflow.schemas.gym import Gym, GymDetail, RosterEntry
from gymflow.schemas.membership import MembershipInfo, MembershipSet
from gymflow.services.gym import gym_service
from gymflow.services.membership import MembershipService

router = APIRouter()


@router.get("/", response_model=List[Gym])
def read_gyms(
    skip: int = 0,
    limit: int = Query(100, le=500),
    db: Session = Depends(get_db),
) -> Any:
    """List active gyms (public directory)."""
    return gym_service.list_gyms(db, skip=skip, limit=limit)


@router.get("/me/members", response_model=List[RosterEntry])
def read_my_members(
    skip: int = 0,
    limit: int = Query(100, le=500),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.GYM)),
) -> Any:
    """Members of the gym with their membership and derived status."""
    return gym_service.list_roster(db, principal, GymRoleType.MEMBER, skip=skip, limit=limit)


@router.get("/me/trainers", response_model=List[RosterEntry])
def read_my_trainers(
    skip: int = 0,
    limit: int = Query(100, le=500),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.GYM)),
) -> Any:
    return gym_service.list_roster(db, principal, GymRoleType.TRAINER, skip=skip, limit=limit)


@router.put("/members/{member_id}/membership", response_model=MembershipInfo)
def set_member_membership(
    member_id: int,
    membership_in: MembershipSet,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.GYM)),
    service: MembershipService = Depends(get_membership_service),
) -> Any:
    """
    Set the membership of a member of the gym directly, starting now.

    Raises:
        400 ValidationError: unrecognized duration
        404 NotFoundError: the user is not a member of this gym
    """
    return service.set_membership(db, principal, member_id, membership_in.duration)


@router.delete("/members/{member_id}", status_code=204)
def remove_member(
    member_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.GYM)),
) -> Response:
    """Remove a member from the roster; the membership is cleared."""
    gym_service.remove_from_roster(db, principal, member_id, GymRoleType.MEMBER)
    return Response(status_code=204)


@router.delete("/trainers/{trainer_id}", status_code=204)
def remove_trainer(
    trainer_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.GYM)),
) -> Response:
    gym_service.remove_from_roster(db, principal, trainer_id, GymRoleType.TRAINER)
    return Response(status_code=204)


@router.get("/{gym_id}", response_model=GymDetail)
def read_gym(
    gym_id: int,
    db: Session = Depends(get_db),
) -> Any:
    """Gym profile with the size of its member and trainer rosters."""
    return gym_service.get_gym_detail(db, gym_id)
