"""
Membership Requests Module - API Endpoints

Join and renewal requests between members/trainers and gyms. A request is
created as ``pending`` and resolved exactly once by the owning gym (or, for
member requests, by one of the gym's trainers).
"""

from typing import Any, List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gymflow.api.deps import get_membership_service
from gymflow.core.auth import Principal, require_role
from gymflow.db.session import get_db
from gymflow.models.user import UserRole
from gymflow.schemas.membership import (
    MembershipRequest, MembershipRequestCreate, RequestAction
)
from gymflow.services.membership import MembershipService

router = APIRouter()


@router.post("/requests", response_model=MembershipRequest, status_code=201)
def create_membership_request(
    request_in: MembershipRequestCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.MEMBER, UserRole.TRAINER)),
    service: MembershipService = Depends(get_membership_service),
) -> Any:
    """
    Ask to join a gym, or to renew the membership in the current gym.

    Members must send one of the duration labels ("1 week", "1 month",
    "3 months", "6 months", "1 year"); trainers send only the gym.

    Raises:
        400 ValidationError: missing or unrecognized duration
        404 NotFoundError: gym not found
        409 ConflictError: a pending request for this gym already exists
    """
    return service.create_request(db, principal, request_in)


@router.get("/requests/me", response_model=List[MembershipRequest])
def read_my_membership_requests(
    skip: int = 0,
    limit: int = Query(100, le=500),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.MEMBER, UserRole.TRAINER)),
    service: MembershipService = Depends(get_membership_service),
) -> Any:
    """List the requests created by the current member or trainer, newest first."""
    return service.list_requests_for_user(db, principal, skip=skip, limit=limit)


@router.get("/requests", response_model=List[MembershipRequest])
def read_gym_membership_requests(
    pending_only: bool = False,
    skip: int = 0,
    limit: int = Query(100, le=500),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.GYM, UserRole.TRAINER)),
    service: MembershipService = Depends(get_membership_service),
) -> Any:
    """
    List the requests addressed to the gym of the caller.

    Trainers only see member requests of the gym they belong to.
    """
    return service.list_requests_for_gym(
        db, principal, pending_only=pending_only, skip=skip, limit=limit
    )


@router.post("/requests/{request_id}/action", response_model=MembershipRequest)
def resolve_membership_request(
    request_id: int,
    action_in: RequestAction,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.GYM, UserRole.TRAINER)),
    service: MembershipService = Depends(get_membership_service),
) -> Any:
    """
    Approve or deny a pending request.

    Approving adds the requester to the gym roster when needed and sets the
    membership to ``{duration, start=now, end=now + duration}``.

    Raises:
        403 AuthorizationError: caller is not the gym or one of its trainers
        404 NotFoundError: request not found
        409 InvalidStateError: request already resolved
    """
    return service.resolve_request(db, principal, request_id, action_in.action)
