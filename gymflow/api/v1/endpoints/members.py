from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gymflow.api.deps import get_membership_service
from gymflow.core.auth import Principal, require_role
from gymflow.db.session import get_db
from gymflow.models.user import UserRole
from gymflow.schemas.membership import MembershipInfo
from gymflow.services.membership import MembershipService

router = APIRouter()


@router.get("/me/membership", response_model=MembershipInfo)
def read_my_membership(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.MEMBER)),
    service: MembershipService = Depends(get_membership_service),
) -> Any:
    """
    Current gym and membership of the member.

    ``status`` is derived at read time: ``active`` while the end date is in
    the future, ``expired`` afterwards. All fields are null when the member
    does not belong to any gym.
    """
    return service.get_membership(db, principal.id)
