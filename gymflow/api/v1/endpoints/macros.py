from typing import Any, List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from gymflow.core.auth import Principal, require_role
from gymflow.db.session import get_db
from gymflow.models.user import UserRole
from gymflow.schemas.macro import MacroLog, MacroLogCreate, MacroLogUpdate
from gymflow.services.macro import macro_log_service

router = APIRouter()


@router.post("/", response_model=MacroLog, status_code=201)
def create_macro_log(
    log_in: MacroLogCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.MEMBER)),
) -> Any:
    """Log a food entry with its calories and macronutrients."""
    return macro_log_service.create_log(db, principal, log_in)


@router.get("/", response_model=List[MacroLog])
def read_macro_logs(
    skip: int = 0,
    limit: int = Query(100, le=500),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.MEMBER)),
) -> Any:
    return macro_log_service.list_logs(db, principal, skip=skip, limit=limit)


@router.put("/{log_id}", response_model=MacroLog)
def update_macro_log(
    log_id: int,
    log_in: MacroLogUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.MEMBER)),
) -> Any:
    return macro_log_service.update_log(db, principal, log_id, log_in)


@router.delete("/{log_id}", status_code=204)
def delete_macro_log(
    log_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.MEMBER)),
) -> Response:
    macro_log_service.delete_log(db, principal, log_id)
    return Response(status_code=204)
