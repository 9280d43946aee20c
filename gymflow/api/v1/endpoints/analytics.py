from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gymflow.core.auth import Principal, get_current_principal
from gymflow.db.session import get_db
from gymflow.schemas.analytics import EventLog, EventLogCreate
from gymflow.services.analytics import analytics_service

router = APIRouter()


@router.post("/events", response_model=EventLog, status_code=201)
def log_event(
    event_in: EventLogCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> Any:
    """
    Record a usage event (page view by default) for the current account.
    """
    return analytics_service.log_event(db, principal, event_in)
