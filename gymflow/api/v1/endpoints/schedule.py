"""
Trainer Schedule Module - API Endpoints

Trainers publish availability slots; members of the same gym book them.
A booked slot is the booking itself and cannot be deleted by the trainer.
"""

from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gymflow.api.deps import get_schedule_service
from gymflow.core.auth import Principal, require_role
from gymflow.db.session import get_db
from gymflow.models.trainer_schedule import SlotStatus
from gymflow.models.user import UserRole
from gymflow.schemas.schedule import TrainerSchedule, TrainerScheduleCreate
from gymflow.services.schedule import ScheduleService

router = APIRouter()


@router.post("/slots", response_model=TrainerSchedule, status_code=201)
def create_slot(
    slot_in: TrainerScheduleCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.TRAINER)),
    service: ScheduleService = Depends(get_schedule_service),
) -> Any:
    """
    Publish an availability slot ``[start_time, end_time)``.

    Raises:
        400 ValidationError: start_time is not before end_time
        409 ConflictError: overlaps another slot (only when overlaps are disabled)
    """
    return service.post_slot(db, principal, slot_in)


@router.get("/slots/me", response_model=List[TrainerSchedule])
def read_my_slots(
    status: Optional[SlotStatus] = None,
    skip: int = 0,
    limit: int = Query(100, le=500),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.TRAINER)),
    service: ScheduleService = Depends(get_schedule_service),
) -> Any:
    """List the trainer's own slots, optionally filtered by status (bookings = ``booked``)."""
    return service.list_trainer_slots(db, principal.id, status=status, skip=skip, limit=limit)


@router.get("/slots/available", response_model=List[TrainerSchedule])
def read_available_slots(
    upcoming_only: bool = True,
    skip: int = 0,
    limit: int = Query(100, le=500),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.MEMBER)),
    service: ScheduleService = Depends(get_schedule_service),
) -> Any:
    """List the available slots of the trainers in the member's gym."""
    return service.list_available_for_member(
        db, principal, upcoming_only=upcoming_only, skip=skip, limit=limit
    )


@router.get("/trainers/{trainer_id}/slots", response_model=List[TrainerSchedule])
def read_trainer_available_slots(
    trainer_id: int,
    skip: int = 0,
    limit: int = Query(100, le=500),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.MEMBER)),
    service: ScheduleService = Depends(get_schedule_service),
) -> Any:
    """List the available slots of one trainer."""
    return service.list_trainer_slots(
        db, trainer_id, status=SlotStatus.AVAILABLE, skip=skip, limit=limit
    )


@router.delete("/slots/{slot_id}", response_model=TrainerSchedule)
def delete_slot(
    slot_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.TRAINER)),
    service: ScheduleService = Depends(get_schedule_service),
) -> Any:
    """
    Delete one of the trainer's own available slots.

    Raises:
        403 AuthorizationError: slot belongs to another trainer
        404 NotFoundError: slot not found
        409 InvalidStateError: slot already booked
    """
    return service.delete_slot(db, principal, slot_id)


@router.post("/slots/{slot_id}/book", response_model=TrainerSchedule)
def book_slot(
    slot_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.MEMBER)),
    service: ScheduleService = Depends(get_schedule_service),
) -> Any:
    """
    Book an available slot. Concurrent bookings of the same slot resolve to
    exactly one success; the others get ``InvalidStateError``.

    Raises:
        404 NotFoundError: slot not found
        409 InvalidStateError: slot is no longer available
    """
    return service.book_slot(db, principal, slot_id)


@router.get("/bookings/me", response_model=List[TrainerSchedule])
def read_my_bookings(
    skip: int = 0,
    limit: int = Query(100, le=500),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.MEMBER)),
    service: ScheduleService = Depends(get_schedule_service),
) -> Any:
    """List the sessions booked by the member."""
    return service.list_member_bookings(db, principal, skip=skip, limit=limit)
