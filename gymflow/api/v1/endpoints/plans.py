"""
Plans Module - API Endpoints

Members ask trainers for workout or diet plans; trainers approve or deny the
request and author plans separately. Approving a request does not create a
plan.
"""

from typing import Any, List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from gymflow.api.deps import get_plan_service
from gymflow.core.auth import Principal, get_current_principal, require_role
from gymflow.db.session import get_db
from gymflow.models.plan import PlanType
from gymflow.models.user import UserRole
from gymflow.schemas.membership import RequestAction
from gymflow.schemas.plan import (
    DietPlan, DietPlanCreate, DietPlanUpdate,
    PlanRequest, PlanRequestCreate,
    WorkoutPlan, WorkoutPlanCreate, WorkoutPlanUpdate,
)
from gymflow.services.plan import PlanService

router = APIRouter()


# ---- Plan requests ----

@router.post("/requests", response_model=PlanRequest, status_code=201)
def create_plan_request(
    request_in: PlanRequestCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.MEMBER)),
    service: PlanService = Depends(get_plan_service),
) -> Any:
    """
    Ask a trainer for a workout or diet plan.

    Raises:
        404 NotFoundError: trainer not found
        409 ConflictError: an identical request is already pending
    """
    return service.request_plan(db, principal, request_in)


@router.get("/requests", response_model=List[PlanRequest])
def read_plan_requests(
    pending_only: bool = False,
    skip: int = 0,
    limit: int = Query(100, le=500),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.MEMBER, UserRole.TRAINER)),
    service: PlanService = Depends(get_plan_service),
) -> Any:
    """Requests sent by the member, or received by the trainer."""
    return service.list_requests(db, principal, pending_only=pending_only, skip=skip, limit=limit)


@router.post("/requests/{request_id}/action", response_model=PlanRequest)
def resolve_plan_request(
    request_id: int,
    action_in: RequestAction,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.TRAINER)),
    service: PlanService = Depends(get_plan_service),
) -> Any:
    """
    Approve or deny a pending plan request addressed to the trainer.

    Raises:
        403 AuthorizationError: request addressed to another trainer
        404 NotFoundError: request not found
        409 InvalidStateError: request already resolved
    """
    return service.resolve_request(db, principal, request_id, action_in.action)


# ---- Workout plans ----

@router.post("/workouts", response_model=WorkoutPlan, status_code=201)
def create_workout_plan(
    plan_in: WorkoutPlanCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.TRAINER)),
    service: PlanService = Depends(get_plan_service),
) -> Any:
    """Author a workout plan (ordered exercises) for a member."""
    return service.create_plan(db, principal, PlanType.WORKOUT, plan_in)


@router.get("/workouts", response_model=List[WorkoutPlan])
def read_workout_plans(
    skip: int = 0,
    limit: int = Query(100, le=500),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.MEMBER, UserRole.TRAINER)),
    service: PlanService = Depends(get_plan_service),
) -> Any:
    """Plans authored by the trainer, or addressed to the member."""
    return service.list_plans(db, principal, PlanType.WORKOUT, skip=skip, limit=limit)


@router.get("/workouts/{plan_id}", response_model=WorkoutPlan)
def read_workout_plan(
    plan_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    service: PlanService = Depends(get_plan_service),
) -> Any:
    return service.get_plan(db, principal, PlanType.WORKOUT, plan_id)


@router.put("/workouts/{plan_id}", response_model=WorkoutPlan)
def update_workout_plan(
    plan_id: int,
    plan_in: WorkoutPlanUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.TRAINER)),
    service: PlanService = Depends(get_plan_service),
) -> Any:
    """Replace fields of a workout plan in place. Only the authoring trainer may edit it."""
    return service.update_plan(db, principal, PlanType.WORKOUT, plan_id, plan_in)


@router.delete("/workouts/{plan_id}", status_code=204)
def delete_workout_plan(
    plan_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.TRAINER)),
    service: PlanService = Depends(get_plan_service),
) -> Response:
    service.delete_plan(db, principal, PlanType.WORKOUT, plan_id)
    return Response(status_code=204)


# ---- Diet plans ----

@router.post("/diets", response_model=DietPlan, status_code=201)
def create_diet_plan(
    plan_in: DietPlanCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.TRAINER)),
    service: PlanService = Depends(get_plan_service),
) -> Any:
    """Author a diet plan (ordered meals) for a member."""
    return service.create_plan(db, principal, PlanType.DIET, plan_in)


@router.get("/diets", response_model=List[DietPlan])
def read_diet_plans(
    skip: int = 0,
    limit: int = Query(100, le=500),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.MEMBER, UserRole.TRAINER)),
    service: PlanService = Depends(get_plan_service),
) -> Any:
    return service.list_plans(db, principal, PlanType.DIET, skip=skip, limit=limit)


@router.get("/diets/{plan_id}", response_model=DietPlan)
def read_diet_plan(
    plan_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    service: PlanService = Depends(get_plan_service),
) -> Any:
    return service.get_plan(db, principal, PlanType.DIET, plan_id)


@router.put("/diets/{plan_id}", response_model=DietPlan)
def update_diet_plan(
    plan_id: int,
    plan_in: DietPlanUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.TRAINER)),
    service: PlanService = Depends(get_plan_service),
) -> Any:
    return service.update_plan(db, principal, PlanType.DIET, plan_id, plan_in)


@router.delete("/diets/{plan_id}", status_code=204)
def delete_diet_plan(
    plan_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role(UserRole.TRAINER)),
    service: PlanService = Depends(get_plan_service),
) -> Response:
    service.delete_plan(db, principal, PlanType.DIET, plan_id)
    return Response(status_code=204)
