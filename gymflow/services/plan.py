"""
Peticiones de plan (miembro -> entrenador) y documentos de plan.

La petición sigue ``pending -> approved | denied`` igual que las de
membresía. Aprobarla no materializa ningún plan: el entrenador redacta los
planes por separado. Solo con ``REQUIRE_APPROVED_PLAN_REQUEST`` activado se
exige una petición aprobada del mismo tipo antes de crear el plan.
"""

import logging
from typing import List, Union

from sqlalchemy.orm import Session

from gymflow.core.auth import Principal
from gymflow.core.config import Settings
from gymflow.core.exceptions import (
    AuthorizationError, ConflictError, InvalidStateError, NotFoundError, ValidationError
)
from gymflow.core.timezone_utils import utcnow
from gymflow.db.transaction import transaction
from gymflow.models.membership_request import RequestStatus
from gymflow.models.plan import PlanRequest, PlanType, WorkoutPlan, DietPlan
from gymflow.models.user import UserRole
from gymflow.models.user_gym import GymRoleType
from gymflow.repositories.plan import (
    plan_request_repository, workout_plan_repository, diet_plan_repository, PlanDocumentRepository
)
from gymflow.repositories.user import user_repository
from gymflow.repositories.user_gym import user_gym_repository
from gymflow.schemas import plan as schemas

logger = logging.getLogger(__name__)

PlanCreate = Union[schemas.WorkoutPlanCreate, schemas.DietPlanCreate]
PlanUpdate = Union[schemas.WorkoutPlanUpdate, schemas.DietPlanUpdate]


class PlanService:
    def __init__(self, settings: Settings):
        self.require_approved_request = settings.REQUIRE_APPROVED_PLAN_REQUEST

    # ---------- peticiones ----------

    def request_plan(self, db: Session, principal: Principal, request_in: schemas.PlanRequestCreate) -> PlanRequest:
        """
        Raises:
            NotFoundError: el entrenador no existe
            ConflictError: ya hay una petición pendiente idéntica (miembro, entrenador, tipo)
        """
        trainer = user_repository.get_with_role(db, user_id=request_in.trainer_id, role=UserRole.TRAINER)
        if not trainer:
            raise NotFoundError("Entrenador no encontrado")

        pending = plan_request_repository.get_pending(
            db, member_id=principal.id, trainer_id=trainer.id, request_type=request_in.request_type
        )
        if pending is not None:
            raise ConflictError("Ya existe una petición pendiente de este tipo para este entrenador")

        with transaction(db, "Ya existe una petición pendiente de este tipo para este entrenador"):
            request = plan_request_repository.create(db, obj_in={
                "member_id": principal.id,
                "trainer_id": trainer.id,
                "request_type": request_in.request_type,
                "status": RequestStatus.PENDING,
            }, commit=False)

        logger.info(
            f"Petición de plan {request.id} ({request_in.request_type.value}) "
            f"del miembro {principal.id} al entrenador {trainer.id}"
        )
        return request

    def resolve_request(self, db: Session, principal: Principal, request_id: int, action: str) -> PlanRequest:
        if action not in ("approve", "deny"):
            raise ValidationError("La acción debe ser 'approve' o 'deny'")

        request = plan_request_repository.get(db, id=request_id)
        if not request:
            raise NotFoundError("Petición de plan no encontrada")
        if request.trainer_id != principal.id:
            raise AuthorizationError("Solo el entrenador destinatario puede resolver esta petición")
        if request.status != RequestStatus.PENDING:
            raise InvalidStateError(f"La petición ya está {request.status.value}")

        new_status = RequestStatus.APPROVED if action == "approve" else RequestStatus.DENIED
        with transaction(db):
            updated = plan_request_repository.conditional_update(
                db,
                id=request_id,
                expected={"status": RequestStatus.PENDING},
                values={"status": new_status, "resolved_at": utcnow()},
            )
            if updated == 0:
                raise InvalidStateError("La petición ya fue resuelta por otra petición")

        logger.info(f"Petición de plan {request_id} {new_status.value} por el entrenador {principal.id}")
        return plan_request_repository.reload(db, request_id)

    def list_requests(self, db: Session, principal: Principal, pending_only: bool = False,
                      skip: int = 0, limit: int = 100) -> List[PlanRequest]:
        if principal.role == UserRole.TRAINER:
            status = RequestStatus.PENDING if pending_only else None
            return plan_request_repository.list_by_trainer(
                db, trainer_id=principal.id, status=status, skip=skip, limit=limit
            )
        requests = plan_request_repository.list_by_member(db, member_id=principal.id, skip=skip, limit=limit)
        if pending_only:
            requests = [r for r in requests if r.status == RequestStatus.PENDING]
        return requests

    # ---------- planes ----------

    def _repository(self, plan_type: PlanType) -> PlanDocumentRepository:
        return workout_plan_repository if plan_type == PlanType.WORKOUT else diet_plan_repository

    def get_plan(self, db: Session, principal: Principal, plan_type: PlanType, plan_id: int):
        """Visible para el entrenador autor y el miembro destinatario."""
        plan = self._repository(plan_type).get(db, id=plan_id)
        if not plan:
            raise NotFoundError("Plan no encontrado")
        is_author = principal.role == UserRole.TRAINER and principal.id == plan.trainer_id
        is_target = principal.role == UserRole.MEMBER and principal.id == plan.member_id
        if not (is_author or is_target or principal.is_admin):
            raise AuthorizationError("No tienes acceso a este plan")
        return plan

    def create_plan(self, db: Session, principal: Principal, plan_type: PlanType, plan_in: PlanCreate):
        """
        Raises:
            ValidationError: título vacío
            NotFoundError: el miembro no existe
            InvalidStateError: falta la petición aprobada (solo con la política estricta)
        """
        if not plan_in.title.strip():
            raise ValidationError("El título del plan no puede estar vacío")
        member = user_repository.get_with_role(db, user_id=plan_in.member_id, role=UserRole.MEMBER)
        if not member:
            raise NotFoundError("Miembro no encontrado")

        if self.require_approved_request and not plan_request_repository.has_approved(
            db, member_id=member.id, trainer_id=principal.id, request_type=plan_type
        ):
            raise InvalidStateError(
                f"No hay una petición de plan '{plan_type.value}' aprobada para este miembro"
            )

        roster = user_gym_repository.get_by_user(db, user_id=principal.id)
        data = plan_in.model_dump()
        data.update(
            trainer_id=principal.id,
            gym_id=roster.gym_id if roster is not None and roster.role == GymRoleType.TRAINER else None,
        )
        with transaction(db):
            plan = self._repository(plan_type).create(db, obj_in=data, commit=False)

        logger.info(f"Plan {plan_type.value} {plan.id} creado por el entrenador {principal.id} para el miembro {member.id}")
        return plan

    def update_plan(self, db: Session, principal: Principal, plan_type: PlanType, plan_id: int, plan_in: PlanUpdate):
        plan = self._authored_plan(db, principal, plan_type, plan_id)
        data = plan_in.model_dump(exclude_unset=True)
        if "title" in data and (data["title"] is None or not data["title"].strip()):
            raise ValidationError("El título del plan no puede estar vacío")
        for items_field in ("exercises", "meals"):
            if items_field in data and data[items_field] is None:
                data[items_field] = []

        with transaction(db):
            plan = self._repository(plan_type).update(db, db_obj=plan, obj_in=data, commit=False)

        logger.info(f"Plan {plan_type.value} {plan_id} actualizado por el entrenador {principal.id}")
        return plan

    def delete_plan(self, db: Session, principal: Principal, plan_type: PlanType, plan_id: int) -> None:
        self._authored_plan(db, principal, plan_type, plan_id)
        with transaction(db):
            self._repository(plan_type).remove(db, id=plan_id, commit=False)
        logger.info(f"Plan {plan_type.value} {plan_id} eliminado por el entrenador {principal.id}")

    def list_plans(self, db: Session, principal: Principal, plan_type: PlanType,
                   skip: int = 0, limit: int = 100) -> List[Union[WorkoutPlan, DietPlan]]:
        repository = self._repository(plan_type)
        if principal.role == UserRole.TRAINER:
            return repository.list_by_trainer(db, trainer_id=principal.id, skip=skip, limit=limit)
        return repository.list_by_member(db, member_id=principal.id, skip=skip, limit=limit)

    def _authored_plan(self, db: Session, principal: Principal, plan_type: PlanType, plan_id: int):
        plan = self._repository(plan_type).get(db, id=plan_id)
        if not plan:
            raise NotFoundError("Plan no encontrado")
        if plan.trainer_id != principal.id:
            logger.warning(f"Entrenador {principal.id} intentó modificar el plan {plan_id} de otro entrenador")
            raise AuthorizationError("Solo el entrenador autor puede modificar este plan")
        return plan
