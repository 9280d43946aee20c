"""
Máquina de estados de solicitudes de membresía.

    pending --approve--> approved   (terminal)
    pending --deny-----> denied     (terminal)

Una misma entidad cubre el alta (el usuario aún no está en el roster) y la
renovación (ya es miembro del gimnasio). Aprobar un alta añade al usuario al
roster; aprobar cualquier solicitud de miembro fija su membresía. La
resolución usa un UPDATE condicionado a ``status = PENDING`` para que dos
resoluciones concurrentes no puedan pisarse.
"""

import logging
from datetime import datetime
from typing import List

from sqlalchemy.orm import Session

from gymflow.core.auth import Principal
from gymflow.core.config import Settings
from gymflow.core.durations import compute_expiry, parse_duration
from gymflow.core.exceptions import (
    AuthorizationError, ConflictError, InvalidStateError, NotFoundError, ValidationError
)
from gymflow.core.timezone_utils import utcnow
from gymflow.db.transaction import transaction
from gymflow.models.membership_request import MembershipRequest, RequestStatus
from gymflow.models.user import UserRole
from gymflow.models.user_gym import UserGym, GymRoleType
from gymflow.repositories.gym import gym_repository
from gymflow.repositories.membership_request import membership_request_repository
from gymflow.repositories.user import user_repository
from gymflow.repositories.user_gym import user_gym_repository
from gymflow.schemas.membership import MembershipInfo, MembershipRequestCreate

logger = logging.getLogger(__name__)

APPROVE = "approve"
DENY = "deny"


class MembershipService:
    def __init__(self, settings: Settings):
        # replace: el vencimiento se recalcula desde ahora en cada aprobación
        # stack: se suma a partir del vencimiento vigente si aún no ha pasado
        self.renewal_policy = settings.MEMBERSHIP_RENEWAL_POLICY

    # ---------- consultas ----------

    def get_request(self, db: Session, request_id: int) -> MembershipRequest:
        request = membership_request_repository.get(db, id=request_id)
        if not request:
            raise NotFoundError("Solicitud de membresía no encontrada")
        return request

    def list_requests_for_user(self, db: Session, principal: Principal, skip: int = 0, limit: int = 100) -> List[MembershipRequest]:
        return membership_request_repository.list_by_user(db, user_id=principal.id, skip=skip, limit=limit)

    def list_requests_for_gym(
        self, db: Session, principal: Principal, *, pending_only: bool = False,
        skip: int = 0, limit: int = 100
    ) -> List[MembershipRequest]:
        """
        Solicitudes del gimnasio del actor (cuenta del gimnasio o entrenador del roster).
        Los entrenadores solo ven solicitudes de miembros.
        """
        gym_id = self._staff_gym_id(db, principal)
        status = RequestStatus.PENDING if pending_only else None
        requests = membership_request_repository.list_by_gym(
            db, gym_id=gym_id, status=status, skip=skip, limit=limit
        )
        if principal.role == UserRole.TRAINER:
            requests = [r for r in requests if r.requester_role == GymRoleType.MEMBER]
        return requests

    def get_membership(self, db: Session, user_id: int) -> MembershipInfo:
        roster = user_gym_repository.get_by_user(db, user_id=user_id)
        if roster is None:
            return MembershipInfo(user_id=user_id)
        return MembershipInfo(
            user_id=user_id,
            gym_id=roster.gym_id,
            duration=roster.membership_duration,
            start_date=roster.membership_start,
            end_date=roster.membership_expires_at,
            status=roster.membership_status,
        )

    # ---------- transiciones ----------

    def create_request(
        self, db: Session, principal: Principal, request_in: MembershipRequestCreate
    ) -> MembershipRequest:
        """
        Crear una solicitud pendiente de alta o renovación.

        Raises:
            NotFoundError: el gimnasio o el usuario no existen
            ValidationError: duración ausente o no reconocida (miembros)
            ConflictError: ya hay una solicitud pendiente para el par, o el
                usuario pertenece a otro gimnasio
        """
        gym = gym_repository.get(db, id=request_in.gym_id)
        if not gym or not gym.is_active:
            raise NotFoundError("Gimnasio no encontrado")

        if principal.role == UserRole.MEMBER:
            requester_role = GymRoleType.MEMBER
        elif principal.role == UserRole.TRAINER:
            requester_role = GymRoleType.TRAINER
        else:
            raise AuthorizationError("Solo miembros y entrenadores pueden solicitar unirse a un gimnasio")

        user = user_repository.get_with_role(db, user_id=principal.id, role=principal.role)
        if not user:
            raise NotFoundError("Usuario no encontrado")

        roster = user_gym_repository.get_by_user(db, user_id=principal.id)
        duration = None
        if requester_role == GymRoleType.MEMBER:
            if request_in.duration is None:
                raise ValidationError("La duración de la membresía es obligatoria")
            duration = parse_duration(request_in.duration).value
            if roster is not None and roster.gym_id != gym.id:
                raise ConflictError("Ya perteneces a otro gimnasio; abandónalo antes de solicitar otro")
        elif roster is not None:
            raise ConflictError("El entrenador ya pertenece a un gimnasio")

        if membership_request_repository.get_pending(db, user_id=principal.id, gym_id=gym.id):
            logger.warning(f"Solicitud duplicada rechazada: usuario {principal.id} gimnasio {gym.id}")
            raise ConflictError("Ya existe una solicitud pendiente para este gimnasio")

        with transaction(db, "Ya existe una solicitud pendiente para este gimnasio"):
            request = membership_request_repository.create(db, obj_in={
                "user_id": principal.id,
                "gym_id": gym.id,
                "requester_role": requester_role,
                "requested_duration": duration,
                "is_renewal": roster is not None,
                "status": RequestStatus.PENDING,
            }, commit=False)

        logger.info(
            f"Solicitud de membresía {request.id} creada: usuario {principal.id} -> gimnasio {gym.id} "
            f"({'renovación' if request.is_renewal else 'alta'}, duración={duration})"
        )
        return request

    def resolve_request(
        self, db: Session, principal: Principal, request_id: int, action: str
    ) -> MembershipRequest:
        """
        Aprobar o denegar una solicitud pendiente.

        Raises:
            NotFoundError: la solicitud no existe
            AuthorizationError: el actor no es el gimnasio ni uno de sus entrenadores
            InvalidStateError: la solicitud ya fue resuelta
            ConflictError: el usuario se unió a otro gimnasio mientras tanto
        """
        if action not in (APPROVE, DENY):
            raise ValidationError("La acción debe ser 'approve' o 'deny'")

        request = self.get_request(db, request_id)
        self._authorize_resolver(db, principal, request)

        if request.status != RequestStatus.PENDING:
            raise InvalidStateError(f"La solicitud ya está {request.status.value}")

        now = utcnow()
        new_status = RequestStatus.APPROVED if action == APPROVE else RequestStatus.DENIED

        with transaction(db):
            updated = membership_request_repository.conditional_update(
                db,
                id=request.id,
                expected={"status": RequestStatus.PENDING},
                values={
                    "status": new_status,
                    "resolved_at": now,
                    "resolved_by_id": principal.id,
                    "resolved_by_role": principal.role.value,
                },
            )
            if updated == 0:
                raise InvalidStateError("La solicitud ya fue resuelta por otra petición")
            if new_status == RequestStatus.APPROVED:
                self._apply_approval(db, request, now)

        logger.info(
            f"Solicitud de membresía {request.id} {new_status.value} por {principal.role.value} {principal.id}"
        )
        return membership_request_repository.reload(db, request.id)

    def set_membership(
        self, db: Session, principal: Principal, member_id: int, duration: str
    ) -> MembershipInfo:
        """
        Asignación directa de la membresía de un miembro del roster por parte del gimnasio.
        """
        label = parse_duration(duration)
        roster = user_gym_repository.get_in_gym(
            db, user_id=member_id, gym_id=principal.id, role=GymRoleType.MEMBER
        )
        if roster is None:
            raise NotFoundError("El miembro no pertenece a este gimnasio")

        now = utcnow()
        with transaction(db):
            self._write_membership(roster, label.value, now, replace=True)
            db.add(roster)

        logger.info(f"Membresía del miembro {member_id} fijada a '{label.value}' por el gimnasio {principal.id}")
        return self.get_membership(db, member_id)

    # ---------- internos ----------

    def _staff_gym_id(self, db: Session, principal: Principal) -> int:
        if principal.role == UserRole.GYM:
            return principal.id
        if principal.role == UserRole.TRAINER:
            roster = user_gym_repository.get_by_user(db, user_id=principal.id)
            if roster is not None and roster.role == GymRoleType.TRAINER:
                return roster.gym_id
            raise AuthorizationError("El entrenador no pertenece a ningún gimnasio")
        raise AuthorizationError("Solo el gimnasio o sus entrenadores gestionan solicitudes")

    def _authorize_resolver(self, db: Session, principal: Principal, request: MembershipRequest) -> None:
        if principal.role == UserRole.GYM and principal.id == request.gym_id:
            return
        if principal.role == UserRole.TRAINER and request.requester_role == GymRoleType.MEMBER:
            roster = user_gym_repository.get_in_gym(
                db, user_id=principal.id, gym_id=request.gym_id, role=GymRoleType.TRAINER
            )
            if roster is not None:
                return
        logger.warning(
            f"{principal.role.value} {principal.id} intentó resolver la solicitud {request.id} "
            f"del gimnasio {request.gym_id}"
        )
        raise AuthorizationError("No tienes permiso para resolver esta solicitud")

    def _apply_approval(self, db: Session, request: MembershipRequest, now: datetime) -> None:
        roster = user_gym_repository.get_by_user(db, user_id=request.user_id)
        if roster is not None and roster.gym_id != request.gym_id:
            raise ConflictError("El usuario ya pertenece a otro gimnasio")

        if request.requester_role == GymRoleType.TRAINER:
            if roster is None:
                user_gym_repository.create(db, obj_in={
                    "user_id": request.user_id,
                    "gym_id": request.gym_id,
                    "role": GymRoleType.TRAINER,
                }, commit=False)
            return

        if roster is None:
            # Alta: entra al roster con la membresía recién calculada
            roster = UserGym(user_id=request.user_id, gym_id=request.gym_id, role=GymRoleType.MEMBER)
            self._write_membership(roster, request.requested_duration, now, replace=True)
        else:
            self._write_membership(
                roster, request.requested_duration, now, replace=self.renewal_policy == "replace"
            )
        db.add(roster)
        db.flush()

    def _write_membership(self, roster: UserGym, duration: str, now: datetime, replace: bool) -> None:
        base = now
        if not replace and roster.membership_expires_at is not None and roster.membership_expires_at > now:
            base = roster.membership_expires_at
        roster.membership_duration = duration
        roster.membership_start = now
        roster.membership_expires_at = compute_expiry(duration, base)
