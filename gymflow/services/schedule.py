"""
Agenda de entrenadores y reservas.

Cada franja pasa una única vez de AVAILABLE a BOOKED. La reserva es un
compare-and-set en base de datos (``UPDATE ... WHERE id = :id AND status =
'AVAILABLE'``): con reservas concurrentes sobre la misma franja exactamente
una afecta a la fila y el resto recibe ``InvalidStateError``.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from gymflow.core.auth import Principal
from gymflow.core.config import Settings
from gymflow.core.exceptions import (
    AuthorizationError, ConflictError, InvalidStateError, NotFoundError, ValidationError
)
from gymflow.core.timezone_utils import normalize_to_utc, utcnow
from gymflow.db.transaction import transaction
from gymflow.models.trainer_schedule import TrainerSchedule, SlotStatus
from gymflow.models.user_gym import GymRoleType
from gymflow.repositories.trainer_schedule import trainer_schedule_repository
from gymflow.repositories.user_gym import user_gym_repository
from gymflow.schemas import schedule as schemas
from gymflow.schemas.schedule import TrainerScheduleCreate

logger = logging.getLogger(__name__)


class ScheduleService:
    def __init__(self, settings: Settings):
        self.allow_overlapping_slots = settings.ALLOW_OVERLAPPING_SLOTS

    def get_slot(self, db: Session, slot_id: int) -> TrainerSchedule:
        slot = trainer_schedule_repository.get(db, id=slot_id)
        if not slot:
            raise NotFoundError("Franja no encontrada")
        return slot

    def post_slot(self, db: Session, principal: Principal, slot_in: TrainerScheduleCreate) -> TrainerSchedule:
        """
        Publicar una franja disponible del entrenador.

        Raises:
            ValidationError: si start_time >= end_time
            ConflictError: si se solapa con otra franja y los solapes están prohibidos
        """
        start_time = normalize_to_utc(slot_in.start_time)
        end_time = normalize_to_utc(slot_in.end_time)
        if start_time >= end_time:
            raise ValidationError("La hora de inicio debe ser anterior a la hora de fin")

        if not self.allow_overlapping_slots:
            clash = trainer_schedule_repository.find_overlapping(
                db, trainer_id=principal.id, start_time=start_time, end_time=end_time
            )
            if clash is not None:
                logger.warning(f"Franja rechazada para el entrenador {principal.id}: solapa con la franja {clash.id}")
                raise ConflictError(f"La franja se solapa con otra ya publicada (id {clash.id})")

        roster = user_gym_repository.get_by_user(db, user_id=principal.id)
        gym_id = roster.gym_id if roster is not None and roster.role == GymRoleType.TRAINER else None

        with transaction(db):
            slot = trainer_schedule_repository.create(db, obj_in={
                "trainer_id": principal.id,
                "gym_id": gym_id,
                "start_time": start_time,
                "end_time": end_time,
                "status": SlotStatus.AVAILABLE,
            }, commit=False)

        logger.info(f"Franja {slot.id} publicada por el entrenador {principal.id}: {start_time} - {end_time}")
        return slot

    def delete_slot(self, db: Session, principal: Principal, slot_id: int) -> schemas.TrainerSchedule:
        """
        Eliminar una franja propia que siga disponible.
        """
        slot = self.get_slot(db, slot_id)
        if slot.trainer_id != principal.id:
            logger.warning(f"Entrenador {principal.id} intentó eliminar la franja {slot_id} de otro entrenador")
            raise AuthorizationError("Solo el entrenador que publicó la franja puede eliminarla")
        if slot.status == SlotStatus.BOOKED:
            raise InvalidStateError("No se puede eliminar una franja ya reservada")

        # Copia para la respuesta; la fila desaparece con el commit
        snapshot = schemas.TrainerSchedule.model_validate(slot)
        with transaction(db):
            deleted = trainer_schedule_repository.conditional_delete(
                db, id=slot_id, expected={"status": SlotStatus.AVAILABLE}
            )
            if deleted == 0:
                # Se reservó entre la lectura y el borrado
                raise InvalidStateError("No se puede eliminar una franja ya reservada")

        logger.info(f"Franja {slot_id} eliminada por el entrenador {principal.id}")
        return snapshot

    def book_slot(self, db: Session, principal: Principal, slot_id: int) -> TrainerSchedule:
        """
        Reservar una franja disponible.

        Raises:
            NotFoundError: la franja no existe
            InvalidStateError: la franja ya no está disponible
        """
        self.get_slot(db, slot_id)

        with transaction(db):
            updated = trainer_schedule_repository.conditional_update(
                db,
                id=slot_id,
                expected={"status": SlotStatus.AVAILABLE},
                values={
                    "status": SlotStatus.BOOKED,
                    "booked_by_id": principal.id,
                    "booked_at": utcnow(),
                },
            )
            if updated == 0:
                logger.warning(f"Reserva rechazada: la franja {slot_id} ya no está disponible (miembro {principal.id})")
                raise InvalidStateError("La franja ya no está disponible")

        logger.info(f"Franja {slot_id} reservada por el miembro {principal.id}")
        return trainer_schedule_repository.reload(db, slot_id)

    # ---------- listados ----------

    def list_trainer_slots(
        self, db: Session, trainer_id: int, status: Optional[SlotStatus] = None,
        skip: int = 0, limit: int = 100
    ) -> List[TrainerSchedule]:
        return trainer_schedule_repository.list_by_trainer(
            db, trainer_id=trainer_id, status=status, skip=skip, limit=limit
        )

    def list_available_for_member(
        self, db: Session, principal: Principal, upcoming_only: bool = True,
        skip: int = 0, limit: int = 100
    ) -> List[TrainerSchedule]:
        """Franjas libres de los entrenadores del gimnasio del miembro."""
        roster = user_gym_repository.get_by_user(db, user_id=principal.id)
        if roster is None:
            return []
        since = utcnow() if upcoming_only else None
        return trainer_schedule_repository.list_available_for_gym(
            db, gym_id=roster.gym_id, since=since, skip=skip, limit=limit
        )

    def list_member_bookings(self, db: Session, principal: Principal, skip: int = 0, limit: int = 100) -> List[TrainerSchedule]:
        return trainer_schedule_repository.list_booked_by_member(
            db, member_id=principal.id, skip=skip, limit=limit
        )
