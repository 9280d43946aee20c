"""
Anuncios de gimnasio: historial persistente más difusión en tiempo real.

Cada escritura confirmada emite un evento al canal del gimnasio
(``announcement``, ``announcementUpdate`` o ``announcementDelete``) para que
los clientes conectados converjan sin recargar. La emisión es posterior al
commit y nunca hace fallar la operación.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from gymflow.core.auth import Principal
from gymflow.core.broadcast import ANNOUNCEMENT_CREATED, ANNOUNCEMENT_UPDATED, ANNOUNCEMENT_DELETED
from gymflow.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from gymflow.db.transaction import transaction
from gymflow.models.announcement import Announcement
from gymflow.models.user import UserRole
from gymflow.repositories.announcement import announcement_repository
from gymflow.repositories.user_gym import user_gym_repository
from gymflow.schemas import announcement as schemas

logger = logging.getLogger(__name__)


class AnnouncementService:
    def __init__(self, publisher):
        # Cualquier objeto con publish(gym_id, event, payload), p. ej. BackgroundPublisher
        self.publisher = publisher

    def _clean_message(self, message: str) -> str:
        message = (message or "").strip()
        if not message:
            raise ValidationError("El mensaje del anuncio no puede estar vacío")
        return message

    def _authored(self, db: Session, principal: Principal, announcement_id: int) -> Announcement:
        announcement = announcement_repository.get(db, id=announcement_id)
        if not announcement:
            raise NotFoundError("Anuncio no encontrado")
        if principal.role != UserRole.GYM or announcement.gym_id != principal.id:
            logger.warning(f"{principal.role.value} {principal.id} intentó modificar el anuncio {announcement_id}")
            raise AuthorizationError("Solo el gimnasio autor puede modificar este anuncio")
        return announcement

    def post(self, db: Session, principal: Principal, announcement_in: schemas.AnnouncementCreate) -> Announcement:
        message = self._clean_message(announcement_in.message)
        with transaction(db):
            announcement = announcement_repository.create(
                db, obj_in={"gym_id": principal.id, "message": message}, commit=False
            )

        payload = schemas.Announcement.model_validate(announcement)
        self.publisher.publish(principal.id, ANNOUNCEMENT_CREATED, payload.model_dump())
        logger.info(f"Anuncio {announcement.id} publicado por el gimnasio {principal.id}")
        return announcement

    def update(self, db: Session, principal: Principal, announcement_id: int,
               announcement_in: schemas.AnnouncementUpdate) -> Announcement:
        announcement = self._authored(db, principal, announcement_id)
        message = self._clean_message(announcement_in.message)
        with transaction(db):
            announcement = announcement_repository.update(
                db, db_obj=announcement, obj_in={"message": message}, commit=False
            )

        payload = schemas.Announcement.model_validate(announcement)
        self.publisher.publish(principal.id, ANNOUNCEMENT_UPDATED, payload.model_dump())
        logger.info(f"Anuncio {announcement_id} editado por el gimnasio {principal.id}")
        return announcement

    def delete(self, db: Session, principal: Principal, announcement_id: int) -> None:
        announcement = self._authored(db, principal, announcement_id)
        gym_id = announcement.gym_id
        with transaction(db):
            announcement_repository.remove(db, id=announcement_id, commit=False)

        self.publisher.publish(gym_id, ANNOUNCEMENT_DELETED, {"id": announcement_id, "gym_id": gym_id})
        logger.info(f"Anuncio {announcement_id} eliminado por el gimnasio {principal.id}")

    def list_for_principal(self, db: Session, principal: Principal, skip: int = 0, limit: int = 100) -> List[Announcement]:
        """
        El gimnasio ve los suyos; miembros y entrenadores, los de su gimnasio.
        """
        if principal.role == UserRole.GYM:
            gym_id = principal.id
        else:
            roster = user_gym_repository.get_by_user(db, user_id=principal.id)
            if roster is None:
                return []
            gym_id = roster.gym_id
        return announcement_repository.list_by_gym(db, gym_id=gym_id, skip=skip, limit=limit)
