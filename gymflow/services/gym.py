import logging
from typing import List

from sqlalchemy.orm import Session

from gymflow.core.auth import Principal
from gymflow.core.exceptions import NotFoundError
from gymflow.db.transaction import transaction
from gymflow.models.gym import Gym
from gymflow.models.user_gym import GymRoleType
from gymflow.repositories.announcement import announcement_repository
from gymflow.repositories.gym import gym_repository
from gymflow.repositories.membership_request import membership_request_repository
from gymflow.repositories.plan import workout_plan_repository, diet_plan_repository
from gymflow.repositories.trainer_schedule import trainer_schedule_repository
from gymflow.repositories.user import user_repository
from gymflow.repositories.user_gym import user_gym_repository
from gymflow.schemas.gym import GymDetail, RosterEntry

logger = logging.getLogger(__name__)


class GymService:
    """
    Directorio de gimnasios y gestión del roster.

    El gimnasio es la fuente de verdad del roster: la fila ``user_gyms`` de un
    usuario es a la vez "pertenece al gimnasio" y su membresía.
    """

    def list_gyms(self, db: Session, skip: int = 0, limit: int = 100) -> List[Gym]:
        return gym_repository.get_active(db, skip=skip, limit=limit)

    def get_gym_detail(self, db: Session, gym_id: int) -> GymDetail:
        gym = gym_repository.get(db, id=gym_id)
        if not gym:
            raise NotFoundError("Gimnasio no encontrado")
        detail = GymDetail.model_validate(gym, from_attributes=True)
        detail.member_count = user_gym_repository.count_by_gym(db, gym_id=gym_id, role=GymRoleType.MEMBER)
        detail.trainer_count = user_gym_repository.count_by_gym(db, gym_id=gym_id, role=GymRoleType.TRAINER)
        return detail

    def list_roster(
        self, db: Session, principal: Principal, role: GymRoleType, skip: int = 0, limit: int = 100
    ) -> List[RosterEntry]:
        rows = user_gym_repository.list_by_gym(db, gym_id=principal.id, role=role, skip=skip, limit=limit)
        users = {u.id: u for u in user_repository.get_many(db, ids=[r.user_id for r in rows])}

        roster = []
        for row in rows:
            user = users.get(row.user_id)
            if user is None:
                continue
            roster.append(RosterEntry(
                user_id=user.id,
                full_name=user.full_name,
                email=user.email,
                role=row.role,
                joined_at=row.created_at,
                membership_duration=row.membership_duration,
                membership_start=row.membership_start,
                membership_expires_at=row.membership_expires_at,
                membership_status=row.membership_status,
            ))
        return roster

    def remove_from_roster(self, db: Session, principal: Principal, user_id: int, role: GymRoleType) -> None:
        """
        Saca a un miembro o entrenador del roster. Para miembros la membresía
        desaparece con la fila.
        """
        row = user_gym_repository.get_in_gym(db, user_id=user_id, gym_id=principal.id, role=role)
        if row is None:
            raise NotFoundError(f"El usuario no es {role.value} de este gimnasio")
        with transaction(db):
            user_gym_repository.remove(db, id=row.id, commit=False)
        logger.info(f"{role.value} {user_id} eliminado del roster del gimnasio {principal.id}")

    def delete_gym(self, db: Session, gym_id: int) -> None:
        """
        Borrado administrativo de un gimnasio.

        Elimina roster, solicitudes de membresía y anuncios; las franjas y los
        planes conservan su historial sin referencia al gimnasio.
        """
        gym = gym_repository.get(db, id=gym_id)
        if not gym:
            raise NotFoundError("Gimnasio no encontrado")

        with transaction(db):
            roster = user_gym_repository.delete_by_gym(db, gym_id=gym_id)
            requests = membership_request_repository.delete_by_gym(db, gym_id=gym_id)
            announcements = announcement_repository.delete_by_gym(db, gym_id=gym_id)
            trainer_schedule_repository.detach_gym(db, gym_id=gym_id)
            workout_plan_repository.detach_gym(db, gym_id=gym_id)
            diet_plan_repository.detach_gym(db, gym_id=gym_id)
            gym_repository.remove(db, id=gym_id, commit=False)

        logger.info(
            f"Gimnasio {gym_id} eliminado: {roster} filas de roster, {requests} solicitudes, "
            f"{announcements} anuncios"
        )


gym_service = GymService()
