from typing import List, Optional

from sqlalchemy.orm import Session

from gymflow.repositories.base import BaseRepository
from gymflow.models.user_gym import UserGym, GymRoleType


class UserGymRepository(BaseRepository[UserGym, dict, dict]):
    def get_by_user(self, db: Session, *, user_id: int) -> Optional[UserGym]:
        """
        Fila de roster del usuario (como mucho una).
        """
        return db.query(UserGym).filter(UserGym.user_id == user_id).first()

    def get_in_gym(
        self, db: Session, *, user_id: int, gym_id: int, role: Optional[GymRoleType] = None
    ) -> Optional[UserGym]:
        query = db.query(UserGym).filter(UserGym.user_id == user_id, UserGym.gym_id == gym_id)
        if role is not None:
            query = query.filter(UserGym.role == role)
        return query.first()

    def list_by_gym(
        self, db: Session, *, gym_id: int, role: Optional[GymRoleType] = None,
        skip: int = 0, limit: int = 100
    ) -> List[UserGym]:
        query = db.query(UserGym).filter(UserGym.gym_id == gym_id)
        if role is not None:
            query = query.filter(UserGym.role == role)
        return query.order_by(UserGym.id).offset(skip).limit(limit).all()

    def count_by_gym(self, db: Session, *, gym_id: int, role: GymRoleType) -> int:
        return db.query(UserGym).filter(UserGym.gym_id == gym_id, UserGym.role == role).count()

    def delete_by_gym(self, db: Session, *, gym_id: int) -> int:
        """Elimina el roster completo del gimnasio (sin commit)."""
        return db.query(UserGym).filter(UserGym.gym_id == gym_id).delete(synchronize_session=False)


user_gym_repository = UserGymRepository(UserGym)
