from typing import List, Optional

from sqlalchemy.orm import Session

from gymflow.repositories.base import BaseRepository
from gymflow.models.gym import Gym


class GymRepository(BaseRepository[Gym, dict, dict]):
    def get_by_email(self, db: Session, *, email: str) -> Optional[Gym]:
        return db.query(Gym).filter(Gym.email == email).first()

    def get_active(self, db: Session, *, skip: int = 0, limit: int = 100) -> List[Gym]:
        return db.query(Gym).filter(Gym.is_active == True).order_by(Gym.name).offset(skip).limit(limit).all()  # noqa: E712


gym_repository = GymRepository(Gym)
