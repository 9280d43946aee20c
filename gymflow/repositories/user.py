from typing import List, Optional

from sqlalchemy.orm import Session

from gymflow.repositories.base import BaseRepository
from gymflow.models.user import User, UserRole


class UserRepository(BaseRepository[User, dict, dict]):
    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    def get_with_role(self, db: Session, *, user_id: int, role: UserRole) -> Optional[User]:
        """
        Obtiene un usuario solo si tiene el rol indicado.
        """
        return db.query(User).filter(User.id == user_id, User.role == role).first()

    def get_many(self, db: Session, *, ids: List[int]) -> List[User]:
        if not ids:
            return []
        return db.query(User).filter(User.id.in_(ids)).all()


user_repository = UserRepository(User)
