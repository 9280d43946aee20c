from typing import List

from sqlalchemy.orm import Session

from gymflow.repositories.base import BaseRepository
from gymflow.models.announcement import Announcement


class AnnouncementRepository(BaseRepository[Announcement, dict, dict]):
    def list_by_gym(self, db: Session, *, gym_id: int, skip: int = 0, limit: int = 100) -> List[Announcement]:
        """
        Historial de anuncios del gimnasio, del más reciente al más antiguo.
        """
        return db.query(Announcement).filter(
            Announcement.gym_id == gym_id
        ).order_by(Announcement.created_at.desc(), Announcement.id.desc()).offset(skip).limit(limit).all()

    def delete_by_gym(self, db: Session, *, gym_id: int) -> int:
        return db.query(Announcement).filter(Announcement.gym_id == gym_id).delete(synchronize_session=False)


announcement_repository = AnnouncementRepository(Announcement)
