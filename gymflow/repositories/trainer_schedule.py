from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from gymflow.repositories.base import BaseRepository
from gymflow.models.trainer_schedule import TrainerSchedule, SlotStatus
from gymflow.models.user_gym import UserGym, GymRoleType


class TrainerScheduleRepository(BaseRepository[TrainerSchedule, dict, dict]):
    def list_by_trainer(
        self, db: Session, *, trainer_id: int, status: Optional[SlotStatus] = None,
        skip: int = 0, limit: int = 100
    ) -> List[TrainerSchedule]:
        query = db.query(TrainerSchedule).filter(TrainerSchedule.trainer_id == trainer_id)
        if status is not None:
            query = query.filter(TrainerSchedule.status == status)
        return query.order_by(TrainerSchedule.start_time).offset(skip).limit(limit).all()

    def list_available_for_gym(
        self, db: Session, *, gym_id: int, since: Optional[datetime] = None,
        skip: int = 0, limit: int = 100
    ) -> List[TrainerSchedule]:
        """
        Franjas libres de los entrenadores que están hoy en el roster del gimnasio.

        Se cruza con ``user_gyms`` en lugar de usar ``TrainerSchedule.gym_id``,
        que solo guarda el gimnasio del entrenador al publicar la franja.
        """
        query = db.query(TrainerSchedule).join(
            UserGym, UserGym.user_id == TrainerSchedule.trainer_id
        ).filter(
            UserGym.gym_id == gym_id,
            UserGym.role == GymRoleType.TRAINER,
            TrainerSchedule.status == SlotStatus.AVAILABLE,
        )
        if since is not None:
            query = query.filter(TrainerSchedule.start_time >= since)
        return query.order_by(TrainerSchedule.start_time).offset(skip).limit(limit).all()

    def list_booked_by_member(
        self, db: Session, *, member_id: int, skip: int = 0, limit: int = 100
    ) -> List[TrainerSchedule]:
        return db.query(TrainerSchedule).filter(
            TrainerSchedule.booked_by_id == member_id,
            TrainerSchedule.status == SlotStatus.BOOKED,
        ).order_by(TrainerSchedule.start_time).offset(skip).limit(limit).all()

    def find_overlapping(
        self, db: Session, *, trainer_id: int, start_time: datetime, end_time: datetime
    ) -> Optional[TrainerSchedule]:
        """Primera franja del entrenador que se solapa con [start_time, end_time)."""
        return db.query(TrainerSchedule).filter(
            TrainerSchedule.trainer_id == trainer_id,
            TrainerSchedule.start_time < end_time,
            TrainerSchedule.end_time > start_time,
        ).first()

    def detach_gym(self, db: Session, *, gym_id: int) -> int:
        return db.query(TrainerSchedule).filter(
            TrainerSchedule.gym_id == gym_id
        ).update({TrainerSchedule.gym_id: None}, synchronize_session=False)


trainer_schedule_repository = TrainerScheduleRepository(TrainerSchedule)
