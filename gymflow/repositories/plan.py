from typing import List, Optional

from sqlalchemy.orm import Session

from gymflow.repositories.base import BaseRepository
from gymflow.models.membership_request import RequestStatus
from gymflow.models.plan import PlanRequest, PlanType, WorkoutPlan, DietPlan


class PlanRequestRepository(BaseRepository[PlanRequest, dict, dict]):
    def get_pending(
        self, db: Session, *, member_id: int, trainer_id: int, request_type: PlanType
    ) -> Optional[PlanRequest]:
        return db.query(PlanRequest).filter(
            PlanRequest.member_id == member_id,
            PlanRequest.trainer_id == trainer_id,
            PlanRequest.request_type == request_type,
            PlanRequest.status == RequestStatus.PENDING,
        ).first()

    def has_approved(
        self, db: Session, *, member_id: int, trainer_id: int, request_type: PlanType
    ) -> bool:
        query = db.query(PlanRequest.id).filter(
            PlanRequest.member_id == member_id,
            PlanRequest.trainer_id == trainer_id,
            PlanRequest.request_type == request_type,
            PlanRequest.status == RequestStatus.APPROVED,
        )
        return db.query(query.exists()).scalar()

    def list_by_member(self, db: Session, *, member_id: int, skip: int = 0, limit: int = 100) -> List[PlanRequest]:
        return db.query(PlanRequest).filter(
            PlanRequest.member_id == member_id
        ).order_by(PlanRequest.id.desc()).offset(skip).limit(limit).all()

    def list_by_trainer(
        self, db: Session, *, trainer_id: int, status: Optional[RequestStatus] = None,
        skip: int = 0, limit: int = 100
    ) -> List[PlanRequest]:
        query = db.query(PlanRequest).filter(PlanRequest.trainer_id == trainer_id)
        if status is not None:
            query = query.filter(PlanRequest.status == status)
        return query.order_by(PlanRequest.id.desc()).offset(skip).limit(limit).all()


class PlanDocumentRepository(BaseRepository):
    """Consultas comunes a WorkoutPlan y DietPlan."""

    def list_by_trainer(self, db: Session, *, trainer_id: int, skip: int = 0, limit: int = 100):
        return db.query(self.model).filter(
            self.model.trainer_id == trainer_id
        ).order_by(self.model.id.desc()).offset(skip).limit(limit).all()

    def list_by_member(self, db: Session, *, member_id: int, skip: int = 0, limit: int = 100):
        return db.query(self.model).filter(
            self.model.member_id == member_id
        ).order_by(self.model.id.desc()).offset(skip).limit(limit).all()

    def detach_gym(self, db: Session, *, gym_id: int) -> int:
        return db.query(self.model).filter(
            self.model.gym_id == gym_id
        ).update({self.model.gym_id: None}, synchronize_session=False)


plan_request_repository = PlanRequestRepository(PlanRequest)
workout_plan_repository = PlanDocumentRepository(WorkoutPlan)
diet_plan_repository = PlanDocumentRepository(DietPlan)
