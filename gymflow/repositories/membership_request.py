from typing import List, Optional

from sqlalchemy.orm import Session

from gymflow.repositories.base import BaseRepository
from gymflow.models.membership_request import MembershipRequest, RequestStatus


class MembershipRequestRepository(BaseRepository[MembershipRequest, dict, dict]):
    def get_pending(self, db: Session, *, user_id: int, gym_id: int) -> Optional[MembershipRequest]:
        """
        Solicitud pendiente para el par (usuario, gimnasio), si existe.
        """
        return db.query(MembershipRequest).filter(
            MembershipRequest.user_id == user_id,
            MembershipRequest.gym_id == gym_id,
            MembershipRequest.status == RequestStatus.PENDING,
        ).first()

    def list_by_user(self, db: Session, *, user_id: int, skip: int = 0, limit: int = 100) -> List[MembershipRequest]:
        return db.query(MembershipRequest).filter(
            MembershipRequest.user_id == user_id
        ).order_by(MembershipRequest.id.desc()).offset(skip).limit(limit).all()

    def list_by_gym(
        self, db: Session, *, gym_id: int, status: Optional[RequestStatus] = None,
        skip: int = 0, limit: int = 100
    ) -> List[MembershipRequest]:
        query = db.query(MembershipRequest).filter(MembershipRequest.gym_id == gym_id)
        if status is not None:
            query = query.filter(MembershipRequest.status == status)
        return query.order_by(MembershipRequest.id.desc()).offset(skip).limit(limit).all()

    def delete_by_gym(self, db: Session, *, gym_id: int) -> int:
        return db.query(MembershipRequest).filter(
            MembershipRequest.gym_id == gym_id
        ).delete(synchronize_session=False)


membership_request_repository = MembershipRequestRepository(MembershipRequest)
