from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum, Boolean, Index, text
import enum

from gymflow.core.timezone_utils import utcnow
from gymflow.db.base_class import Base
from gymflow.models.user_gym import GymRoleType


class RequestStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class MembershipRequest(Base):
    """
    Solicitud de alta (join) o de renovación de un usuario contra un gimnasio.
    Los miembros indican duración; los entrenadores solicitan unirse sin ella.
    """
    __tablename__ = "membership_requests"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    gym_id = Column(Integer, ForeignKey("gyms.id"), nullable=False, index=True)
    requester_role = Column(Enum(GymRoleType), nullable=False, default=GymRoleType.MEMBER)
    requested_duration = Column(String(20), nullable=True)
    is_renewal = Column(Boolean, default=False, nullable=False)
    status = Column(Enum(RequestStatus), nullable=False, default=RequestStatus.PENDING)

    created_at = Column(DateTime, default=utcnow)
    resolved_at = Column(DateTime, nullable=True)
    resolved_by_id = Column(Integer, nullable=True)
    resolved_by_role = Column(String(20), nullable=True)

    __table_args__ = (
        # Como mucho una solicitud pendiente por par (usuario, gimnasio)
        Index(
            "uq_membership_request_pending",
            "user_id", "gym_id",
            unique=True,
            postgresql_where=text("status = 'PENDING'"),
            sqlite_where=text("status = 'PENDING'"),
        ),
    )
