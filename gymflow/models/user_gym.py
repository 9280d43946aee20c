from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum
from sqlalchemy.schema import UniqueConstraint
import enum

from gymflow.core.timezone_utils import utcnow
from gymflow.db.base_class import Base


class GymRoleType(str, enum.Enum):
    """Rol de un usuario dentro del roster de un gimnasio."""
    TRAINER = "TRAINER"
    MEMBER = "MEMBER"


class UserGym(Base):
    """
    Roster de un gimnasio. Un usuario pertenece como mucho a un gimnasio;
    la membresía (duración y fechas) solo existe mientras exista esta fila.
    """
    __tablename__ = "user_gyms"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False)
    gym_id = Column(Integer, ForeignKey("gyms.id"), nullable=False, index=True)
    role = Column(Enum(GymRoleType), nullable=False, default=GymRoleType.MEMBER)
    created_at = Column(DateTime, default=utcnow)

    # --- Campos de Membresía (solo miembros) ---
    membership_duration = Column(String(20), nullable=True)
    membership_start = Column(DateTime, nullable=True)
    membership_expires_at = Column(DateTime, nullable=True, index=True)

    __table_args__ = (
        UniqueConstraint("user_id", name="uq_user_gym_user"),
    )

    @property
    def membership_status(self):
        # Derivado: activa mientras no haya vencido
        if self.membership_expires_at is None:
            return None
        return "active" if self.membership_expires_at > utcnow() else "expired"
