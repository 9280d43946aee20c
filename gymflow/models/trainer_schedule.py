from sqlalchemy import Column, Integer, ForeignKey, DateTime, Enum, CheckConstraint
import enum

from gymflow.core.timezone_utils import utcnow
from gymflow.db.base_class import Base


class SlotStatus(str, enum.Enum):
    AVAILABLE = "available"
    BOOKED = "booked"


class TrainerSchedule(Base):
    """
    Franja de disponibilidad publicada por un entrenador. Una franja reservada
    es la propia reserva: pasa una única vez de AVAILABLE a BOOKED.
    """
    __tablename__ = "trainer_schedules"

    id = Column(Integer, primary_key=True, index=True)
    trainer_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    gym_id = Column(Integer, ForeignKey("gyms.id"), nullable=True, index=True)  # gimnasio al publicar, solo historial
    start_time = Column(DateTime, nullable=False, index=True)  # UTC
    end_time = Column(DateTime, nullable=False)  # UTC
    status = Column(Enum(SlotStatus), nullable=False, default=SlotStatus.AVAILABLE, index=True)
    booked_by_id = Column(Integer, ForeignKey("user.id"), nullable=True, index=True)
    booked_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow)

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_trainer_schedule_window"),
        CheckConstraint(
            "(status = 'BOOKED' AND booked_by_id IS NOT NULL) "
            "OR (status = 'AVAILABLE' AND booked_by_id IS NULL)",
            name="ck_trainer_schedule_booked_by",
        ),
    )
