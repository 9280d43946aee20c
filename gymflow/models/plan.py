from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum, Text, JSON, Index, text
import enum

from gymflow.core.timezone_utils import utcnow
from gymflow.db.base_class import Base
from gymflow.models.membership_request import RequestStatus


class PlanType(str, enum.Enum):
    WORKOUT = "workout"
    DIET = "diet"


class PlanRequest(Base):
    """
    Petición de un miembro a un entrenador para recibir un plan.
    Aprobarla no crea el plan: solo autoriza al entrenador a redactarlo.
    """
    __tablename__ = "plan_requests"

    id = Column(Integer, primary_key=True, index=True)
    member_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    trainer_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    request_type = Column(Enum(PlanType), nullable=False)
    status = Column(Enum(RequestStatus), nullable=False, default=RequestStatus.PENDING)
    created_at = Column(DateTime, default=utcnow)
    resolved_at = Column(DateTime, nullable=True)

    __table_args__ = (
        Index(
            "uq_plan_request_pending",
            "member_id", "trainer_id", "request_type",
            unique=True,
            postgresql_where=text("status = 'PENDING'"),
            sqlite_where=text("status = 'PENDING'"),
        ),
    )


class WorkoutPlan(Base):
    """Plan de entrenamiento. ``exercises``: lista ordenada de {name, sets, reps, rest}."""
    __tablename__ = "workout_plans"

    id = Column(Integer, primary_key=True, index=True)
    trainer_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    member_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    gym_id = Column(Integer, ForeignKey("gyms.id"), nullable=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    exercises = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, onupdate=utcnow)


class DietPlan(Base):
    """Plan de dieta. ``meals``: lista ordenada de {name, calories, protein, carbs, fats, time}."""
    __tablename__ = "diet_plans"

    id = Column(Integer, primary_key=True, index=True)
    trainer_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    member_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    gym_id = Column(Integer, ForeignKey("gyms.id"), nullable=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    meals = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, onupdate=utcnow)
