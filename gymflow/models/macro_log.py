from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Float

from gymflow.core.timezone_utils import utcnow
from gymflow.db.base_class import Base


class MacroLog(Base):
    __tablename__ = "macro_logs"

    id = Column(Integer, primary_key=True, index=True)
    member_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    food = Column(String(200), nullable=False)
    calories = Column(Float, nullable=False, default=0)
    protein = Column(Float, nullable=False, default=0)
    carbs = Column(Float, nullable=False, default=0)
    fats = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, onupdate=utcnow)
