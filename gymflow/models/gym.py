from sqlalchemy import Column, Integer, String, Boolean, DateTime

from gymflow.core.timezone_utils import utcnow
from gymflow.db.base_class import Base


class Gym(Base):
    """
    Cuenta de gimnasio (tenant). El gimnasio es la autoridad sobre su roster
    de miembros y entrenadores, que vive en ``user_gyms``.
    """
    __tablename__ = "gyms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(100), unique=True, nullable=False, index=True)
    address = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    description = Column(String(500), nullable=True)
    logo_url = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
