from sqlalchemy import Column, Integer, ForeignKey, DateTime, Text

from gymflow.core.timezone_utils import utcnow
from gymflow.db.base_class import Base


class Announcement(Base):
    """Anuncio de un gimnasio para su roster de miembros."""
    __tablename__ = "announcements"

    id = Column(Integer, primary_key=True, index=True)
    gym_id = Column(Integer, ForeignKey("gyms.id"), nullable=False, index=True)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, onupdate=utcnow)
