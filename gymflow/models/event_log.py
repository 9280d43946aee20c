from sqlalchemy import Column, Integer, String, DateTime

from gymflow.core.timezone_utils import utcnow
from gymflow.db.base_class import Base


class EventLog(Base):
    """Evento de uso (p. ej. visita de página) registrado por cualquier cuenta."""
    __tablename__ = "event_logs"

    id = Column(Integer, primary_key=True, index=True)
    event = Column(String(100), nullable=False, default="Page View")
    page = Column(String(255), nullable=False, default="N/A")
    details = Column(String(500), nullable=True)
    actor_id = Column(Integer, nullable=False)
    actor_role = Column(String(20), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, index=True)
