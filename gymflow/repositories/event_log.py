from datetime import datetime
from typing import Dict

from sqlalchemy import func
from sqlalchemy.orm import Session

from gymflow.repositories.base import BaseRepository
from gymflow.models.event_log import EventLog


class EventLogRepository(BaseRepository[EventLog, dict, dict]):
    def _count_by(self, db: Session, column, since: datetime) -> Dict[str, int]:
        rows = db.query(column, func.count(EventLog.id)).filter(
            EventLog.created_at >= since
        ).group_by(column).all()
        return {str(key): count for key, count in rows}

    def count_since(self, db: Session, *, since: datetime) -> int:
        return db.query(EventLog).filter(EventLog.created_at >= since).count()

    def count_by_event(self, db: Session, *, since: datetime) -> Dict[str, int]:
        return self._count_by(db, EventLog.event, since)

    def count_by_role(self, db: Session, *, since: datetime) -> Dict[str, int]:
        return self._count_by(db, EventLog.actor_role, since)

    def count_by_page(self, db: Session, *, since: datetime) -> Dict[str, int]:
        return self._count_by(db, EventLog.page, since)


event_log_repository = EventLogRepository(EventLog)
