from typing import List

from sqlalchemy.orm import Session

from gymflow.repositories.base import BaseRepository
from gymflow.models.macro_log import MacroLog


class MacroLogRepository(BaseRepository[MacroLog, dict, dict]):
    def list_by_member(self, db: Session, *, member_id: int, skip: int = 0, limit: int = 100) -> List[MacroLog]:
        return db.query(MacroLog).filter(
            MacroLog.member_id == member_id
        ).order_by(MacroLog.created_at.desc(), MacroLog.id.desc()).offset(skip).limit(limit).all()


macro_log_repository = MacroLogRepository(MacroLog)
