import logging
from datetime import timedelta

from sqlalchemy.orm import Session

from gymflow.core.auth import Principal
from gymflow.core.exceptions import ValidationError
from gymflow.core.timezone_utils import utcnow
from gymflow.db.transaction import transaction
from gymflow.models.event_log import EventLog
from gymflow.repositories.event_log import event_log_repository
from gymflow.schemas.analytics import EventLogCreate, UsageSummary

logger = logging.getLogger(__name__)


class AnalyticsService:
    def log_event(self, db: Session, principal: Principal, event_in: EventLogCreate) -> EventLog:
        data = {
            "event": event_in.event or "Page View",
            "page": event_in.page or "N/A",
            "details": event_in.details,
            "actor_id": principal.id,
            "actor_role": principal.role.value,
            "created_at": utcnow(),
        }
        with transaction(db):
            entry = event_log_repository.create(db, obj_in=data, commit=False)
        logger.debug(f"Evento '{entry.event}' registrado para {principal.role.value} {principal.id}")
        return entry

    def usage_summary(self, db: Session, days: int = 30) -> UsageSummary:
        """Agregado de eventos de los últimos ``days`` días."""
        if days < 1:
            raise ValidationError("El número de días debe ser al menos 1")
        since = utcnow() - timedelta(days=days)
        return UsageSummary(
            days=days,
            total_events=event_log_repository.count_since(db, since=since),
            by_event=event_log_repository.count_by_event(db, since=since),
            by_role=event_log_repository.count_by_role(db, since=since),
            by_page=event_log_repository.count_by_page(db, since=since),
        )


analytics_service = AnalyticsService()
