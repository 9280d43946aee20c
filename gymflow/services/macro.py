import logging
from typing import List

from sqlalchemy.orm import Session

from gymflow.core.auth import Principal
from gymflow.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from gymflow.db.transaction import transaction
from gymflow.models.macro_log import MacroLog
from gymflow.repositories.macro_log import macro_log_repository
from gymflow.schemas.macro import MacroLogCreate, MacroLogUpdate

logger = logging.getLogger(__name__)


class MacroLogService:
    """Registro de macronutrientes; cada entrada pertenece al miembro que la creó."""

    def _owned(self, db: Session, principal: Principal, log_id: int) -> MacroLog:
        entry = macro_log_repository.get(db, id=log_id)
        if not entry:
            raise NotFoundError("Registro de macros no encontrado")
        if entry.member_id != principal.id:
            raise AuthorizationError("Este registro pertenece a otro miembro")
        return entry

    def list_logs(self, db: Session, principal: Principal, skip: int = 0, limit: int = 100) -> List[MacroLog]:
        return macro_log_repository.list_by_member(db, member_id=principal.id, skip=skip, limit=limit)

    def create_log(self, db: Session, principal: Principal, log_in: MacroLogCreate) -> MacroLog:
        if not log_in.food.strip():
            raise ValidationError("El alimento no puede estar vacío")
        data = log_in.model_dump()
        data["member_id"] = principal.id
        with transaction(db):
            entry = macro_log_repository.create(db, obj_in=data, commit=False)
        logger.info(f"Registro de macros {entry.id} creado por el miembro {principal.id}")
        return entry

    def update_log(self, db: Session, principal: Principal, log_id: int, log_in: MacroLogUpdate) -> MacroLog:
        entry = self._owned(db, principal, log_id)
        data = log_in.model_dump(exclude_unset=True)
        if "food" in data and (data["food"] is None or not data["food"].strip()):
            raise ValidationError("El alimento no puede estar vacío")
        # Los valores numéricos nulos no borran el dato existente
        data = {k: v for k, v in data.items() if v is not None}
        with transaction(db):
            entry = macro_log_repository.update(db, db_obj=entry, obj_in=data, commit=False)
        return entry

    def delete_log(self, db: Session, principal: Principal, log_id: int) -> None:
        self._owned(db, principal, log_id)
        with transaction(db):
            macro_log_repository.remove(db, id=log_id, commit=False)
        logger.info(f"Registro de macros {log_id} eliminado por el miembro {principal.id}")


macro_log_service = MacroLogService()
