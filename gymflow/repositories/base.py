from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import update, delete
from sqlalchemy.orm import Session

from gymflow.db.base_class import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class BaseRepository(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        """
        Repository con operaciones CRUD por defecto.

        Las operaciones de escritura aceptan ``commit=False`` para que un
        servicio pueda agrupar varias en una sola transacción (se hace flush).
        """
        self.model = model

    def _finish(self, db: Session, commit: bool) -> None:
        if commit:
            db.commit()
        else:
            db.flush()

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        """
        Obtener un objeto por su ID.

        Args:
            db: Sesión de base de datos
            id: ID del objeto a obtener

        Returns:
            El objeto solicitado o None si no existe
        """
        return db.query(self.model).filter(self.model.id == id).first()

    def get_multi(
        self, db: Session, *, skip: int = 0, limit: int = 100,
        filters: Optional[Dict[str, Any]] = None
    ) -> List[ModelType]:
        """
        Obtener múltiples registros con filtros opcionales {campo: valor}.
        """
        query = db.query(self.model)
        if filters:
            for field, value in filters.items():
                if hasattr(self.model, field):
                    query = query.filter(getattr(self.model, field) == value)
        return query.order_by(self.model.id).offset(skip).limit(limit).all()

    def create(
        self, db: Session, *, obj_in: Union[CreateSchemaType, Dict[str, Any]], commit: bool = True
    ) -> ModelType:
        """
        Crear un nuevo registro.

        Args:
            db: Sesión de base de datos
            obj_in: Datos del objeto a crear (schema o dict)
            commit: Si es False solo se hace flush

        Returns:
            El objeto creado
        """
        # Usar model_dump() en lugar de jsonable_encoder() para preservar datetimes
        if isinstance(obj_in, dict):
            obj_in_data = dict(obj_in)
        else:
            obj_in_data = obj_in.model_dump()

        db_obj = self.model(**obj_in_data)
        db.add(db_obj)
        self._finish(db, commit)
        db.refresh(db_obj)
        return db_obj

    def update(
        self,
        db: Session,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]],
        commit: bool = True
    ) -> ModelType:
        """
        Actualizar un registro con los campos presentes en ``obj_in``.
        """
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)
        db.add(db_obj)
        self._finish(db, commit)
        db.refresh(db_obj)
        return db_obj

    def remove(self, db: Session, *, id: int, commit: bool = True) -> ModelType:
        """
        Eliminar un registro.

        Raises:
            ValueError: Si el objeto no existe
        """
        obj = self.get(db, id=id)
        if not obj:
            raise ValueError(f"Objeto con ID {id} no encontrado")
        db.delete(obj)
        self._finish(db, commit)
        return obj

    def conditional_update(
        self, db: Session, *, id: int, expected: Dict[str, Any], values: Dict[str, Any]
    ) -> int:
        """
        UPDATE atómico ``WHERE id = :id AND <expected>`` (compare-and-set).

        No hace commit. Devuelve el número de filas afectadas: 0 significa
        que otro actor cambió el estado antes que nosotros.
        """
        conditions = [self.model.id == id]
        for field, value in expected.items():
            conditions.append(getattr(self.model, field) == value)
        result = db.execute(
            update(self.model).where(*conditions).values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def conditional_delete(self, db: Session, *, id: int, expected: Dict[str, Any]) -> int:
        """DELETE atómico ``WHERE id = :id AND <expected>``; sin commit."""
        conditions = [self.model.id == id]
        for field, value in expected.items():
            conditions.append(getattr(self.model, field) == value)
        result = db.execute(
            delete(self.model).where(*conditions).execution_options(synchronize_session=False)
        )
        return result.rowcount

    def reload(self, db: Session, id: Any) -> Optional[ModelType]:
        """Vuelve a leer el objeto ignorando la copia en la identity map."""
        return db.get(self.model, id, populate_existing=True)

    def exists(self, db: Session, id: int) -> bool:
        query = db.query(self.model.id).filter(self.model.id == id)
        return db.query(query.exists()).scalar()
