import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gymflow.core.exceptions import ConflictError

logger = logging.getLogger(__name__)


@contextmanager
def transaction(db: Session, conflict_message: str = "El recurso ya existe o fue modificado por otra petición"):
    """
    Agrupa las escrituras de una operación en un único commit.

    Cualquier excepción hace rollback y se relanza, de modo que nunca queda
    una transición a medias. Las violaciones de unicidad se traducen a
    ``ConflictError``.
    """
    try:
        yield db
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Conflicto de integridad, rollback: {e.orig!r}")
        raise ConflictError(conflict_message)
    except Exception:
        db.rollback()
        raise
