import logging

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from gymflow.core.config import get_settings

logger = logging.getLogger(__name__)

settings_instance = get_settings()
db_url = str(settings_instance.DATABASE_URL)

# Ocultar credenciales en el log
display_url = db_url
if "@" in display_url:
    display_url = f"{display_url.split('://')[0]}://***@{display_url.split('@', 1)[1]}"

connect_args = {}
engine_kwargs = {"pool_pre_ping": True}
if db_url.startswith("sqlite"):
    # SQLite se usa en desarrollo y tests; los handlers corren en el threadpool
    connect_args["check_same_thread"] = False
    engine_kwargs = {}
else:
    engine_kwargs.update(pool_size=10, max_overflow=20, pool_timeout=30, pool_recycle=180)

engine = create_engine(db_url, echo=False, connect_args=connect_args, **engine_kwargs)
logger.info(f"Engine de base de datos creado: {display_url}")

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    """Crea las tablas que falten (entornos sin migraciones)."""
    from gymflow.db.base import Base
    Base.metadata.create_all(bind=engine)


def get_session_factory() -> sessionmaker:
    """
    Fábrica de sesiones para conexiones de larga duración (WebSocket).

    Quien la usa abre una sesión corta con ``with factory() as db`` y la
    cierra antes de quedarse esperando, para no retener una conexión del pool.
    """
    return SessionLocal


# Dependencia para obtener la sesión de DB
def get_db():
    db = SessionLocal()
    try:
        yield db
    except SQLAlchemyError as e:
        logger.error(f"Error de SQLAlchemy en la sesión: {e}", exc_info=True)
        db.rollback()
        raise
    finally:
        db.close()
