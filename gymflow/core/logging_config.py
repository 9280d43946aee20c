import logging
import os
import sys
from typing import Optional

from gymflow.core.config import Settings, get_settings
from gymflow.core.timezone_utils import utcnow

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-20s | %(filename)s:%(lineno)d | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(settings: Settings) -> int:
    """Nivel raíz: LOG_LEVEL si está definido; si no, DEBUG_MODE decide."""
    if settings.LOG_LEVEL:
        return logging.getLevelName(settings.LOG_LEVEL)
    return logging.DEBUG if settings.DEBUG_MODE else logging.INFO


def log_file_path(settings: Settings) -> Optional[str]:
    """Fichero diario ``<LOG_DIR>/<prefijo>_YYYYMMDD.log``, o None sin LOG_DIR."""
    if not settings.LOG_DIR:
        return None
    return os.path.join(settings.LOG_DIR, f"{settings.LOG_FILE_PREFIX}_{utcnow():%Y%m%d}.log")


def setup_logging(settings: Optional[Settings] = None) -> None:
    """
    Configura el logger raíz de GymFlow a partir de ``Settings``.

    Sustituye los handlers previos (Uvicorn puede haber añadido los suyos)
    por uno de consola y, si hay LOG_DIR, uno de fichero diario.
    """
    settings = settings or get_settings()
    root = logging.getLogger()
    level = resolve_level(settings)
    root.setLevel(level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]

    path = log_file_path(settings)
    if path is not None:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        handlers.append(logging.FileHandler(path))

    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name, logger_level in settings.LOGGER_LEVELS.items():
        logging.getLogger(name).setLevel(logger_level.upper())

    root.info("Logging de %s en nivel %s (fichero: %s)", settings.PROJECT_NAME, logging.getLevelName(level), path or "no")
