from typing import Any, Dict, List, Union
from functools import lru_cache
import logging

from pydantic import AnyHttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Configurar el logger
logger = logging.getLogger(__name__)

LOG_LEVEL_NAMES = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"  # Permitir campos extra en .env
    )

    # Configuración básica
    API_V1_STR: str = "/api/v1"
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    # 60 minutos * 24 horas * 8 días = 8 días
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 8

    # Información del proyecto
    PROJECT_NAME: str = "GymFlow API"
    PROJECT_DESCRIPTION: str = "API con FastAPI para membresías, agendas de entrenadores y planes"
    VERSION: str = "0.1.0"

    # Debug mode
    DEBUG_MODE: bool = False

    # Logging: LOG_DIR vacío desactiva el fichero; LOG_LEVEL vacío sigue a DEBUG_MODE
    LOG_LEVEL: str = ""
    LOG_DIR: str = "logs"
    LOG_FILE_PREFIX: str = "gymflow"
    LOGGER_LEVELS: Dict[str, str] = {
        "uvicorn": "INFO",
        "uvicorn.access": "INFO",
        "sqlalchemy.engine": "WARNING",
    }

    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().upper()
            if v and v not in LOG_LEVEL_NAMES:
                raise ValueError(f"Nivel de log desconocido: {v}")
        return v

    # CORS
    BACKEND_CORS_ORIGINS: List[AnyHttpUrl] = []

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    DATABASE_URL: str = "sqlite:///./gymflow.db"

    @field_validator("DATABASE_URL", mode="before")
    def ensure_proper_url_format(cls, v: Any) -> Any:
        """Asegura que DATABASE_URL use el esquema postgresql:// que espera SQLAlchemy."""
        if isinstance(v, str) and v.startswith("postgres://"):
            logger.info("Corrigiendo formato de postgres:// a postgresql://")
            return "postgresql://" + v[len("postgres://"):]
        return v

    # Redis (opcional): relay de anuncios entre workers
    REDIS_URL: str = ""
    REDIS_POOL_MAX_CONNECTIONS: int = 50
    REDIS_POOL_SOCKET_TIMEOUT: int = 5

    @field_validator("REDIS_URL", mode="before")
    def clean_redis_url(cls, v: Any) -> Any:
        if isinstance(v, str):
            # Eliminar comentarios y espacios que suelen colarse desde .env
            if "#" in v:
                v = v.split("#")[0]
            return v.strip()
        return v

    # Canal de anuncios
    BROADCAST_CHANNEL_PREFIX: str = "gymflow:gym"
    BROADCAST_SEND_TIMEOUT: float = 2.0

    # Políticas del motor de membresías / agendas / planes
    MEMBERSHIP_RENEWAL_POLICY: str = "replace"
    ALLOW_OVERLAPPING_SLOTS: bool = True
    REQUIRE_APPROVED_PLAN_REQUEST: bool = False

    @field_validator("MEMBERSHIP_RENEWAL_POLICY")
    def validate_renewal_policy(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("replace", "stack"):
            raise ValueError("MEMBERSHIP_RENEWAL_POLICY debe ser 'replace' o 'stack'")
        return v


# Usar una función con caché para obtener la configuración
@lru_cache()
def get_settings() -> Settings:
    settings = Settings()
    logger.info("Configuración cargada correctamente")
    return settings
