"""
Pool de conexiones Redis (redis.asyncio) para el relay de anuncios.

El pool no es global: lo crea el ``Broadcaster`` al arrancar la aplicación y lo
cierra al apagarla. Sin ``REDIS_URL`` no se crea pool y el reparto de eventos
queda limitado a las sesiones conectadas a este proceso.
"""

import logging
from typing import Optional

from redis.asyncio import ConnectionPool, Redis

from gymflow.core.config import Settings

logger = logging.getLogger(__name__)


def create_redis_pool(settings: Settings) -> Optional[ConnectionPool]:
    redis_url = settings.REDIS_URL
    if not redis_url:
        logger.info("REDIS_URL vacía: relay de anuncios deshabilitado (solo entrega local).")
        return None

    logger.info("Inicializando connection pool para Redis...")
    pool = ConnectionPool.from_url(
        redis_url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=settings.REDIS_POOL_MAX_CONNECTIONS,
        socket_keepalive=True,
        socket_timeout=settings.REDIS_POOL_SOCKET_TIMEOUT,
        health_check_interval=30,
    )
    logger.info(
        f"Connection pool de Redis inicializado (max_connections={settings.REDIS_POOL_MAX_CONNECTIONS})."
    )
    return pool


def redis_from_pool(pool: ConnectionPool) -> Redis:
    return Redis(connection_pool=pool)


async def close_redis_pool(pool: Optional[ConnectionPool]) -> None:
    if pool is None:
        return
    logger.info("Cerrando connection pool de Redis...")
    await pool.disconnect()
    logger.info("Connection pool de Redis cerrado.")
