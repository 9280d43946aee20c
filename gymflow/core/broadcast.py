"""
Canal de difusión de anuncios por gimnasio.

Contrato de entrega: como mucho una vez por sesión conectada y sin garantías
(best-effort). No hay reintentos; un cliente desconectado pierde los eventos
hasta su siguiente carga completa. Publicar nunca bloquea ni falla la petición
que originó el evento: los errores de entrega se registran y se descartan.

Flujo:
    servicio -> Broadcaster.publish(gym_id, event, payload)
        - sin Redis: ConnectionRegistry.deliver() local
        - con Redis: PUBLISH en "<prefijo>:<gym_id>"; cada worker escucha el
          patrón y entrega a sus propias sesiones
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional, Set

from fastapi import BackgroundTasks
from fastapi.encoders import jsonable_encoder

from gymflow.core.config import Settings
from gymflow.db.redis_client import create_redis_pool, redis_from_pool, close_redis_pool

logger = logging.getLogger(__name__)

# Nombres de evento que consumen los clientes
ANNOUNCEMENT_CREATED = "announcement"
ANNOUNCEMENT_UPDATED = "announcementUpdate"
ANNOUNCEMENT_DELETED = "announcementDelete"


class ConnectionRegistry:
    """
    Sesiones WebSocket conectadas, agrupadas por gimnasio.

    Cada sesión se une exactamente a un canal (el gimnasio de su miembro,
    resuelto al conectar). Solo se accede desde el event loop del servidor.
    """

    def __init__(self, send_timeout: float = 2.0):
        self.send_timeout = send_timeout
        self._rooms: Dict[int, Set[Any]] = {}

    def join(self, gym_id: int, session: Any) -> None:
        self._rooms.setdefault(gym_id, set()).add(session)
        logger.debug(f"Sesión unida al canal del gimnasio {gym_id} ({len(self._rooms[gym_id])} conectadas)")

    def leave(self, gym_id: int, session: Any) -> None:
        room = self._rooms.get(gym_id)
        if not room:
            return
        room.discard(session)
        if not room:
            del self._rooms[gym_id]
        logger.debug(f"Sesión abandonó el canal del gimnasio {gym_id}")

    def subscriber_count(self, gym_id: int) -> int:
        return len(self._rooms.get(gym_id, ()))

    async def _send(self, gym_id: int, session: Any, message: dict) -> bool:
        try:
            await asyncio.wait_for(session.send_json(message), timeout=self.send_timeout)
            return True
        except Exception as e:
            # Sesión lenta o caída: se descarta sin reintentar
            logger.warning(f"Entrega fallida en canal del gimnasio {gym_id}: {e!r}. Sesión descartada.")
            self.leave(gym_id, session)
            return False

    async def deliver(self, gym_id: int, event: str, payload: Any) -> int:
        """Envía el evento a todas las sesiones del gimnasio. Devuelve cuántas lo recibieron."""
        sessions = list(self._rooms.get(gym_id, ()))
        if not sessions:
            return 0
        message = {"event": event, "data": payload}
        results = await asyncio.gather(*(self._send(gym_id, s, message) for s in sessions))
        delivered = sum(1 for ok in results if ok)
        logger.debug(f"Evento '{event}' entregado a {delivered}/{len(sessions)} sesiones del gimnasio {gym_id}")
        return delivered

    async def close_all(self) -> None:
        for gym_id, room in list(self._rooms.items()):
            for session in list(room):
                try:
                    await session.close()
                except Exception as e:
                    logger.debug(f"Error cerrando sesión del gimnasio {gym_id}: {e!r}")
        self._rooms.clear()


class Broadcaster:
    """Interfaz publish(topic, event) del canal; vive en ``app.state``."""

    def __init__(self, settings: Settings, registry: Optional[ConnectionRegistry] = None):
        self.settings = settings
        self.registry = registry or ConnectionRegistry(send_timeout=settings.BROADCAST_SEND_TIMEOUT)
        self._pool = None
        self._listener: Optional[asyncio.Task] = None

    def channel_for(self, gym_id: int) -> str:
        return f"{self.settings.BROADCAST_CHANNEL_PREFIX}:{gym_id}"

    @property
    def relay_enabled(self) -> bool:
        return self._pool is not None

    async def start(self) -> None:
        try:
            self._pool = create_redis_pool(self.settings)
        except Exception as e:
            logger.error(f"No se pudo crear el pool de Redis, se usará entrega local: {e}", exc_info=True)
            self._pool = None
        if self._pool is not None:
            self._listener = asyncio.create_task(self._listen())

    async def stop(self) -> None:
        if self._listener is not None:
            self._listener.cancel()
            try:
                await self._listener
            except asyncio.CancelledError:
                pass
            self._listener = None
        await close_redis_pool(self._pool)
        self._pool = None
        await self.registry.close_all()

    async def publish(self, gym_id: int, event: str, payload: Any) -> None:
        """Fire-and-forget: nunca lanza excepciones al llamante."""
        data = jsonable_encoder(payload)
        try:
            if self._pool is not None:
                client = redis_from_pool(self._pool)
                try:
                    await client.publish(self.channel_for(gym_id), json.dumps({"event": event, "data": data}))
                finally:
                    await client.aclose()
            else:
                await self.registry.deliver(gym_id, event, data)
        except Exception as e:
            logger.warning(f"Publicación de '{event}' para el gimnasio {gym_id} descartada: {e!r}")

    async def _listen(self) -> None:
        client = redis_from_pool(self._pool)
        pubsub = client.pubsub()
        pattern = f"{self.settings.BROADCAST_CHANNEL_PREFIX}:*"
        try:
            await pubsub.psubscribe(pattern)
            logger.info(f"Relay de anuncios escuchando '{pattern}'")
            while True:
                message = await pubsub.get_message(ignore_subscribe_messages=True, timeout=1.0)
                if message is None or message.get("type") != "pmessage":
                    continue
                await self._relay(message)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Relay de anuncios detenido: {e}", exc_info=True)
        finally:
            try:
                await pubsub.aclose()
                await client.aclose()
            except Exception as e:
                logger.debug(f"Error cerrando pubsub: {e!r}")

    async def _relay(self, message: dict) -> None:
        try:
            gym_id = int(str(message["channel"]).rsplit(":", 1)[1])
            body = json.loads(message["data"])
            await self.registry.deliver(gym_id, body["event"], body.get("data"))
        except (KeyError, IndexError, ValueError, TypeError) as e:
            logger.warning(f"Mensaje de relay ignorado: {e!r}")


class BackgroundPublisher:
    """
    Programa ``Broadcaster.publish`` como tarea de fondo de la respuesta HTTP.

    La difusión se ejecuta después de enviar la respuesta, así un suscriptor
    lento nunca retrasa al autor del anuncio.
    """

    def __init__(self, broadcaster: Broadcaster, background_tasks: BackgroundTasks):
        self.broadcaster = broadcaster
        self.background_tasks = background_tasks

    def publish(self, gym_id: int, event: str, payload: Any) -> None:
        self.background_tasks.add_task(self.broadcaster.publish, gym_id, event, payload)
