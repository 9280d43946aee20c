"""
Announcements WebSocket - real-time channel

A session authenticates with ``?token=<jwt>`` and joins exactly one gym
channel, resolved once at connect time: the member's or trainer's gym from
the roster, or the gym account itself. The server then pushes
``{"event": ..., "data": ...}`` messages for ``announcement``,
``announcementUpdate`` and ``announcementDelete``.

Delivery is best-effort and at most once per connected session; a client
that reconnects should reload ``GET /announcements``.
"""

import logging

from typing import Optional

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import sessionmaker
from starlette.concurrency import run_in_threadpool

from gymflow.api.deps import get_broadcaster
from gymflow.core.auth import Principal, decode_access_token
from gymflow.core.broadcast import Broadcaster
from gymflow.core.config import Settings, get_settings
from gymflow.core.exceptions import AuthenticationError
from gymflow.db.session import get_session_factory
from gymflow.models.user import UserRole
from gymflow.repositories.user_gym import user_gym_repository

logger = logging.getLogger(__name__)

router = APIRouter()

JOINED = "joinGym"


def _roster_gym_id(session_factory: sessionmaker, principal: Principal) -> Optional[int]:
    # La sesión se cierra aquí: el socket no retiene conexión del pool
    with session_factory() as db:
        roster = user_gym_repository.get_by_user(db, user_id=principal.id)
        return roster.gym_id if roster is not None else None


@router.websocket("/announcements")
async def announcements_socket(
    websocket: WebSocket,
    token: str = Query(""),
    session_factory: sessionmaker = Depends(get_session_factory),
    settings: Settings = Depends(get_settings),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    try:
        principal = decode_access_token(token, settings)
    except AuthenticationError as e:
        logger.warning(f"Conexión WebSocket rechazada: {e.message}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    if principal.role == UserRole.GYM:
        gym_id = principal.id
    else:
        gym_id = await run_in_threadpool(_roster_gym_id, session_factory, principal)

    if gym_id is None:
        logger.info(f"{principal.role.value} {principal.id} sin gimnasio: conexión WebSocket cerrada")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    registry = broadcaster.registry
    registry.join(gym_id, websocket)
    logger.info(f"{principal.role.value} {principal.id} conectado al canal del gimnasio {gym_id}")

    try:
        await websocket.send_json({"event": JOINED, "data": {"gym_id": gym_id}})
        while True:
            # Los mensajes del cliente (keepalive) se ignoran
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info(f"{principal.role.value} {principal.id} desconectado del canal del gimnasio {gym_id}")
    finally:
        registry.leave(gym_id, websocket)
