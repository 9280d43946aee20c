"""
Identidad del actor que hace la petición.

La emisión de tokens pertenece al servicio de identidad externo; aquí solo se
valida el bearer JWT (HS256, ``SECRET_KEY`` compartida) y se expone el
``Principal`` ``{id, role}``. La autorización fina (propietario, gimnasio del
entrenador...) es responsabilidad de cada servicio.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from pydantic import BaseModel

from gymflow.core.config import get_settings, Settings
from gymflow.core.exceptions import AuthenticationError, AuthorizationError
from gymflow.models.user import UserRole

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class Principal(BaseModel):
    # Para rol GYM el id es gyms.id; para el resto, user.id
    id: int
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def create_access_token(
    subject_id: int,
    role: UserRole,
    settings: Optional[Settings] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    settings = settings or get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    claims = {"sub": str(subject_id), "role": UserRole(role).value, "exp": expire}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str, settings: Optional[Settings] = None) -> Principal:
    settings = settings or get_settings()
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning(f"Token inválido: {e}")
        raise AuthenticationError("Token inválido o expirado")

    sub = payload.get("sub")
    role = payload.get("role")
    try:
        return Principal(id=int(sub), role=UserRole(role))
    except (TypeError, ValueError):
        raise AuthenticationError("El token no contiene un actor válido (sub/role)")


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Falta el header Authorization: Bearer <token>")
    return decode_access_token(credentials.credentials, settings)


def require_role(*roles: UserRole) -> Callable[..., Principal]:
    """Dependencia que exige uno de los roles indicados."""
    allowed = set(roles)

    def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in allowed:
            logger.warning(
                f"Acceso denegado: rol {principal.role.value} no permitido "
                f"(requiere {', '.join(r.value for r in roles)})"
            )
            raise AuthorizationError("Tu rol no tiene permiso para esta operación")
        return principal

    return dependency
