"""
Errores de dominio del motor de membresías, agendas, planes y anuncios.

Los servicios lanzan estas excepciones; el manejador registrado en
``gymflow.main`` las traduce a ``{"message": ..., "errorKind": ...}`` con el
código HTTP correspondiente.
"""

from typing import Optional


class GymFlowError(Exception):
    status_code: int = 500
    error_kind: str = "GymFlowError"

    def __init__(self, message: str, *, error_kind: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if error_kind:
            self.error_kind = error_kind

    def to_payload(self) -> dict:
        return {"message": self.message, "errorKind": self.error_kind}


class ValidationError(GymFlowError):
    """Entrada mal formada o incompleta."""
    status_code = 400
    error_kind = "ValidationError"


class AuthenticationError(GymFlowError):
    status_code = 401
    error_kind = "AuthenticationError"


class AuthorizationError(GymFlowError):
    """Rol incorrecto o actor que no es el propietario."""
    status_code = 403
    error_kind = "AuthorizationError"


class NotFoundError(GymFlowError):
    status_code = 404
    error_kind = "NotFoundError"


class ConflictError(GymFlowError):
    """Duplicado de una solicitud pendiente o de un recurso ya ocupado."""
    status_code = 409
    error_kind = "ConflictError"


class InvalidStateError(GymFlowError):
    """Transición intentada desde un estado no elegible."""
    status_code = 409
    error_kind = "InvalidStateError"
