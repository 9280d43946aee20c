from typing import Optional, Literal
from datetime import datetime
from pydantic import BaseModel

from gymflow.models.membership_request import RequestStatus
from gymflow.models.user_gym import GymRoleType


# Para crear solicitudes (alta o renovación)
class MembershipRequestCreate(BaseModel):
    gym_id: int
    # Obligatoria para miembros; los entrenadores la omiten
    duration: Optional[str] = None


# Decisión sobre una solicitud pendiente
class RequestAction(BaseModel):
    action: Literal["approve", "deny"]


# Para respuestas de API
class MembershipRequest(BaseModel):
    id: int
    user_id: int
    gym_id: int
    requester_role: GymRoleType
    requested_duration: Optional[str] = None
    is_renewal: bool
    status: RequestStatus
    created_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MembershipInfo(BaseModel):
    user_id: int
    gym_id: Optional[int] = None
    duration: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Optional[Literal["active", "expired"]] = None


# Asignación directa de membresía por parte del gimnasio
class MembershipSet(BaseModel):
    duration: str
