from typing import Optional
from datetime import datetime
from pydantic import BaseModel

from gymflow.models.user_gym import GymRoleType


class Gym(BaseModel):
    id: int
    name: str
    email: str
    address: Optional[str] = None
    phone: Optional[str] = None
    description: Optional[str] = None
    logo_url: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GymDetail(Gym):
    member_count: int = 0
    trainer_count: int = 0


class RosterEntry(BaseModel):
    user_id: int
    full_name: Optional[str] = None
    email: str
    role: GymRoleType
    joined_at: Optional[datetime] = None
    membership_duration: Optional[str] = None
    membership_start: Optional[datetime] = None
    membership_expires_at: Optional[datetime] = None
    membership_status: Optional[str] = None
