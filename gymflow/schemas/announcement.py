from typing import Optional
from datetime import datetime
from pydantic import BaseModel


class AnnouncementCreate(BaseModel):
    message: str


class AnnouncementUpdate(BaseModel):
    message: str


class Announcement(BaseModel):
    id: int
    gym_id: int
    message: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
